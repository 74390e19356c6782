"""Unit tests for configuration schema and serialization."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from sirecoder.config import (
    CONFIG_FILENAME,
    AgentType,
    CheckerConfig,
    SirecoderConfig,
    find_config,
)


def test_default_config(default_config: SirecoderConfig) -> None:
    """Verify the built-in defaults."""
    assert default_config.agent.type is AgentType.CLAUDE_CODE
    assert default_config.language.export_marker == "^-^"
    assert default_config.language.excluded_dependencies == ["sire.sire", "quickcheck.sire"]
    assert default_config.max_rounds is None
    assert [c.extension for c in default_config.checkers] == [
        ".agda",
        ".kind2",
        ".c",
        ".ts",
        ".hs",
    ]


def test_resolve_model(default_config: SirecoderConfig) -> None:
    """Verify aliases map to model names and unknown names pass through."""
    agent = default_config.agent

    assert agent.resolve_model(None) == "sonnet"
    assert agent.resolve_model("o") == "opus"
    assert agent.resolve_model("h") == "haiku"
    assert agent.resolve_model("claude-sonnet-4-5") == "claude-sonnet-4-5"


def test_from_yaml_checker_table() -> None:
    """Verify a checker table from YAML replaces the default one."""
    config = SirecoderConfig.from_yaml(
        "max_rounds: 12\n"
        "checkers:\n"
        "  - extension: .py\n"
        "    command: python\n"
        "    args: [-m, py_compile]\n"
    )

    assert config.max_rounds == 12
    assert [c.extension for c in config.checkers] == [".py"]
    assert config.checkers[0].args == ["-m", "py_compile"]


def test_from_yaml_partial() -> None:
    """Verify unspecified sections keep their defaults."""
    config = SirecoderConfig.from_yaml("agent:\n  type: fake\n  script:\n    - <RESULT>x</RESULT>\n")

    assert config.agent.type is AgentType.FAKE
    assert config.agent.script == ["<RESULT>x</RESULT>"]
    assert config.check_timeout == 120


def test_from_yaml_empty() -> None:
    """Verify an empty file yields the defaults."""
    assert SirecoderConfig.from_yaml("") == SirecoderConfig.default()


@pytest.mark.parametrize("content", ["- a\n- b\n", "agent: [unclosed\n"])
def test_from_yaml_invalid(content: str) -> None:
    """Verify non-mapping and malformed YAML are rejected."""
    with pytest.raises(ValueError):
        SirecoderConfig.from_yaml(content)


def test_duplicate_checker_extensions() -> None:
    """Verify each extension has at most one checker."""
    with pytest.raises(ValidationError, match="unique"):
        SirecoderConfig(
            checkers=[
                CheckerConfig(extension=".hs", command="ghc"),
                CheckerConfig(extension=".hs", command="stack"),
            ]
        )


def test_checker_extension_needs_dot() -> None:
    """Verify checker extensions start with a dot."""
    with pytest.raises(ValidationError):
        CheckerConfig(extension="hs", command="ghc")


def test_enabled_checkers() -> None:
    """Verify disabled checkers are filtered out."""
    config = SirecoderConfig(
        checkers=[
            CheckerConfig(extension=".hs", command="ghc"),
            CheckerConfig(extension=".c", command="gcc", enabled=False),
        ]
    )

    assert [c.extension for c in config.get_enabled_checkers()] == [".hs"]


def test_load_resolves_guide_path(tmp_path: Path) -> None:
    """Verify relative guide paths are relative to the config file."""
    path = tmp_path / CONFIG_FILENAME
    path.write_text("guide_path: docs/sire.md\n")

    config = SirecoderConfig.load(path)

    assert config.guide_path == tmp_path / "docs" / "sire.md"


def test_load_missing(tmp_path: Path) -> None:
    """Verify loading a missing file fails."""
    with pytest.raises(FileNotFoundError):
        SirecoderConfig.load(tmp_path / CONFIG_FILENAME)


class TestFindConfig:
    """Tests for config discovery."""

    def test_next_to_target(self, sire_tree: Path) -> None:
        (sire_tree / CONFIG_FILENAME).write_text("")

        assert find_config(sire_tree / "sandbox.sire") == sire_tree / CONFIG_FILENAME

    def test_in_working_directory(
        self, sire_tree: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.chdir(tmp_path)

        found = find_config(sire_tree / "sandbox.sire")

        assert found is not None
        assert found.resolve() == (tmp_path / CONFIG_FILENAME).resolve()

    def test_none(self, sire_tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(sire_tree)

        assert find_config(sire_tree / "sandbox.sire") is None
