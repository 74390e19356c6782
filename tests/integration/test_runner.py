"""Integration tests for session setup and the full run."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sirecoder.agents.fake import FakeAgent
from sirecoder.checkers import CheckerAdapter
from sirecoder.checkers.base import CheckOutcome
from sirecoder.config import SirecoderConfig
from sirecoder.exceptions import DependencyError
from sirecoder.runner import Runner, create_runner

KERN_BLOCK = '<FILE path="kern.sire">\n= kern 1\n</FILE>'


def _runner(config: SirecoderConfig, agent: FakeAgent, checker: CheckerAdapter) -> Runner:
    return Runner(config, agent=agent, checker=checker, system_prompt="sys")


def test_initial_input(sire_tree: Path, default_config: SirecoderConfig) -> None:
    """The first input holds dependencies, the target and the request."""
    target = sire_tree / "sandbox.sire"
    runner = _runner(default_config, FakeAgent(), CheckerAdapter())

    session = runner.start_session(target, "implement findDeadCogids")

    assert session.pending_input == "\n\n".join(
        [
            KERN_BLOCK,
            f'<FILE path="{target}" current>\n{target.read_text()}\n</FILE>',
            "<REQUEST>\nimplement findDeadCogids\n</REQUEST>",
        ]
    )
    assert session.max_rounds is None


def test_target_is_read_once(sire_tree: Path, default_config: SirecoderConfig) -> None:
    """Setting up a session reads the target a single time."""
    target = sire_tree / "sandbox.sire"
    runner = _runner(default_config, FakeAgent(), CheckerAdapter())

    with patch.object(Path, "read_text", autospec=True, side_effect=Path.read_text) as read_text:
        runner.start_session(target, "go")

    target_reads = [c for c in read_text.call_args_list if c.args[0] == target]
    assert len(target_reads) == 1


def test_initial_check_clean(sire_tree: Path, default_config: SirecoderConfig) -> None:
    """A clean initial check is reported as no errors."""
    checker = MagicMock(spec=CheckerAdapter)
    checker.check.return_value = CheckOutcome.clean()
    runner = _runner(default_config, FakeAgent(), checker)

    session = runner.start_session(sire_tree / "sandbox.sire", "go", check=True)

    assert session.pending_input.endswith("<CHECK>\nNo errors.\n</CHECK>")
    assert session.check is True


def test_initial_check_diagnostics(sire_tree: Path, default_config: SirecoderConfig) -> None:
    """Initial diagnostics are included in the first input."""
    checker = MagicMock(spec=CheckerAdapter)
    checker.check.return_value = CheckOutcome.diagnostics("line 2: parse error")
    runner = _runner(default_config, FakeAgent(), checker)

    session = runner.start_session(sire_tree / "sandbox.sire", "go", check=True)

    assert session.pending_input.endswith("<CHECK>\nline 2: parse error\n</CHECK>")


def test_missing_dependency_aborts_before_agent(tmp_path: Path) -> None:
    """A missing import fails before the agent is called."""
    target = tmp_path / "a.sire"
    target.write_text(":| nowhere\n= a 1\n")
    agent = FakeAgent(["<RESULT>= a 2</RESULT>"])

    with pytest.raises(DependencyError):
        _runner(SirecoderConfig.default(), agent, CheckerAdapter()).run(target, "go")

    assert agent.calls == 0
    assert target.read_text() == ":| nowhere\n= a 1\n"


def test_run(sire_tree: Path) -> None:
    """A full run against a scripted agent rewrites the target."""
    target = sire_tree / "sandbox.sire"
    agent = FakeAgent(
        [
            '<SHOW>[{"path": "sire_12_tab.sire", "mode": "definitions", "definitions": ["tabLookup"]}]'
            "</SHOW>",
            "<RESULT>\n= (findDeadCogids reqs resp) (tabLookup 0 reqs)\n</RESULT>",
        ]
    )
    config = SirecoderConfig(max_rounds=5)

    result = create_runner(config, agent=agent).run(target, "implement it")

    assert target.read_text() == "= (findDeadCogids reqs resp) (tabLookup 0 reqs)"
    assert result.rounds == 2
    assert result.info_rounds == 1
    assert agent.prompts[0].startswith(KERN_BLOCK)
    assert "= tabLookup        | _TabLookup" in agent.prompts[1]
    assert "<SHOW>" in agent.systems[0]


def test_create_runner_with_guide(tmp_path: Path) -> None:
    """The guide is inlined into the system prompt."""
    guide = tmp_path / "guide.md"
    guide.write_text("SIRE GUIDE TEXT")

    runner = create_runner(guide_path=guide, agent=FakeAgent())

    assert "SIRE GUIDE TEXT" in runner.loop.system_prompt
