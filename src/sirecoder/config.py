"""Configuration schema for sirecoder."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


class AgentType(str, Enum):
    """Supported agent backends."""

    CLAUDE_CODE = "claude_code"
    FAKE = "fake"


class LanguageConfig(BaseModel):
    """Source conventions of the target language.

    Attributes:
        source_extension: Extension appended to imported module names.
        import_marker: Line prefix that declares an import.
        export_marker: Line prefix of export-list lines.
        excluded_dependencies: Bootstrap files never loaded as dependencies.
    """

    source_extension: str = ".sire"
    import_marker: str = ":| "
    export_marker: str = "^-^"
    excluded_dependencies: list[str] = Field(
        default_factory=lambda: ["sire.sire", "quickcheck.sire"]
    )


class AgentConfig(BaseModel):
    """Configuration for the agent backend.

    Attributes:
        type: The agent backend type.
        binary: Path or name of the agent CLI binary.
        default_model: Model used when none is given on the command line.
        model_aliases: Short names mapped to full model names.
        timeout: Timeout in seconds for a single agent call.
        extra_args: Additional arguments to pass to the CLI.
        script: Replies returned in order by the fake agent.
    """

    type: AgentType = AgentType.CLAUDE_CODE
    binary: str = "claude"
    default_model: str = "s"
    model_aliases: dict[str, str] = Field(
        default_factory=lambda: {"s": "sonnet", "o": "opus", "h": "haiku"}
    )
    timeout: int = Field(default=600, ge=30)
    extra_args: list[str] = Field(default_factory=list)
    script: list[str] = Field(default_factory=list)

    def resolve_model(self, model: str | None) -> str:
        """Resolve a model name or alias.

        Args:
            model: Model name or alias (None for the default).

        Returns:
            The full model name.
        """
        name = model or self.default_model
        return self.model_aliases.get(name, name)


class CheckerConfig(BaseModel):
    """Configuration for an external syntax/type checker.

    Attributes:
        extension: File extension the checker applies to (e.g. ".hs").
        command: Command to run.
        args: Arguments placed before the file path.
        enabled: Whether the checker is enabled.
    """

    extension: str
    command: str
    args: list[str] = Field(default_factory=list)
    enabled: bool = True

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Ensure the extension starts with a dot."""
        if not v.startswith(".") or len(v) < 2:
            msg = f"Checker extension must start with '.': {v!r}"
            raise ValueError(msg)
        return v


def _default_checkers() -> list[CheckerConfig]:
    return [
        CheckerConfig(extension=".agda", command="agda-check"),
        CheckerConfig(extension=".kind2", command="kind2", args=["check"]),
        CheckerConfig(extension=".c", command="gcc", args=["-fsyntax-only"]),
        CheckerConfig(extension=".ts", command="tsc", args=["--noEmit"]),
        CheckerConfig(extension=".hs", command="ghc", args=["-fno-code"]),
    ]


class SirecoderConfig(BaseModel):
    """Complete sirecoder configuration.

    Attributes:
        version: Config schema version.
        language: Source conventions of the target language.
        agent: Agent backend configuration.
        checkers: Checker table keyed by file extension.
        check_timeout: Timeout in seconds for a checker run.
        max_rounds: Maximum agent rounds per session (None for unbounded).
        guide_path: Optional language guide inlined into the system prompt.

    Example:
        >>> config = SirecoderConfig.default()
        >>> config.agent.resolve_model(None)
        'sonnet'
    """

    version: str = "1.0"
    language: LanguageConfig = Field(default_factory=LanguageConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    checkers: list[CheckerConfig] = Field(default_factory=_default_checkers)
    check_timeout: int = Field(default=120, ge=1)
    max_rounds: int | None = Field(default=None, ge=1)
    guide_path: Path | None = None

    @field_validator("checkers")
    @classmethod
    def validate_unique_extensions(cls, v: list[CheckerConfig]) -> list[CheckerConfig]:
        """Ensure checker extensions are unique."""
        extensions = [c.extension for c in v]
        if len(extensions) != len(set(extensions)):
            msg = "Checker extensions must be unique"
            raise ValueError(msg)
        return v

    def get_enabled_checkers(self) -> list[CheckerConfig]:
        """Get list of enabled checkers."""
        return [c for c in self.checkers if c.enabled]

    @classmethod
    def from_yaml(cls, yaml_content: str) -> SirecoderConfig:
        """Parse config from YAML content.

        Args:
            yaml_content: YAML string to parse.

        Returns:
            Parsed SirecoderConfig instance.

        Raises:
            ValueError: If the YAML is invalid.
        """
        try:
            data: dict[str, Any] = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML: {e}"
            raise ValueError(msg) from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            msg = "Config YAML must be a mapping"
            raise ValueError(msg)

        return cls.model_validate(data)

    @classmethod
    def load(cls, path: Path) -> SirecoderConfig:
        """Load config from a YAML file.

        Relative ``guide_path`` values are resolved against the config
        file's directory.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed SirecoderConfig instance.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the YAML is invalid.
        """
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        config = cls.from_yaml(path.read_text(encoding="utf-8"))
        if config.guide_path is not None and not config.guide_path.is_absolute():
            config.guide_path = path.parent / config.guide_path
        return config

    @classmethod
    def default(cls) -> SirecoderConfig:
        """Create a default configuration."""
        return cls()


CONFIG_FILENAME = "sirecoder.yaml"


def find_config(target: Path) -> Path | None:
    """Find a config file for a target source file.

    Looks next to the target first, then in the current directory.

    Args:
        target: The file being refactored.

    Returns:
        Path to the config file, or None if there is none.
    """
    for candidate in (target.parent / CONFIG_FILENAME, Path.cwd() / CONFIG_FILENAME):
        if candidate.is_file():
            return candidate
    return None
