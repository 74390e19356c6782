"""Custom exceptions for sirecoder."""

from pathlib import Path


class SirecoderError(Exception):
    """Base exception for all sirecoder errors."""

    pass


class ConfigError(SirecoderError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.config_path = config_path


class DependencyError(SirecoderError):
    """Raised when a declared import cannot be loaded."""

    def __init__(
        self,
        message: str,
        *,
        dependency: str = "",
        path: Path | None = None,
    ) -> None:
        super().__init__(message)
        self.dependency = dependency
        self.path = path


class ProtocolError(SirecoderError):
    """Raised when agent output carries no usable SHOW or RESULT tag."""

    def __init__(self, message: str, *, original_content: str = "") -> None:
        super().__init__(message)
        self.original_content = original_content


class AgentError(SirecoderError):
    """Raised when the agent backend fails to produce a reply."""

    def __init__(
        self,
        message: str,
        *,
        agent_name: str = "",
        returncode: int | None = None,
    ) -> None:
        super().__init__(message)
        self.agent_name = agent_name
        self.returncode = returncode


class SessionError(SirecoderError):
    """Raised when a session exceeds its round limit."""

    def __init__(self, message: str, *, rounds: int = 0) -> None:
        super().__init__(message)
        self.rounds = rounds


class CommandError(SirecoderError):
    """Raised when a subprocess command cannot be run."""

    def __init__(self, message: str, *, command: list[str] | None = None) -> None:
        super().__init__(message)
        self.command = command or []


class CommandTimeoutError(CommandError):
    """Raised when a subprocess command exceeds its timeout."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(message, command=command)
        self.timeout = timeout
