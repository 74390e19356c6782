"""Checker adapter mapping file extensions to external checkers."""

from __future__ import annotations

from pathlib import Path

import structlog

from sirecoder.checkers.base import Checker, CheckOutcome, CheckStatus
from sirecoder.checkers.command import CommandChecker
from sirecoder.config import CheckerConfig, SirecoderConfig
from sirecoder.infra.command import CommandRunner

logger = structlog.get_logger()


class CheckerAdapter:
    """Selects and runs the checker registered for a file's extension."""

    def __init__(
        self,
        checkers: dict[str, Checker] | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            checkers: Checkers keyed by extension (e.g. ".hs").
            timeout: Timeout in seconds for one check.
        """
        self.checkers = dict(checkers or {})
        self.timeout = timeout

    def checker_for(self, path: Path) -> Checker | None:
        """Get the checker for a path, if its extension has one."""
        return self.checkers.get(path.suffix)

    def check(self, path: Path) -> CheckOutcome:
        """Check a file.

        Args:
            path: File to check.

        Returns:
            NOT_APPLICABLE when no checker handles the extension, otherwise
            the checker's outcome.
        """
        checker = self.checker_for(path)
        if checker is None:
            logger.debug("No checker for extension", file=str(path), extension=path.suffix)
            return CheckOutcome.not_applicable()
        return checker.run(path, timeout=self.timeout)


def create_checker(config: CheckerConfig, *, cmd: CommandRunner) -> CommandChecker:
    """Create a checker from its configuration."""
    return CommandChecker(cmd=cmd, command=config.command, args=config.args)


def create_checker_adapter(
    config: SirecoderConfig,
    *,
    cmd: CommandRunner | None = None,
) -> CheckerAdapter:
    """Create the adapter for all enabled checkers in a configuration."""
    cmd = cmd or CommandRunner()
    checkers: dict[str, Checker] = {
        c.extension: create_checker(c, cmd=cmd) for c in config.get_enabled_checkers()
    }
    return CheckerAdapter(checkers, timeout=config.check_timeout)


__all__ = [
    "CheckOutcome",
    "CheckStatus",
    "Checker",
    "CheckerAdapter",
    "CommandChecker",
    "create_checker",
    "create_checker_adapter",
]
