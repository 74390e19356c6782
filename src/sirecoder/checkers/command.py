"""Command-line checker for arbitrary tools."""

from __future__ import annotations

from pathlib import Path

import structlog

from sirecoder.checkers.base import CheckOutcome
from sirecoder.exceptions import CommandError, CommandTimeoutError
from sirecoder.infra.command import CommandRunner

logger = structlog.get_logger()


class CommandChecker:
    """Checker that runs ``<command> <args...> <file>``.

    A non-zero exit is not an error: whatever the tool wrote is the
    diagnostic text. Standard error is preferred; standard output is used
    when standard error is blank. A tool that cannot be started becomes a
    diagnostic too.

    Example:
        >>> checker = CommandChecker(
        ...     cmd=CommandRunner(),
        ...     command="ghc",
        ...     args=["-fno-code"],
        ... )
        >>> outcome = checker.run(Path("Main.hs"))
        >>> outcome.status
        <CheckStatus.CLEAN: 'clean'>
    """

    def __init__(
        self,
        *,
        cmd: CommandRunner,
        command: str,
        args: list[str] | None = None,
        name: str | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            cmd: CommandRunner instance.
            command: Command to execute.
            args: Arguments placed before the file path.
            name: Name used in logs (defaults to the command).
        """
        self.cmd = cmd
        self.command = command
        self.args = args if args is not None else []
        self._name = name or command

    @property
    def name(self) -> str:
        """Name of the checker."""
        return self._name

    def run(self, path: Path, *, timeout: float | None = None) -> CheckOutcome:
        """Run the checker on a file.

        Args:
            path: File to check.
            timeout: Timeout in seconds.

        Returns:
            CheckOutcome; a timeout or a failure to start yields DIAGNOSTICS
            with a synthetic message.
        """
        log = logger.bind(checker=self.name, file=str(path))
        log.info("Running checker")

        full_command = [self.command, *self.args, str(path)]
        try:
            result = self.cmd.run_capture(full_command, timeout=timeout)
        except CommandTimeoutError:
            log.warning("Checker timed out", timeout=timeout)
            return CheckOutcome.diagnostics(f"checker timed out after {timeout}s")
        except CommandError as e:
            log.warning("Checker could not be started", error=str(e))
            return CheckOutcome.diagnostics(str(e))

        text = result.stderr if result.stderr.strip() else result.stdout
        if not text.strip():
            log.info("Checker passed", returncode=result.returncode)
            return CheckOutcome.clean(result.returncode)

        log.warning("Checker reported diagnostics", returncode=result.returncode)
        return CheckOutcome.diagnostics(text.strip(), result.returncode)
