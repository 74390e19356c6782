"""Subprocess command runner with logging."""

from __future__ import annotations

import subprocess
import threading
from dataclasses import dataclass

import structlog

from sirecoder.exceptions import CommandError, CommandTimeoutError

logger = structlog.get_logger()


@dataclass
class CommandResult:
    """Result of a command execution.

    Attributes:
        returncode: Exit code of the process.
        stdout: Captured standard output.
        stderr: Captured standard error.
        command: The command that was run.
    """

    returncode: int
    stdout: str
    stderr: str
    command: list[str]


class CommandRunner:
    """Runs subprocess commands with consistent logging.

    All subprocess calls in sirecoder go through this class, both the
    checker invocations and the agent CLI.

    Example:
        >>> runner = CommandRunner(heartbeat_interval=0)
        >>> result = runner.run_capture(["echo", "hello"])
        >>> result.stdout
        'hello\\n'
    """

    def __init__(self, heartbeat_interval: int = 30) -> None:
        """Initialize the command runner.

        Args:
            heartbeat_interval: Interval in seconds for heartbeat logging (0 to disable).
        """
        self.heartbeat_interval = heartbeat_interval

    @staticmethod
    def _heartbeat_logger(
        log: structlog.BoundLogger, stop_event: threading.Event, interval: int
    ) -> None:
        """Log heartbeat messages while a command is running.

        Args:
            log: Logger instance.
            stop_event: Event to signal when to stop.
            interval: Interval in seconds between heartbeats.
        """
        elapsed = 0
        while not stop_event.wait(timeout=interval):
            elapsed += interval
            log.info("Command still running", elapsed_seconds=elapsed)

    def run_capture(
        self,
        command: list[str],
        *,
        timeout: float | None = None,
        input_text: str | None = None,
    ) -> CommandResult:
        """Run a command and capture stdout/stderr in memory.

        Args:
            command: Command and arguments to run.
            timeout: Timeout in seconds.
            input_text: Text written to the command's standard input.

        Returns:
            CommandResult with exit code and captured output.

        Raises:
            CommandTimeoutError: If the command exceeds the timeout.
            CommandError: If the command cannot be started.
        """
        log = logger.bind(command=command[0] if command else "")
        log.debug("Running command", argv=command[:6])

        stop_heartbeat = threading.Event()
        heartbeat_thread = None
        if self.heartbeat_interval > 0 and (
            timeout is None or timeout > self.heartbeat_interval
        ):
            heartbeat_thread = threading.Thread(
                target=self._heartbeat_logger,
                args=(log, stop_heartbeat, self.heartbeat_interval),
                daemon=True,
            )
            heartbeat_thread.start()

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                input=input_text,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            log.error("Command timed out", timeout=timeout)
            msg = f"Command timed out after {timeout}s: {' '.join(command)}"
            raise CommandTimeoutError(msg, command=command, timeout=timeout) from e
        except FileNotFoundError as e:
            log.error("Command not found")
            msg = f"Command not found: {command[0]}"
            raise CommandError(msg, command=command) from e
        finally:
            if heartbeat_thread:
                stop_heartbeat.set()
                heartbeat_thread.join(timeout=1)

        log.debug("Command completed", returncode=result.returncode)

        return CommandResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            command=command,
        )
