"""Claude Code CLI agent implementation."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any

import structlog

from sirecoder.exceptions import AgentError, CommandError
from sirecoder.infra.command import CommandRunner

logger = structlog.get_logger()


class ClaudeCodeAgent:
    """Agent backed by the Claude Code CLI.

    Runs ``claude -p`` in non-interactive print mode with all tools
    disabled, so the model can only answer in text. The prompt is written
    to standard input, the system instruction goes through a temporary
    file and the reply is read from the JSON result.

    Example:
        >>> agent = ClaudeCodeAgent(cmd=CommandRunner(), model="sonnet")
        >>> reply = agent.ask("<REQUEST>...</REQUEST>", system="You are SireCoder")
    """

    def __init__(
        self,
        *,
        cmd: CommandRunner,
        model: str,
        binary: str = "claude",
        extra_args: list[str] | None = None,
        timeout: int = 600,
    ) -> None:
        """Initialize the Claude Code agent.

        Args:
            cmd: CommandRunner instance.
            model: Model name or CLI alias (e.g., "sonnet").
            binary: Path to the claude binary.
            extra_args: Additional arguments to pass to claude.
            timeout: Timeout in seconds for one reply.
        """
        self.cmd = cmd
        self.model = model
        self.binary = binary
        self.extra_args = extra_args or []
        self.timeout = timeout

    @property
    def name(self) -> str:
        """Name of the agent."""
        return "claude_code"

    def build_command(self, *, system_file: Path) -> list[str]:
        """Build the claude command line.

        Args:
            system_file: File holding the system instruction.

        Returns:
            Command as list of strings.
        """
        return [
            self.binary,
            "-p",
            "--output-format",
            "json",
            "--model",
            self.model,
            "--system-prompt-file",
            str(system_file),
            "--tools",
            "",
            *self.extra_args,
        ]

    def _parse_output(self, stdout: str) -> tuple[str, dict[str, Any]]:
        """Parse output from Claude Code CLI.

        With --output-format json the CLI prints a single object:
        {"type": "result", "subtype": "success", "result": "...",
        "is_error": false, "total_cost_usd": ..., "num_turns": ...}

        Args:
            stdout: Captured standard output.

        Returns:
            Tuple of (reply text, extra metadata dict).
        """
        content = stdout.strip()
        if not content:
            return "", {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.warning(
                "Failed to parse Claude Code JSON output, using raw text",
                content_preview=content[:200],
            )
            return content, {}

        if not isinstance(data, dict):
            return content, {}

        extra = {
            "is_error": data.get("is_error", False),
            "subtype": data.get("subtype"),
            "total_cost_usd": data.get("total_cost_usd"),
            "duration_ms": data.get("duration_ms"),
            "num_turns": data.get("num_turns"),
            "session_id": data.get("session_id"),
        }
        return str(data.get("result", "")), extra

    def ask(self, prompt: str, *, system: str) -> str:
        """Send one prompt to Claude Code.

        Args:
            prompt: The pending input of the session.
            system: The system instruction.

        Returns:
            The reply text.

        Raises:
            AgentError: If the CLI fails or reports an error result.
        """
        log = logger.bind(agent=self.name, model=self.model)
        log.info("Asking agent", prompt_chars=len(prompt), system_chars=len(system))

        # exec limits a single argument to 128 KiB.
        with tempfile.TemporaryDirectory(prefix="sirecoder-") as tmp_dir:
            system_file = Path(tmp_dir) / "system.md"
            system_file.write_text(system, encoding="utf-8")
            try:
                result = self.cmd.run_capture(
                    self.build_command(system_file=system_file),
                    timeout=self.timeout,
                    input_text=prompt,
                )
            except CommandError as e:
                raise AgentError(str(e), agent_name=self.name) from e

        text, extra = self._parse_output(result.stdout)

        if result.returncode != 0 or extra.get("is_error"):
            detail = result.stderr.strip() or text or f"subtype={extra.get('subtype')}"
            log.error("Agent call failed", returncode=result.returncode, detail=detail[:500])
            msg = f"Claude Code failed (exit code {result.returncode}): {detail}"
            raise AgentError(msg, agent_name=self.name, returncode=result.returncode)

        log.info(
            "Agent replied",
            reply_chars=len(text),
            cost_usd=extra.get("total_cost_usd"),
            num_turns=extra.get("num_turns"),
        )
        return text
