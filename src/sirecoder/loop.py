"""Interaction loop between the agent and the source tree.

The loop alternates between serving the agent's SHOW requests and applying
its RESULT. With checking enabled, a written file that fails its checker
starts a repair round with a fresh input.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

import structlog

from sirecoder.agents.base import Agent
from sirecoder.checkers import CheckerAdapter
from sirecoder.checkers.base import CheckOutcome
from sirecoder.context.blocks import dir_block, file_block
from sirecoder.context.extractor import ContextExtractor, list_directory
from sirecoder.exceptions import SessionError
from sirecoder.prompts.assembler import repair_input
from sirecoder.protocol import ContextRequest, EditResult, InfoRequest, parse_agent_output
from sirecoder.session import Session, SessionResult

logger = structlog.get_logger()


def write_atomic(path: Path, content: str) -> None:
    """Replace a file's content through a temp file and rename.

    Args:
        path: File to overwrite.
        content: New content.
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        if path.exists():
            os.chmod(tmp_path, stat.S_IMODE(path.stat().st_mode))
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class InteractionLoop:
    """Drives agent rounds until the target file is written."""

    def __init__(
        self,
        *,
        agent: Agent,
        system_prompt: str,
        extractor: ContextExtractor | None = None,
        checker: CheckerAdapter | None = None,
    ) -> None:
        """Initialize the loop.

        Args:
            agent: Completion backend.
            system_prompt: System instruction sent with every prompt.
            extractor: Context extractor for SHOW requests.
            checker: Checker adapter used when a session has check enabled.
        """
        self.agent = agent
        self.system_prompt = system_prompt
        self.extractor = extractor or ContextExtractor()
        self.checker = checker or CheckerAdapter()

    def run(self, session: Session) -> SessionResult:
        """Run a session to completion.

        Args:
            session: The session to drive.

        Returns:
            SessionResult describing the final write.

        Raises:
            ProtocolError: If the agent output is malformed.
            SessionError: If the session's round limit is exceeded.
        """
        log = logger.bind(target=str(session.target))

        while True:
            if session.max_rounds is not None and session.rounds >= session.max_rounds:
                msg = f"Session exceeded {session.max_rounds} agent rounds"
                raise SessionError(msg, rounds=session.rounds)

            session.rounds += 1
            log.info("Sending prompt to agent", round=session.rounds)
            log.debug("Prompt", system=self.system_prompt, input=session.pending_input)

            output = self.agent.ask(session.pending_input, system=self.system_prompt)
            turn = parse_agent_output(output)

            if isinstance(turn, InfoRequest):
                session.info_rounds += 1
                session.replace_input(self.serve(turn.requests, session.base_dir))
                continue

            outcome = self.apply_edit(session, turn)
            if outcome is not None and outcome.has_diagnostics:
                session.repair_rounds += 1
                log.info("Check failed, starting repair round", repair=session.repair_rounds)
                session.replace_input(
                    repair_input(str(session.target), turn.content.strip(), outcome.text)
                )
                continue

            log.info(
                "Session complete",
                rounds=session.rounds,
                info_rounds=session.info_rounds,
                repair_rounds=session.repair_rounds,
            )
            return SessionResult(
                target=session.target,
                content=turn.content.strip(),
                rounds=session.rounds,
                info_rounds=session.info_rounds,
                repair_rounds=session.repair_rounds,
                check_outcome=outcome,
            )

    def serve(self, requests: list[ContextRequest], base_dir: Path) -> str:
        """Answer a SHOW request.

        Args:
            requests: Requested items, in order.
            base_dir: Directory relative paths are resolved against.

        Returns:
            The new agent input (one block per request).
        """
        return "".join(self.render_request(request, base_dir) + "\n" for request in requests)

    def render_request(self, request: ContextRequest, base_dir: Path) -> str:
        """Render the block answering one context request."""
        full_path = (base_dir / request.path).resolve()
        logger.info("Serving context request", path=str(full_path), mode=request.mode.value)

        if full_path.is_dir():
            return dir_block(str(full_path), list_directory(full_path))

        content = self.extractor.extract(full_path, request.mode, request.definitions)
        return file_block(str(full_path), content, mode=request.mode.value)

    def apply_edit(self, session: Session, edit: EditResult) -> CheckOutcome | None:
        """Write the agent's result and check it when enabled.

        Args:
            session: Current session.
            edit: The agent's result.

        Returns:
            The post-write check outcome, or None if checking is disabled.
        """
        content = edit.content.strip()
        write_atomic(session.target, content)
        logger.info("Wrote refactored file", target=str(session.target), chars=len(content))

        if not session.check:
            return None
        return self.checker.check(session.target)
