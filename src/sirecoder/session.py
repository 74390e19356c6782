"""Per-invocation session state."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sirecoder.checkers.base import CheckOutcome


@dataclass
class Session:
    """State of one refactoring session.

    The session holds exactly one pending agent input. Each round replaces
    it; nothing is accumulated across rounds.

    Attributes:
        target: The file being refactored.
        request: The user's change request.
        pending_input: The next input sent to the agent.
        check: Whether written files are checked and repaired.
        max_rounds: Maximum agent rounds (None for unbounded).
        rounds: Agent calls made so far.
        info_rounds: Rounds answered with a SHOW request.
        repair_rounds: Repair inputs built after failed checks.
    """

    target: Path
    request: str
    pending_input: str
    check: bool = False
    max_rounds: int | None = None
    rounds: int = 0
    info_rounds: int = 0
    repair_rounds: int = 0

    @property
    def base_dir(self) -> Path:
        """Directory that SHOW paths are resolved against."""
        return self.target.parent

    def replace_input(self, text: str) -> None:
        """Replace the pending input."""
        self.pending_input = text


@dataclass
class SessionResult:
    """Outcome of a completed session.

    Attributes:
        target: The file that was written.
        content: Final content written to the target.
        rounds: Total agent calls.
        info_rounds: Rounds answered with a SHOW request.
        repair_rounds: Repair rounds triggered by the checker.
        check_outcome: Outcome of the last check (None if checking was off).
    """

    target: Path
    content: str
    rounds: int
    info_rounds: int
    repair_rounds: int
    check_outcome: CheckOutcome | None = None
