"""Base checker protocol and outcome types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable


class CheckStatus(str, Enum):
    """Outcome kinds of a check."""

    CLEAN = "clean"
    DIAGNOSTICS = "diagnostics"
    NOT_APPLICABLE = "not_applicable"


@dataclass
class CheckOutcome:
    """Result of checking a file.

    Attributes:
        status: Outcome kind.
        text: Diagnostic text (empty unless status is DIAGNOSTICS).
        returncode: Exit code of the checker, when one ran.
    """

    status: CheckStatus
    text: str = ""
    returncode: int | None = None

    @classmethod
    def clean(cls, returncode: int | None = 0) -> CheckOutcome:
        """Create a clean outcome."""
        return cls(CheckStatus.CLEAN, returncode=returncode)

    @classmethod
    def diagnostics(cls, text: str, returncode: int | None = None) -> CheckOutcome:
        """Create an outcome carrying diagnostics."""
        return cls(CheckStatus.DIAGNOSTICS, text=text, returncode=returncode)

    @classmethod
    def not_applicable(cls) -> CheckOutcome:
        """Create an outcome for files without a checker."""
        return cls(CheckStatus.NOT_APPLICABLE)

    @property
    def has_diagnostics(self) -> bool:
        """Check if the outcome calls for a repair round."""
        return self.status is CheckStatus.DIAGNOSTICS


@runtime_checkable
class Checker(Protocol):
    """Protocol for file checkers."""

    @property
    def name(self) -> str:
        """Name of the checker (e.g., 'ghc')."""
        ...

    def run(self, path: Path, *, timeout: float | None = None) -> CheckOutcome:
        """Check one file.

        Args:
            path: File to check.
            timeout: Timeout in seconds.

        Returns:
            CheckOutcome with the diagnostics, if any.
        """
        ...
