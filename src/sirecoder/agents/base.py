"""Base agent protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Agent(Protocol):
    """Protocol for completion backends.

    An agent is an opaque function from prompt text to response text.
    """

    @property
    def name(self) -> str:
        """Name of the agent backend (e.g., 'claude_code')."""
        ...

    def ask(self, prompt: str, *, system: str) -> str:
        """Send one prompt and return the full reply.

        Args:
            prompt: The pending input of the session.
            system: The system instruction.

        Returns:
            The agent's raw output.
        """
        ...
