"""Fake agent for testing."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import structlog

from sirecoder.exceptions import AgentError

logger = structlog.get_logger()

Responder = Callable[[str], str]


class FakeAgent:
    """A scripted agent for testing.

    Replies are returned in order, one per call. A reply may be a string or
    a callable receiving the prompt, which lets tests react to what the
    loop sent. Every prompt and system instruction is recorded.

    Example:
        >>> agent = FakeAgent(["<RESULT>= x 1</RESULT>"])
        >>> agent.ask("<REQUEST>set x</REQUEST>", system="")
        '<RESULT>= x 1</RESULT>'
        >>> agent.prompts
        ['<REQUEST>set x</REQUEST>']
    """

    def __init__(self, replies: Iterable[str | Responder] | None = None) -> None:
        """Initialize the fake agent.

        Args:
            replies: Scripted replies, consumed in order.
        """
        self._replies: list[str | Responder] = list(replies or [])
        self.prompts: list[str] = []
        self.systems: list[str] = []

    @property
    def name(self) -> str:
        """Name of the agent."""
        return "fake"

    @property
    def calls(self) -> int:
        """Number of prompts received so far."""
        return len(self.prompts)

    def ask(self, prompt: str, *, system: str) -> str:
        """Return the next scripted reply.

        Raises:
            AgentError: If the script is exhausted.
        """
        self.prompts.append(prompt)
        self.systems.append(system)
        if not self._replies:
            raise AgentError("Fake agent has no scripted reply left", agent_name=self.name)

        reply = self._replies.pop(0)
        text = reply(prompt) if callable(reply) else reply
        logger.debug("Fake agent replied", call=self.calls, reply_chars=len(text))
        return text
