"""Text-tagged protocol spoken with the agent.

Every agent reply is classified at the loop boundary into one of two
variants:

- ``<SHOW>[...]</SHOW>``: an information request carrying a JSON array of
  ``{"path", "mode", "definitions"?}`` objects (``InfoRequest``).
- ``<RESULT>...</RESULT>``: the full replacement text of the target file
  (``EditResult``).

Anything else raises ``ProtocolError``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum

import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError, field_validator, model_validator

from sirecoder.exceptions import ProtocolError

logger = structlog.get_logger()

SHOW_PATTERN = re.compile(r"<SHOW>\s*(.*?)\s*</SHOW>", re.DOTALL)
RESULT_PATTERN = re.compile(r"<RESULT>(.*?)</RESULT>", re.DOTALL)


class ContextMode(str, Enum):
    """How much of a file the agent wants to see."""

    FULL = "full"
    EXPORTS = "exports"
    DEFINITIONS = "definitions"


class ContextRequest(BaseModel):
    """A single item of a SHOW request.

    Attributes:
        path: File or directory path, relative to the target file's directory.
        mode: Extraction mode.
        definitions: Names to extract (required for ``definitions`` mode).
    """

    path: str
    mode: ContextMode
    definitions: list[str] | None = None

    @field_validator("definitions")
    @classmethod
    def validate_names(cls, v: list[str] | None) -> list[str] | None:
        """Reject blank definition names."""
        if v is not None and any(not name.strip() for name in v):
            msg = "Definition names must not be blank"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def require_definitions(self) -> ContextRequest:
        """Definitions mode needs at least one name."""
        if self.mode is ContextMode.DEFINITIONS and not self.definitions:
            msg = "mode 'definitions' requires a non-empty 'definitions' list"
            raise ValueError(msg)
        return self


_REQUESTS_ADAPTER = TypeAdapter(list[ContextRequest])


@dataclass
class InfoRequest:
    """The agent asks for more context before editing."""

    requests: list[ContextRequest]


@dataclass
class EditResult:
    """The agent's replacement for the target file."""

    content: str


AgentTurn = InfoRequest | EditResult


def parse_show_payload(payload: str) -> list[ContextRequest]:
    """Parse the JSON body of a SHOW tag.

    Args:
        payload: Text between ``<SHOW>`` and ``</SHOW>``.

    Returns:
        The requests, in order.

    Raises:
        ProtocolError: If the payload is not a JSON array of valid requests.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        msg = f"SHOW payload is not valid JSON: {e}"
        raise ProtocolError(msg, original_content=payload) from e

    try:
        return _REQUESTS_ADAPTER.validate_python(data)
    except ValidationError as e:
        msg = f"SHOW payload is not a list of context requests: {e}"
        raise ProtocolError(msg, original_content=payload) from e


def parse_agent_output(output: str) -> AgentTurn:
    """Classify a raw agent reply.

    SHOW takes precedence over RESULT when both tags are present.

    Args:
        output: Raw agent output for one round.

    Returns:
        ``InfoRequest`` or ``EditResult``.

    Raises:
        ProtocolError: If no recognized tag pair is present or the SHOW
            payload cannot be parsed.
    """
    if "<SHOW>" in output:
        match = SHOW_PATTERN.search(output)
        if match is None:
            raise ProtocolError("Unterminated <SHOW> tag in agent output", original_content=output)
        requests = parse_show_payload(match.group(1))
        logger.debug("Agent requested context", count=len(requests))
        return InfoRequest(requests=requests)

    if "<RESULT>" in output:
        match = RESULT_PATTERN.search(output)
        if match is None:
            raise ProtocolError(
                "Unterminated <RESULT> tag in agent output", original_content=output
            )
        return EditResult(content=match.group(1))

    preview = output[:500] if len(output) > 500 else output
    raise ProtocolError(
        f"Agent output has neither <SHOW> nor <RESULT>. Content preview: {preview}",
        original_content=output,
    )
