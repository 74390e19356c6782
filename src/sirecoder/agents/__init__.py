"""Agent backends."""

from __future__ import annotations

from sirecoder.agents.base import Agent
from sirecoder.agents.claude_code import ClaudeCodeAgent
from sirecoder.agents.fake import FakeAgent
from sirecoder.config import AgentConfig, AgentType
from sirecoder.infra.command import CommandRunner


def create_agent(
    config: AgentConfig,
    *,
    model: str | None = None,
    cmd: CommandRunner | None = None,
) -> Agent:
    """Create the agent described by a configuration.

    Args:
        config: Agent configuration.
        model: Model name or alias overriding the configured default.
        cmd: CommandRunner for CLI-backed agents.

    Returns:
        An Agent instance.
    """
    if config.type is AgentType.FAKE:
        return FakeAgent(config.script)
    return ClaudeCodeAgent(
        cmd=cmd or CommandRunner(),
        model=config.resolve_model(model),
        binary=config.binary,
        extra_args=config.extra_args,
        timeout=config.timeout,
    )


__all__ = [
    "Agent",
    "ClaudeCodeAgent",
    "FakeAgent",
    "create_agent",
]
