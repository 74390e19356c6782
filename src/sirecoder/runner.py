"""Top-level wiring of a refactoring run."""

from __future__ import annotations

from pathlib import Path

import structlog

from sirecoder.agents import Agent, create_agent
from sirecoder.checkers import CheckerAdapter, create_checker_adapter
from sirecoder.config import SirecoderConfig
from sirecoder.context.dependencies import read_dependencies
from sirecoder.context.extractor import ContextExtractor
from sirecoder.infra.command import CommandRunner
from sirecoder.loop import InteractionLoop
from sirecoder.prompts.assembler import assemble
from sirecoder.prompts.renderer import render_system_prompt
from sirecoder.session import Session, SessionResult

logger = structlog.get_logger()


class Runner:
    """Runs one refactoring session against a target file.

    Example:
        >>> runner = create_runner(SirecoderConfig.default(), model="o")
        >>> result = runner.run(Path("sire/sandbox.sire"), "add a case", check=True)
    """

    def __init__(
        self,
        config: SirecoderConfig,
        *,
        agent: Agent,
        checker: CheckerAdapter,
        system_prompt: str,
    ) -> None:
        """Initialize the runner.

        Args:
            config: Configuration.
            agent: Completion backend.
            checker: Checker adapter.
            system_prompt: Rendered system instruction.
        """
        self.config = config
        self.agent = agent
        self.checker = checker
        self.extractor = ContextExtractor(config.language)
        self.loop = InteractionLoop(
            agent=agent,
            system_prompt=system_prompt,
            extractor=self.extractor,
            checker=checker,
        )

    def start_session(self, target: Path, request: str, *, check: bool = False) -> Session:
        """Build the initial session for a target file.

        Dependencies are resolved before anything is sent to the agent, so a
        missing import aborts the run early.

        Args:
            target: File to refactor.
            request: The user's change request.
            check: Whether to check and repair the written file.

        Returns:
            A new Session holding the initial input.

        Raises:
            DependencyError: If a declared dependency is missing.
        """
        content = target.read_text(encoding="utf-8")
        dependencies = read_dependencies(target, self.config.language, text=content)

        check_text: str | None = None
        if check:
            outcome = self.checker.check(target)
            check_text = outcome.text if outcome.has_diagnostics else ""

        pending = assemble(str(target), content, request, dependencies, check_text)
        return Session(
            target=target,
            request=request,
            pending_input=pending,
            check=check,
            max_rounds=self.config.max_rounds,
        )

    def run(self, target: Path, request: str, *, check: bool = False) -> SessionResult:
        """Run a full session.

        Args:
            target: File to refactor.
            request: The user's change request.
            check: Whether to check and repair the written file.

        Returns:
            SessionResult of the completed session.
        """
        log = logger.bind(target=str(target), agent=self.agent.name)
        log.info("Starting refactor", check=check)
        session = self.start_session(target, request, check=check)
        return self.loop.run(session)


def create_runner(
    config: SirecoderConfig | None = None,
    *,
    model: str | None = None,
    guide_path: Path | None = None,
    agent: Agent | None = None,
    cmd: CommandRunner | None = None,
) -> Runner:
    """Create a Runner from configuration.

    Args:
        config: Configuration (defaults to the built-in one).
        model: Model name or alias overriding the configured default.
        guide_path: Language guide overriding the configured one.
        agent: Agent to use instead of the configured backend.
        cmd: CommandRunner shared by the agent and the checkers.

    Returns:
        Configured Runner instance.
    """
    cfg = config or SirecoderConfig.default()
    cmd = cmd or CommandRunner()
    return Runner(
        cfg,
        agent=agent or create_agent(cfg.agent, model=model, cmd=cmd),
        checker=create_checker_adapter(cfg, cmd=cmd),
        system_prompt=render_system_prompt(guide_path or cfg.guide_path),
    )
