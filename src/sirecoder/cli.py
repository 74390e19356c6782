"""CLI interface for sirecoder."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import structlog
import typer

from sirecoder import __version__
from sirecoder.config import SirecoderConfig, find_config
from sirecoder.exceptions import ConfigError, SirecoderError
from sirecoder.runner import create_runner

USAGE = "Usage: sirecoder <file> <request> [<model>] [--check]"

logger = structlog.get_logger()

app = typer.Typer(
    name="sirecoder",
    help="Agent-driven refactoring of Sire source files",
    add_completion=False,
)


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Resolved per logger so redirected streams are honoured.
    return structlog.PrintLogger(file=sys.stderr)


def configure_logging(verbose: bool = False) -> None:
    """Configure structlog for CLI output on stderr."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sirecoder version {__version__}")
        raise typer.Exit()


def _load_config(config_path: Path | None, target: Path) -> SirecoderConfig:
    path = config_path or find_config(target)
    if path is None:
        return SirecoderConfig.default()
    logger.debug("Loading config", path=str(path))
    try:
        return SirecoderConfig.load(path)
    except ValueError as e:
        msg = f"Invalid config {path}: {e}"
        raise ConfigError(msg, config_path=path) from e


@app.command()
def main(
    file: Annotated[
        Path | None,
        typer.Argument(help="Sire file to refactor", show_default=False),
    ] = None,
    request: Annotated[
        str | None,
        typer.Argument(help="Change request for the agent", show_default=False),
    ] = None,
    model: Annotated[
        str | None,
        typer.Argument(help="Model name or alias (defaults to the configured model)"),
    ] = None,
    check: Annotated[
        bool,
        typer.Option("--check", help="Check the written file and let the agent repair it"),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to sirecoder.yaml config file",
            exists=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    guide: Annotated[
        Path | None,
        typer.Option(
            "--guide",
            "-g",
            help="Language guide to include in the system prompt",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log prompts and debug output"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Refactor FILE according to REQUEST with an AI agent.

    The agent may ask for more context (exports or definitions of other
    files) before answering with the new content of FILE.
    """
    if file is None or request is None:
        typer.echo(USAGE)
        raise typer.Exit(1)

    configure_logging(verbose)
    log = logger.bind(command="refactor", file=str(file))

    try:
        cfg = _load_config(config, file)
        runner = create_runner(cfg, model=model, guide_path=guide)
        result = runner.run(file, request, check=check)
    except (SirecoderError, OSError, UnicodeDecodeError) as e:
        log.error("Refactor failed", error=str(e), error_type=type(e).__name__)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo("")
    typer.echo(typer.style("File refactored successfully.", fg=typer.colors.GREEN))
    if result.repair_rounds:
        typer.echo(f"Repair rounds: {result.repair_rounds}")


if __name__ == "__main__":
    app()
