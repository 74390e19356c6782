"""Dependency resolution for Sire source files.

A Sire file declares its imports with lines such as ``:| kern``. Each
import names a sibling file (``kern.sire``) whose full content is handed to
the agent before the target file, except for the bootstrap modules listed
in ``LanguageConfig.excluded_dependencies``.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from sirecoder.config import LanguageConfig
from sirecoder.context.blocks import file_block
from sirecoder.exceptions import DependencyError

logger = structlog.get_logger()


def parse_dependencies(text: str, language: LanguageConfig | None = None) -> list[str]:
    """List the dependency file names declared in a source text.

    Args:
        text: Raw source text.
        language: Source conventions (defaults to Sire's).

    Returns:
        Dependency file names in declaration order.
    """
    language = language or LanguageConfig()
    marker = language.import_marker
    deps: list[str] = []
    for line in text.split("\n"):
        if not line.startswith(marker):
            continue
        dep = line[len(marker) :].strip() + language.source_extension
        if dep in language.excluded_dependencies:
            continue
        deps.append(dep)
    return deps


def read_dependencies(
    path: Path,
    language: LanguageConfig | None = None,
    *,
    text: str | None = None,
) -> str:
    """Load and render every dependency of a source file.

    Args:
        path: The source file whose imports are resolved.
        language: Source conventions (defaults to Sire's).
        text: Content of ``path`` when the caller has already read it.

    Returns:
        Tagged ``<FILE>`` blocks separated by blank lines ("" if none).

    Raises:
        DependencyError: If a declared dependency file does not exist.
    """
    if text is None:
        text = path.read_text(encoding="utf-8")
    deps = parse_dependencies(text, language)
    log = logger.bind(file=str(path))
    log.debug("Resolving dependencies", count=len(deps))

    blocks: list[str] = []
    for dep in deps:
        dep_path = path.parent / dep
        if not dep_path.is_file():
            log.error("Dependency not found", dependency=dep)
            msg = f"Dependency not found: {dep} (imported by {path})"
            raise DependencyError(msg, dependency=dep, path=dep_path)
        blocks.append(file_block(dep, dep_path.read_text(encoding="utf-8").strip()))

    return "\n\n".join(blocks)
