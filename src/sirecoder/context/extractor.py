"""Pattern-based context extraction from Sire source files.

Extraction is deliberately textual: exports are lines starting with the
export sigil, and definitions are top-level blocks found with a regular
expression. This keeps prompts small without parsing Sire.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from pathlib import Path

import structlog

from sirecoder.config import LanguageConfig
from sirecoder.protocol import ContextMode

logger = structlog.get_logger()

# Assertion prefixes used by Sire's inline unit tests.
_TEST_MARKERS = r"(?:=\?=|!!)"


def private_name(name: str) -> str:
    """Return the internal spelling of a name (``tabLookup`` -> ``_TabLookup``)."""
    return "_" + name[0].upper() + name[1:]


def definition_pattern(name: str) -> re.Pattern[str]:
    """Build the pattern matching the definition blocks of a name.

    A block is optional ``>`` signature lines followed by a binding line in
    prefix (``= name``), parenthesized (``= (name a b)``) or infix
    (``name = ...``) form, or by a test line mentioning the name. It
    extends through the following non-blank lines.

    Args:
        name: Identifier in its canonical spelling.

    Returns:
        Compiled multi-line pattern.
    """
    alt = f"(?:{re.escape(name)}|{re.escape(private_name(name))})"
    binding = "|".join(
        [
            rf"=[^\S\n]*{alt}\b",
            rf"=[^\S\n]*\([^)\n]*\b{alt}\b[^)\n]*\)",
            rf"{alt}[^\S\n]*=",
            rf"{_TEST_MARKERS}.*\b{alt}\b",
            rf".*\b{alt}\b.*{_TEST_MARKERS}",
        ]
    )
    return re.compile(
        rf"^(?:>.*\n)*(?:{binding}).*(?:\n[^\S\n]*\S.*)*",
        re.MULTILINE,
    )


def extract_definitions(text: str, names: Sequence[str]) -> str:
    """Extract the definition blocks of several names.

    Each name is matched against the whole text on its own; the blocks are
    concatenated in request order, separated by blank lines.

    Args:
        text: Full source text.
        names: Identifiers to look up.

    Returns:
        The matching blocks ("" if nothing matched).
    """
    blocks: list[str] = []
    for name in names:
        blocks.extend(m.group(0) for m in definition_pattern(name).finditer(text))
    return "\n\n".join(blocks).strip()


def list_directory(path: Path) -> str:
    """Return the sorted entry names of a directory, one per line."""
    return "\n".join(sorted(entry.name for entry in path.iterdir()))


class ContextExtractor:
    """Serves ``full``, ``exports`` and ``definitions`` requests.

    Example:
        >>> extractor = ContextExtractor()
        >>> text = extractor.extract(Path("sire/kern.sire"), ContextMode.EXPORTS)
    """

    def __init__(self, language: LanguageConfig | None = None) -> None:
        """Initialize the extractor.

        Args:
            language: Source conventions (defaults to Sire's).
        """
        self.language = language or LanguageConfig()
        self._export_pattern = re.compile(rf"^{re.escape(self.language.export_marker)}.*$")

    def iter_exports(self, path: Path) -> Iterator[str]:
        """Yield the export-list lines of a file in order.

        Args:
            path: Source file to scan.

        Yields:
            Lines matching the export marker, without line endings.
        """
        with path.open(encoding="utf-8") as f:
            for line in f:
                line = line.rstrip("\r\n")
                if self._export_pattern.match(line):
                    yield line

    def extract(
        self,
        path: Path,
        mode: ContextMode | str,
        definitions: Sequence[str] | None = None,
    ) -> str:
        """Extract the requested slice of a file.

        Args:
            path: File (or, for ``full``, directory) to read.
            mode: Extraction mode.
            definitions: Names to look up in ``definitions`` mode.

        Returns:
            The extracted text.

        Raises:
            ValueError: If ``definitions`` mode is requested without names.
        """
        mode = ContextMode(mode)
        log = logger.bind(path=str(path), mode=mode.value)

        if mode is ContextMode.FULL:
            if path.is_dir():
                return list_directory(path)
            return path.read_text(encoding="utf-8")

        if mode is ContextMode.EXPORTS:
            content = "\n".join(self.iter_exports(path))
            log.debug("Extracted exports", lines=content.count("\n") + 1 if content else 0)
            return content

        if not definitions:
            msg = "definitions mode requires at least one name"
            raise ValueError(msg)
        content = extract_definitions(path.read_text(encoding="utf-8"), definitions)
        if not content:
            log.info("No definitions matched", names=list(definitions))
        return content
