"""Tagged text blocks exchanged with the agent."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TaggedBlock:
    """A unit of prompt content wrapped in an XML-like tag.

    Attributes:
        tag: Tag name (e.g. "FILE", "REQUEST").
        body: Text placed between the opening and closing tags.
        attributes: Quoted ``key="value"`` attributes of the opening tag.
        flags: Bare words appended to the opening tag (e.g. "current").
    """

    tag: str
    body: str
    attributes: dict[str, str] = field(default_factory=dict)
    flags: list[str] = field(default_factory=list)

    def render(self) -> str:
        """Render the block.

        Returns:
            The tagged text, without a trailing newline.
        """
        parts = [self.tag]
        parts.extend(f'{key}="{value}"' for key, value in self.attributes.items())
        parts.extend(self.flags)
        return f"<{' '.join(parts)}>\n{self.body}\n</{self.tag}>"


def file_block(
    path: str,
    content: str,
    *,
    mode: str | None = None,
    current: bool = False,
) -> str:
    """Render a ``<FILE>`` block."""
    attributes = {"path": path}
    if mode is not None:
        attributes["mode"] = mode
    flags = ["current"] if current else []
    return TaggedBlock("FILE", content, attributes, flags).render()


def dir_block(path: str, listing: str) -> str:
    """Render a ``<DIR>`` block."""
    return TaggedBlock("DIR", listing, {"path": path}).render()


def request_block(request: str) -> str:
    """Render a ``<REQUEST>`` block."""
    return TaggedBlock("REQUEST", request).render()


def check_block(diagnostics: str) -> str:
    """Render a ``<CHECK>`` block."""
    return TaggedBlock("CHECK", diagnostics).render()
