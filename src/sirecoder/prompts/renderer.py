"""Prompt template renderer using Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import jinja2
import structlog

logger = structlog.get_logger()

# Template directory is relative to this module
TEMPLATES_DIR = Path(__file__).parent / "templates"


class PromptRenderer:
    """Renders prompt templates with context.

    Uses Jinja2 for template rendering with a custom loader that
    looks for templates in the templates directory.

    Example:
        >>> renderer = PromptRenderer()
        >>> content = renderer.render("system", guide="")
        >>> "<SHOW>" in content
        True
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        """Initialize the renderer.

        Args:
            templates_dir: Directory containing templates.
                          Defaults to built-in templates.
        """
        self.templates_dir = templates_dir or TEMPLATES_DIR
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.templates_dir)),
            autoescape=False,  # Prompts are plain text, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=jinja2.StrictUndefined,
        )

    def render(self, template_name: str, **context: Any) -> str:
        """Render a template with the given context.

        Args:
            template_name: Name of the template (without .md extension).
            **context: Variables to pass to the template.

        Returns:
            Rendered template content.

        Raises:
            jinja2.TemplateNotFound: If template doesn't exist.
            jinja2.UndefinedError: If required variable is missing.
        """
        log = logger.bind(template=template_name)
        log.debug("Rendering prompt template")

        template = self.env.get_template(f"{template_name}.md")
        rendered = template.render(**context)

        log.debug("Template rendered", length=len(rendered))
        return rendered


def render_system_prompt(
    guide_path: Path | None = None,
    *,
    renderer: PromptRenderer | None = None,
) -> str:
    """Render the agent's system instruction.

    Args:
        guide_path: Optional language guide inlined into the prompt.
        renderer: Renderer to use (defaults to the built-in templates).

    Returns:
        The system prompt, stripped of surrounding whitespace.

    Raises:
        FileNotFoundError: If ``guide_path`` is given but missing.
    """
    guide = guide_path.read_text(encoding="utf-8").strip() if guide_path is not None else ""
    renderer = renderer or PromptRenderer()
    return renderer.render("system", guide=guide).strip()
