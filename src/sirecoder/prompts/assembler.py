"""Assembly of the inputs sent to the agent."""

from __future__ import annotations

from sirecoder.context.blocks import check_block, file_block, request_block

NO_ERRORS = "No errors."
FIX_REQUEST = "Fix this file."


def assemble(
    target_path: str,
    target_content: str,
    request: str,
    dependency_blocks: str = "",
    check_text: str | None = None,
) -> str:
    """Build the initial input of a session.

    Order is fixed: dependencies, target file, request, then the check
    outcome when checking is enabled.

    Args:
        target_path: Path of the target file as shown to the agent.
        target_content: Current content of the target file.
        request: The user's change request.
        dependency_blocks: Rendered dependency blocks ("" for none).
        check_text: Initial diagnostics, "" when clean, None when checking
            is disabled.

    Returns:
        The initial agent input.
    """
    sections = [
        dependency_blocks,
        file_block(target_path, target_content, current=True),
        request_block(request),
    ]
    if check_text is not None:
        sections.append(check_block(check_text or NO_ERRORS))
    return "\n\n".join(section for section in sections if section)


def repair_input(target_path: str, content: str, diagnostics: str) -> str:
    """Build the input of a repair round.

    Nothing from earlier rounds is carried over.

    Args:
        target_path: Path of the target file as shown to the agent.
        content: The content just written to the target file.
        diagnostics: Checker output for that content.

    Returns:
        The repair agent input.
    """
    return "\n\n".join(
        [
            file_block(target_path, content, current=True),
            request_block(FIX_REQUEST),
            check_block(diagnostics),
        ]
    )
