"""Replacement text for optimization actions.

The planner and the applier both build section replacements through
``build_replacement`` so a plan's ``lines_saved`` is exactly what applying it
removes.
"""

import re

from ...models import ActionType, OptimizationAction

DEFAULT_CONDENSE_LINES = 15
EXAMPLES_CONDENSE_LINES = 20
DEFAULT_REFERENCE_FILE = "README.md"

_NUMBERED_ITEM = re.compile(r"^\d+\.")
_FENCE = "```"


def archive_reference(archive_path: str, line_count: int) -> str:
    return f"> **Archived:** See `{archive_path}` for {line_count} lines of historical content."


def dedupe_reference(section_name: str, reference_file: str) -> str:
    return f"> See `{reference_file}` for {section_name.lower()} information."


def condense_note(line_count: int) -> str:
    return f"> *Condensed from {line_count} lines. See archives for full details.*"


def _is_key_line(line: str) -> bool:
    return (
        line.startswith(("#", "-", "*", "|"))
        or ":" in line
        or _NUMBERED_ITEM.match(line) is not None
    )


def condensed_summary(content: str, max_lines: int = DEFAULT_CONDENSE_LINES) -> str:
    """Reduce a section body to its key lines.

    Key lines are headers, bullets, table rows, numbered items and lines
    containing a colon; fenced code is skipped. Bodies with no more than
    ``max_lines`` non-blank lines are returned unchanged.

    Args:
        content: Section body (without its header line)
        max_lines: Line limit for the summary, including the provenance note

    Returns:
        Summary followed by a provenance note
    """
    lines = [line for line in content.split("\n") if line.strip()]
    if len(lines) <= max_lines:
        return content

    summary: list[str] = []
    in_fence = False
    for line in lines:
        if line.lstrip().startswith(_FENCE):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        if len(summary) >= max_lines - 1:
            break
        if _is_key_line(line):
            summary.append(line)

    summary.extend(["", condense_note(len(lines))])
    return "\n".join(summary)


def build_replacement(
    action: OptimizationAction, header_line: str, body: str, line_count: int
) -> list[str]:
    """Lines that replace a section when an action is applied.

    Args:
        action: Action being applied
        header_line: The section's header line as it appears in the document
        body: Trimmed section body
        line_count: Lines in the action's range

    Returns:
        Replacement lines (empty for remove)

    Raises:
        ValueError: For action types that cannot be applied automatically
    """
    if action.type == ActionType.ARCHIVE:
        if not action.archive_path:
            raise ValueError("Archive action has no archive path")
        return [header_line, "", archive_reference(action.archive_path, line_count), ""]

    if action.type == ActionType.DEDUPE:
        reference_file = action.reference_file or DEFAULT_REFERENCE_FILE
        return [header_line, "", dedupe_reference(action.section_name, reference_file), ""]

    if action.type == ActionType.CONDENSE:
        condensed = condensed_summary(body, action.keep_lines or DEFAULT_CONDENSE_LINES)
        return [header_line, "", *condensed.split("\n"), ""]

    if action.type == ActionType.REMOVE:
        return []

    raise ValueError(f"{action.type.value.capitalize()} actions require manual intervention")


def truncate_content(content: str, max_length: int = 200) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length] + "..."
