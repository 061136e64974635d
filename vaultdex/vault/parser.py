"""Lenient parsing of the ``---`` metadata block at the top of a note.

Only three keys are understood: ``tags`` and ``aliases`` (block lists written
as ``- value`` lines) and ``status`` (a scalar, trailing ``# comment`` dropped).
This is not a YAML parser: half-written or foreign notes still index,
and any malformed input degrades to "no metadata".
"""

from __future__ import annotations

from ..models import DEFAULT_STATUS

HEADER_MARKER = "---"
_BOM = "\ufeff"


def _find_header_end(content: str) -> int | None:
    """Offset (relative to the text after the opening marker) of the closing ``\\n---``."""
    if not content.startswith(HEADER_MARKER):
        return None
    end = content.find("\n" + HEADER_MARKER, len(HEADER_MARKER))
    if end == -1:
        return None
    return end - len(HEADER_MARKER)


def parse_header(content: str) -> tuple[list[str], list[str], str]:
    """Extract (tags, aliases, status) from note content.

    Notes without a header, or with an unterminated one, yield
    ``([], [], "active")``. Never raises.
    """
    tags: list[str] = []
    aliases: list[str] = []
    status = DEFAULT_STATUS

    text = content.lstrip(_BOM)
    end = _find_header_end(text)
    if end is None:
        return tags, aliases, status

    block = text[len(HEADER_MARKER) : len(HEADER_MARKER) + end]
    collected = {"tags": tags, "aliases": aliases}
    current: str | None = None

    for line in block.splitlines():
        stripped = line.strip()
        if stripped.startswith("tags:"):
            current = "tags"
        elif stripped.startswith("aliases:"):
            current = "aliases"
        elif stripped.startswith("- ") and current is not None:
            collected[current].append(stripped[2:].strip())
        elif stripped.startswith("status:"):
            value = stripped[len("status:") :].strip()
            status = value.split("#", 1)[0].strip()
            current = None
        elif stripped and not stripped.startswith("- "):
            current = None

    return tags, aliases, status


def split_header(content: str) -> tuple[str, str] | None:
    """Split content into (header, body).

    The header runs from the opening marker through the closing marker line's
    ``---`` (its trailing newline stays with the body). Returns None when the
    content has no complete header.
    """
    end = _find_header_end(content)
    if end is None:
        return None
    cut = len(HEADER_MARKER) + end + len("\n" + HEADER_MARKER)
    return content[:cut], content[cut:]


def refresh_updated(header: str, today: str) -> str:
    """Rewrite every ``updated:`` line in a header to ``today``; other lines are untouched."""
    lines = []
    for line in header.split("\n"):
        if line.strip().startswith("updated:"):
            ending = "\r" if line.endswith("\r") else ""
            line = f"updated: {today}{ending}"
        lines.append(line)
    return "\n".join(lines)


def render_header(
    tags: list[str],
    aliases: list[str],
    *,
    created: str,
    updated: str,
    status: str,
) -> str:
    """Synthesize the header for a new note, including the blank line after it."""
    lines = [HEADER_MARKER, "tags:"]
    lines.extend(f"  - {tag}" for tag in tags)
    lines.append("aliases:")
    lines.extend(f"  - {alias}" for alias in aliases)
    lines.append(f"created: {created}")
    lines.append(f"updated: {updated}")
    lines.append(f"status: {status}")
    lines.append(HEADER_MARKER)
    return "\n".join(lines) + "\n\n"
