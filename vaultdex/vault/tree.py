"""Directory tree rendering for browsing the vault."""

from __future__ import annotations

import os
from pathlib import Path

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "


def _children(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            entries = [e for e in it if not e.name.startswith(".")]
    except OSError:
        return []
    return sorted(entries, key=lambda e: e.name)


def _is_real_dir(entry: os.DirEntry) -> bool:
    # Symlinked directories are listed as leaves, never descended into
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _render(directory: Path, prefix: str, lines: list[str]) -> None:
    entries = _children(directory)
    for i, entry in enumerate(entries):
        is_last = i == len(entries) - 1
        connector = LAST_BRANCH if is_last else BRANCH
        if _is_real_dir(entry):
            lines.append(f"{prefix}{connector}{entry.name}/")
            _render(Path(entry.path), prefix + (SPACE if is_last else PIPE), lines)
        else:
            lines.append(f"{prefix}{connector}{entry.name}")


def render_tree(root: Path) -> str:
    """Render the vault as an ASCII tree, directories suffixed with ``/``.

    Hidden entries are left out, symlinked directories are not followed and
    unreadable directories render as empty.
    """
    lines: list[str] = []
    _render(root, "", lines)
    return "\n".join(lines)
