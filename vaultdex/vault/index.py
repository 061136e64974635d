"""In-memory index snapshot built by a full walk of the vault."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path

from ..models import NoteEntry
from .parser import parse_header

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultIndex:
    """Immutable snapshot of the vault.

    ``tag_map`` and ``name_map`` hold positions into ``entries``. Positions are
    only meaningful for the snapshot that produced them.
    """

    entries: tuple[NoteEntry, ...] = ()
    tag_map: dict[str, list[int]] = field(default_factory=dict)  # lowercase tag -> positions
    name_map: dict[str, int] = field(default_factory=dict)  # lowercase title -> position

    def __len__(self) -> int:
        return len(self.entries)

    def tag_counts(self) -> dict[str, int]:
        """Lowercase tag -> number of postings, sorted by tag."""
        return {tag: len(positions) for tag, positions in sorted(self.tag_map.items())}

    def distinct_tags(self) -> set[str]:
        """All tag spellings as written in the notes (case preserved)."""
        return {tag for entry in self.entries for tag in entry.tags}


def _walk_notes(root: Path, extension: str):
    """Yield every regular file under root whose name ends with ``extension``.

    The match is case-sensitive and hidden entries are included. Directories
    are visited in sorted order; unreadable ones are skipped silently (os.walk
    ignores errors by default) and symlinked directories are not followed.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            if not filename.endswith(extension):
                continue
            path = Path(dirpath) / filename
            if path.is_file():
                yield path


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Indexing {path} as empty: {e}")
        return ""


def build_index(root: Path, extension: str = ".md") -> VaultIndex:
    """Walk the vault and build a fresh index.

    Args:
        root: Vault root directory
        extension: Note file extension (case-insensitive)

    Returns:
        New VaultIndex; a missing root yields an empty index.
    """
    started = time.perf_counter()

    entries: list[NoteEntry] = []
    tag_map: dict[str, list[int]] = {}
    name_map: dict[str, int] = {}

    for path in _walk_notes(root, extension):
        rel_path = path.relative_to(root).as_posix()
        title = path.stem
        tags, aliases, status = parse_header(_read_text(path))

        position = len(entries)
        entries.append(
            NoteEntry(
                rel_path=rel_path,
                title=title,
                tags=tuple(tags),
                aliases=tuple(aliases),
                status=status,
            )
        )
        # Duplicate titles: the last one walked wins
        name_map[title.lower()] = position
        for tag in tags:
            tag_map.setdefault(tag.lower(), []).append(position)

    logger.debug(
        f"Indexed {len(entries)} notes, {len(tag_map)} tags under {root} "
        f"in {time.perf_counter() - started:.3f}s"
    )
    return VaultIndex(entries=tuple(entries), tag_map=tag_map, name_map=name_map)
