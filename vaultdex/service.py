"""Vault service: the five operations exposed to the CLI and the MCP transport.

Every read-class operation rebuilds the index first, so callers never see data
older than the last change on disk. The walk happens outside the lock; the
write lock is only held to swap in the new snapshot.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Callable

from .config import VaultConfig
from .errors import InvalidInputError
from .models import NoteEntry, WriteResult
from .vault.index import VaultIndex, build_index
from .vault.locking import ReadWriteLock
from .vault.query import NO_FILTER_MESSAGE, QueryFilter, resolve_query
from .vault.store import NoteStore
from .vault.tree import render_tree

logger = logging.getLogger(__name__)

GUIDANCE_PATH = Path(__file__).with_name("guidance.md")
NO_MATCHES = "No matching notes found."


def render_index_summary(tree: str, index: VaultIndex) -> str:
    """Markdown summary: file tree, tag table, totals."""
    distinct = index.distinct_tags()
    lines = ["## File tree", "", "```", tree, "```", ""]
    lines.append(f"## Tags ({len(distinct)})")
    lines.append("")
    lines.append("| Tag | Notes |")
    lines.append("|-----|-------|")
    for tag, count in index.tag_counts().items():
        lines.append(f"| `{tag}` | {count} |")
    lines.append("")
    lines.append("## Stats")
    lines.append("")
    lines.append(f"- Notes: {len(index)}")
    lines.append(f"- Tags: {len(distinct)}")
    return "\n".join(lines) + "\n"


def render_query_results(entries: list[NoteEntry]) -> str:
    """Markdown table of query matches, or the no-match message."""
    if not entries:
        return NO_MATCHES
    lines = [
        f"Found {len(entries)} matching notes:",
        "",
        "| Note | Path | Tags | Aliases | Status |",
        "|------|------|------|---------|--------|",
    ]
    for e in entries:
        lines.append(
            f"| `{e.title}` | `{e.rel_path}` | {', '.join(e.tags)} | {', '.join(e.aliases)} | {e.status} |"
        )
    return "\n".join(lines) + "\n"


class VaultService:
    """Owns the configuration, the current index snapshot and its lock."""

    def __init__(self, config: VaultConfig, today: Callable[[], date] = date.today) -> None:
        self.config = config
        self.store = NoteStore(config, today=today)
        self._lock = ReadWriteLock()
        self._index = VaultIndex()
        self.rebuild()

    @property
    def root(self) -> Path:
        return self.config.root

    def rebuild(self) -> VaultIndex:
        """Walk the vault and atomically install the new snapshot."""
        fresh = build_index(self.root, self.config.extension)
        with self._lock.write():
            self._index = fresh
        logger.debug(f"Installed snapshot with {len(fresh)} notes")
        return fresh

    def snapshot(self) -> VaultIndex:
        """Rebuild, then return the installed snapshot."""
        self.rebuild()
        with self._lock.read():
            return self._index

    def list_index(self) -> str:
        self.rebuild()
        tree = render_tree(self.root)
        with self._lock.read():
            return render_index_summary(tree, self._index)

    def guidance(self) -> str:
        return GUIDANCE_PATH.read_text(encoding="utf-8")

    def query(self, query: QueryFilter) -> list[NoteEntry]:
        """Resolve a query against a fresh snapshot.

        Raises:
            InvalidInputError: If no filter is supplied.
        """
        if query.is_empty:
            raise InvalidInputError(NO_FILTER_MESSAGE)
        self.rebuild()
        with self._lock.read():
            return resolve_query(self._index, query, self.config.extension)

    def query_text(self, query: QueryFilter) -> str:
        return render_query_results(self.query(query))

    def read(self, path: str) -> str:
        return self.store.read(path)

    def write(
        self,
        category: str,
        filename: str,
        *,
        tags: list[str],
        aliases: list[str],
        status: str,
        content: str,
    ) -> WriteResult:
        result = self.store.write(
            category,
            filename,
            tags=tags,
            aliases=aliases,
            status=status,
            content=content,
        )
        self.rebuild()
        return result
