"""Reading and writing individual notes.

New notes get a synthesized header; writes to an existing note append the new
content after a blank line and refresh the header's ``updated:`` date. Tags and
aliases are never merged on append.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path, PurePosixPath
from typing import Callable

from ..config import VaultConfig
from ..errors import InvalidInputError, NoteNotFoundError, PathTraversalError
from ..models import WriteResult
from .parser import refresh_updated, render_header, split_header

logger = logging.getLogger(__name__)


def _read_raw(path: Path) -> str:
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _write_raw(path: Path, text: str) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def normalize_rel_path(path: str) -> str:
    """Validate a caller-supplied vault-relative path.

    Raises:
        InvalidInputError: If the path is empty.
        PathTraversalError: If any segment is ``..``.
    """
    rel = path.strip().lstrip("/\\")
    if not rel:
        raise InvalidInputError("Path must not be empty")
    if ".." in rel.replace("\\", "/").split("/"):
        raise PathTraversalError(f"Path must not contain '..': {path}")
    return rel


class NoteStore:
    """File-level note operations rooted at a vault."""

    def __init__(self, config: VaultConfig, today: Callable[[], date] = date.today) -> None:
        self.config = config
        self._today = today

    @property
    def root(self) -> Path:
        return self.config.root

    def read(self, path: str) -> str:
        """Return the raw text of a note, header included.

        Raises:
            InvalidInputError: Empty path.
            PathTraversalError: Path contains a ``..`` segment.
            NoteNotFoundError: No such file.
        """
        rel = normalize_rel_path(path)
        file_path = self.root / PurePosixPath(rel.replace("\\", "/"))
        if not file_path.exists():
            raise NoteNotFoundError(f"Note not found: {rel}")
        return _read_raw(file_path)

    def validate_category(self, category: str) -> str:
        directory = category.strip().strip("/")
        if directory not in self.config.categories:
            raise InvalidInputError(
                f"Invalid directory '{directory}', must be one of: {', '.join(self.config.categories)}"
            )
        return directory

    def validate_filename(self, filename: str) -> str:
        name = filename.strip()
        if name.endswith(self.config.extension):
            name = name[: -len(self.config.extension)]
        if not name:
            raise InvalidInputError("Filename must not be empty")
        if " " in name or not name.isascii():
            raise InvalidInputError(
                "Filename must be lowercase ASCII words joined by hyphens (no spaces or non-ASCII characters)"
            )
        if name != name.lower():
            raise InvalidInputError("Filename must be all lowercase")
        if "/" in name or "\\" in name or ".." in name:
            raise InvalidInputError("Filename must not contain path separators or '..'")
        return name

    def validate_status(self, status: str) -> str:
        if status not in self.config.statuses:
            raise InvalidInputError(
                f"Invalid status '{status}', must be one of: {', '.join(self.config.statuses)}"
            )
        return status

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
        """Create a note, or append to it if it already exists.

        All parameters are validated before anything touches the filesystem.

        Returns:
            WriteResult describing what happened
        """
        directory = self.validate_category(category)
        name = self.validate_filename(filename)
        status = self.validate_status(status)

        target_dir = self.root / directory
        target_dir.mkdir(parents=True, exist_ok=True)

        rel_path = f"{directory}/{name}{self.config.extension}"
        file_path = target_dir / f"{name}{self.config.extension}"
        today = self._today().isoformat()

        if file_path.exists():
            existing = _read_raw(file_path)
            parts = split_header(existing)
            if parts is None:
                updated = f"{existing}\n\n{content}"
            else:
                header, body = parts
                updated = f"{refresh_updated(header, today)}{body}\n\n{content}"
            _write_raw(file_path, updated)
            logger.info(f"Appended {len(content)} chars to {rel_path}")
            return WriteResult(action="appended", rel_path=rel_path, date=today)

        header = render_header(list(tags), list(aliases), created=today, updated=today, status=status)
        _write_raw(file_path, header + content)
        logger.info(f"Created {rel_path}")
        return WriteResult(action="created", rel_path=rel_path, date=today)
