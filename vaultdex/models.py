"""Data models for indexed vault notes."""

from dataclasses import dataclass, field
from typing import Literal

DEFAULT_STATUS = "active"

# Outcome of a write_note call
WriteAction = Literal["created", "appended"]


@dataclass(frozen=True)
class NoteEntry:
    """One indexed note."""

    rel_path: str  # forward-slash path from the vault root, unique per snapshot
    title: str  # filename without extension
    tags: tuple[str, ...] = field(default_factory=tuple)
    aliases: tuple[str, ...] = field(default_factory=tuple)
    status: str = DEFAULT_STATUS

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "path": self.rel_path,
            "tags": list(self.tags),
            "aliases": list(self.aliases),
            "status": self.status,
        }


@dataclass(frozen=True)
class WriteResult:
    """Summary of a note write."""

    action: WriteAction
    rel_path: str
    date: str  # ISO date stamped into created/updated

    @property
    def message(self) -> str:
        if self.action == "created":
            return f"Created note `{self.rel_path}`."
        return f"Appended to `{self.rel_path}`; updated date set to {self.date}."
