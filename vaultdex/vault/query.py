"""Query resolution over an index snapshot.

Filters narrow a candidate set of entry positions in a fixed order:
tags (AND across tags) -> exact name -> keyword. Results keep walk order.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..errors import InvalidInputError
from ..models import NoteEntry
from .index import VaultIndex

NO_FILTER_MESSAGE = "Provide at least one of tags, exact_name or keyword"


@dataclass(frozen=True)
class QueryFilter:
    """Query criteria. At least one must be set."""

    tags: tuple[str, ...] = field(default_factory=tuple)
    exact_name: str | None = None
    keyword: str | None = None

    @classmethod
    def build(
        cls,
        tags: list[str] | tuple[str, ...] | None = None,
        exact_name: str | None = None,
        keyword: str | None = None,
    ) -> QueryFilter:
        """Build a filter from caller input; blank tags, names and keywords count as not supplied."""
        return cls(
            tags=tuple(t.strip() for t in tags or () if t.strip()),
            exact_name=exact_name if exact_name and exact_name.strip() else None,
            keyword=keyword if keyword and keyword.strip() else None,
        )

    @property
    def is_empty(self) -> bool:
        return not self.tags and self.exact_name is None and self.keyword is None


def _strip_extension(name: str, extension: str) -> str:
    if extension and name.endswith(extension.lower()):
        return name[: -len(extension)]
    return name


def filter_by_tags(index: VaultIndex, candidates: list[int], tags: tuple[str, ...]) -> list[int]:
    for tag in tags:
        positions = index.tag_map.get(tag.lower())
        if not positions:
            return []
        allowed = set(positions)
        candidates = [i for i in candidates if i in allowed]
    return candidates


def filter_by_name(index: VaultIndex, candidates: list[int], name: str, extension: str = ".md") -> list[int]:
    position = index.name_map.get(_strip_extension(name.lower(), extension))
    if position is None:
        return []
    return [i for i in candidates if i == position]


def _matches_keyword(entry: NoteEntry, keyword: str) -> bool:
    return (
        keyword in entry.title.lower()
        or any(keyword in alias.lower() for alias in entry.aliases)
        or any(keyword in tag.lower() for tag in entry.tags)
        or keyword in entry.rel_path.lower()
    )


def filter_by_keyword(index: VaultIndex, candidates: list[int], keyword: str) -> list[int]:
    needle = keyword.lower()
    return [i for i in candidates if _matches_keyword(index.entries[i], needle)]


def resolve_query(index: VaultIndex, query: QueryFilter, extension: str = ".md") -> list[NoteEntry]:
    """Return the entries matching every supplied filter, in walk order.

    Raises:
        InvalidInputError: If no filter is supplied.
    """
    if query.is_empty:
        raise InvalidInputError(NO_FILTER_MESSAGE)

    candidates = list(range(len(index.entries)))

    if query.tags:
        candidates = filter_by_tags(index, candidates, query.tags)
    if query.exact_name is not None:
        candidates = filter_by_name(index, candidates, query.exact_name, extension)
    if query.keyword is not None:
        candidates = filter_by_keyword(index, candidates, query.keyword)

    return [index.entries[i] for i in candidates]
