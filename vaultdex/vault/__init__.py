"""Vault indexing, querying and note storage."""

from .index import VaultIndex, build_index
from .parser import parse_header
from .query import QueryFilter, resolve_query
from .store import NoteStore
from .tree import render_tree

__all__ = [
    "VaultIndex",
    "build_index",
    "parse_header",
    "QueryFilter",
    "resolve_query",
    "NoteStore",
    "render_tree",
]
