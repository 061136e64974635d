"""Tests for query resolution."""

from pathlib import Path

import pytest

from vaultdex.errors import InvalidInputError
from vaultdex.vault.index import VaultIndex, build_index
from vaultdex.vault.query import QueryFilter, filter_by_tags, resolve_query

from conftest import write_note


@pytest.fixture
def index(vault_path: Path) -> VaultIndex:
    return build_index(vault_path)


def _paths(entries) -> list[str]:
    return [e.rel_path for e in entries]


def test_no_filter_is_invalid(index: VaultIndex) -> None:
    with pytest.raises(InvalidInputError):
        resolve_query(index, QueryFilter())


def test_tags_intersect(tmp_path: Path) -> None:
    vault = tmp_path / "vault"
    write_note(vault / "a.md", tags=["x", "y"])
    write_note(vault / "b.md", tags=["x"])
    index = build_index(vault)

    assert _paths(resolve_query(index, QueryFilter(tags=("x", "y")))) == ["a.md"]
    assert _paths(resolve_query(index, QueryFilter(tags=("x",)))) == ["a.md", "b.md"]


def test_tags_are_case_insensitive(index: VaultIndex) -> None:
    assert _paths(resolve_query(index, QueryFilter(tags=("mcp",)))) == ["ai/mcp-development.md"]
    assert _paths(resolve_query(index, QueryFilter(tags=("LINUX",)))) == [
        "tech/docker-guide.md",
        "tech/nginx-guide.md",
    ]


def test_unknown_tag_empties_result(index: VaultIndex) -> None:
    assert resolve_query(index, QueryFilter(tags=("linux", "nope"))) == []


def test_exact_name(index: VaultIndex) -> None:
    assert _paths(resolve_query(index, QueryFilter(exact_name="Docker-Guide"))) == ["tech/docker-guide.md"]
    assert _paths(resolve_query(index, QueryFilter(exact_name="docker-guide.md"))) == ["tech/docker-guide.md"]


def test_unmatched_exact_name_is_empty_not_error(index: VaultIndex) -> None:
    assert resolve_query(index, QueryFilter(exact_name="missing")) == []


def test_exact_name_narrows_tag_candidates(index: VaultIndex) -> None:
    assert resolve_query(index, QueryFilter(tags=("nginx",), exact_name="docker-guide")) == []
    assert _paths(resolve_query(index, QueryFilter(tags=("linux",), exact_name="nginx-guide"))) == [
        "tech/nginx-guide.md"
    ]


def test_keyword_matches_title_alias_tag_and_path(index: VaultIndex) -> None:
    assert _paths(resolve_query(index, QueryFilter(keyword="NGINX"))) == ["tech/nginx-guide.md"]
    assert _paths(resolve_query(index, QueryFilter(keyword="server"))) == ["ai/mcp-development.md"]
    assert _paths(resolve_query(index, QueryFilter(keyword="rus"))) == ["ai/mcp-development.md"]
    assert _paths(resolve_query(index, QueryFilter(keyword="ideas/"))) == ["ideas/loose.md"]


def test_combined_filters_keep_walk_order(index: VaultIndex) -> None:
    result = resolve_query(index, QueryFilter(tags=("linux",), keyword="guide"))
    assert _paths(result) == ["tech/docker-guide.md", "tech/nginx-guide.md"]

    result = resolve_query(index, QueryFilter(tags=("linux",), keyword="docker"))
    assert _paths(result) == ["tech/docker-guide.md"]


def test_repeating_satisfied_filter_is_idempotent(index: VaultIndex) -> None:
    everything = list(range(len(index.entries)))
    once = filter_by_tags(index, everything, ("linux",))
    twice = filter_by_tags(index, once, ("linux",))
    assert once == twice
    assert resolve_query(index, QueryFilter(tags=("linux", "linux"))) == resolve_query(
        index, QueryFilter(tags=("linux",))
    )


def test_build_drops_blank_inputs() -> None:
    query = QueryFilter.build([" docker ", "", "  "], exact_name="  ", keyword="")
    assert query == QueryFilter(tags=("docker",))
    assert QueryFilter.build(None, "", " ").is_empty
