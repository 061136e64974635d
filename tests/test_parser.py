"""Tests for metadata header parsing."""

import pytest

from vaultdex.vault.parser import parse_header, refresh_updated, render_header, split_header


@pytest.mark.parametrize(
    "content",
    [
        "",
        "# Title\n\nNo header here.\n",
        "---\ntags:\n  - never-closed\n",
        "  ---\ntags:\n  - indented\n---\n",
    ],
)
def test_missing_or_malformed_header_yields_defaults(content: str) -> None:
    assert parse_header(content) == ([], [], "active")


def test_parses_tags_aliases_status() -> None:
    content = "\n".join(
        [
            "---",
            "tags:",
            "  - docker",
            "  - Linux",
            "aliases:",
            "  - Docker guide",
            "created: 2024-01-01",
            "status: archived",
            "---",
            "",
            "Body",
        ]
    )
    assert parse_header(content) == (["docker", "Linux"], ["Docker guide"], "archived")


def test_status_comment_is_stripped() -> None:
    content = "---\nstatus: draft  # still writing\n---\n"
    assert parse_header(content)[2] == "draft"


def test_status_closes_open_list() -> None:
    content = "---\ntags:\n  - a\nstatus: active\n  - not-a-tag\n---\n"
    assert parse_header(content) == (["a"], [], "active")


def test_other_key_closes_list_without_losing_values() -> None:
    content = "---\ntags:\n  - a\ncreated: 2024-01-01\n  - b\naliases:\n  - x\n---\n"
    assert parse_header(content) == (["a"], ["x"], "active")


def test_blank_lines_do_not_close_list() -> None:
    content = "---\ntags:\n  - a\n\n  - b\n---\n"
    assert parse_header(content)[0] == ["a", "b"]


def test_dash_lines_without_open_list_are_ignored() -> None:
    content = "---\n- orphan\ntags:\n  - a\n---\n"
    assert parse_header(content)[0] == ["a"]


def test_byte_order_mark_is_ignored() -> None:
    content = "\ufeff---\ntags:\n  - bom\n---\n"
    assert parse_header(content)[0] == ["bom"]


def test_crlf_line_endings() -> None:
    content = "---\r\ntags:\r\n  - win\r\nstatus: draft\r\n---\r\nBody\r\n"
    assert parse_header(content) == (["win"], [], "draft")


def test_only_first_block_is_parsed() -> None:
    content = "---\ntags:\n  - first\n---\n\n---\ntags:\n  - second\n---\n"
    assert parse_header(content)[0] == ["first"]


def test_split_header_keeps_body_newline() -> None:
    content = "---\nupdated: 2020-01-01\n---\n\nBody"
    header, body = split_header(content)
    assert header == "---\nupdated: 2020-01-01\n---"
    assert body == "\n\nBody"


def test_split_header_without_header() -> None:
    assert split_header("Body only") is None
    assert split_header("---\nunterminated") is None


def test_refresh_updated_rewrites_only_updated_line() -> None:
    header = "---\ncreated: 2020-01-01\n  updated: 2020-01-01\nstatus: active\n---"
    assert refresh_updated(header, "2025-03-14") == (
        "---\ncreated: 2020-01-01\nupdated: 2025-03-14\nstatus: active\n---"
    )


def test_render_header_parses_back() -> None:
    header = render_header(
        ["docker", "linux"],
        ["Docker guide"],
        created="2025-03-14",
        updated="2025-03-14",
        status="draft",
    )
    assert header.startswith("---\ntags:\n  - docker\n")
    assert header.endswith("---\n\n")
    assert "created: 2025-03-14\nupdated: 2025-03-14\n" in header
    assert parse_header(header + "Body") == (["docker", "linux"], ["Docker guide"], "draft")
