"""Tests for the vaultdex CLI."""

import json
from pathlib import Path

from click.testing import CliRunner

from vaultdex.cli import cli


def _run(vault: Path, *args: str, input: str | None = None):
    return CliRunner().invoke(cli, ["--vault", str(vault), *args], input=input)


def test_missing_vault_directory(tmp_path: Path) -> None:
    result = _run(tmp_path / "nope", "tree")
    assert result.exit_code == 2
    assert "does not exist" in result.output


def test_vault_from_environment(vault_path: Path) -> None:
    result = CliRunner().invoke(cli, ["query", "--name", "loose"], env={"VAULTDEX_ROOT": str(vault_path)})
    assert result.exit_code == 0, result.output
    assert "ideas/loose.md" in result.output


def test_tree(vault_path: Path) -> None:
    result = _run(vault_path, "tree")
    assert result.exit_code == 0, result.output
    assert "docker-guide.md" in result.output
    assert "Notes: 4" in result.output


def test_tree_markdown(vault_path: Path) -> None:
    result = _run(vault_path, "tree", "--markdown")
    assert result.exit_code == 0, result.output
    assert "## File tree" in result.output
    assert "| `linux` | 2 |" in result.output


def test_query_json(vault_path: Path) -> None:
    result = _run(vault_path, "query", "-t", "linux", "--json")
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [d["path"] for d in data] == ["tech/docker-guide.md", "tech/nginx-guide.md"]
    assert data[1]["status"] == "draft"


def test_query_no_matches_exits_1(vault_path: Path) -> None:
    result = _run(vault_path, "query", "-k", "kubernetes")
    assert result.exit_code == 1
    assert "No matching notes found." in result.output


def test_query_requires_a_filter(vault_path: Path) -> None:
    result = _run(vault_path, "query")
    assert result.exit_code == 1
    assert "at least one" in result.output


def test_read(vault_path: Path) -> None:
    result = _run(vault_path, "read", "ideas/loose.md")
    assert result.exit_code == 0, result.output
    assert result.output == "Just an idea.\n"


def test_read_rejects_traversal(vault_path: Path) -> None:
    result = _run(vault_path, "read", "../secret.md")
    assert result.exit_code == 1
    assert "Error" in result.output


def test_write_then_append(vault_path: Path) -> None:
    result = _run(vault_path, "write", "journal", "2025-03-14", "-t", "daily", "--content", "Morning.")
    assert result.exit_code == 0, result.output
    assert "Created note `journal/2025-03-14.md`." in result.output

    result = _run(vault_path, "write", "journal", "2025-03-14", "--content-file", "-", input="Evening.")
    assert result.exit_code == 0, result.output
    assert "Appended to `journal/2025-03-14.md`" in result.output

    text = (vault_path / "journal" / "2025-03-14.md").read_text(encoding="utf-8")
    assert text.startswith("---\ntags:\n  - daily\n")
    assert text.endswith("Morning.\n\nEvening.")


def test_write_needs_exactly_one_content_source(vault_path: Path) -> None:
    result = _run(vault_path, "write", "tech", "x")
    assert result.exit_code == 2
    assert not (vault_path / "tech" / "x.md").exists()


def test_write_rejects_bad_category(vault_path: Path) -> None:
    result = _run(vault_path, "write", "recipes", "pasta", "--content", "x")
    assert result.exit_code == 1
    assert "Invalid directory" in result.output
    assert not (vault_path / "recipes").exists()


def test_tips(vault_path: Path) -> None:
    result = _run(vault_path, "tips")
    assert result.exit_code == 0, result.output
    assert "write_note" in result.output


def test_query_blank_filters_count_as_missing(vault_path: Path) -> None:
    result = _run(vault_path, "query", "--keyword", "", "--name", "  ", "--tag", " ")
    assert result.exit_code == 1
    assert "at least one" in result.output
