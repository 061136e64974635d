"""Pytest configuration and fixtures."""

from datetime import date
from pathlib import Path

import pytest

from vaultdex.config import VaultConfig
from vaultdex.models import NoteEntry
from vaultdex.service import VaultService
from vaultdex.vault.index import VaultIndex

TODAY = date(2025, 3, 14)


def write_note(
    path: Path,
    *,
    tags: list[str] | None = None,
    aliases: list[str] | None = None,
    status: str | None = None,
    body: str = "Body text.",
) -> Path:
    """Write a note with a metadata header in the vault's convention."""
    lines = ["---"]
    if tags is not None:
        lines.append("tags:")
        lines.extend(f"  - {t}" for t in tags)
    if aliases is not None:
        lines.append("aliases:")
        lines.extend(f"  - {a}" for a in aliases)
    if status is not None:
        lines.append(f"status: {status}")
    lines.extend(["---", "", body, ""])
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    """A small vault:

    tech/docker-guide.md   tags docker, linux
    tech/nginx-guide.md    tags nginx, linux
    ai/mcp-development.md  tags ai, MCP, rust; alias "MCP server"
    ideas/loose.md         no header
    """
    vault = tmp_path / "vault"
    write_note(vault / "tech" / "docker-guide.md", tags=["docker", "linux"], aliases=["Docker guide"])
    write_note(vault / "tech" / "nginx-guide.md", tags=["nginx", "linux"], aliases=[], status="draft")
    write_note(
        vault / "ai" / "mcp-development.md",
        tags=["ai", "MCP", "rust"],
        aliases=["MCP server"],
        status="active # reviewed",
    )
    (vault / "ideas").mkdir(parents=True)
    (vault / "ideas" / "loose.md").write_text("Just an idea.\n", encoding="utf-8")
    return vault


@pytest.fixture
def config(vault_path: Path) -> VaultConfig:
    return VaultConfig(root=vault_path)


@pytest.fixture
def service(config: VaultConfig) -> VaultService:
    return VaultService(config, today=lambda: TODAY)


def entry_named(index: VaultIndex, name: str) -> NoteEntry | None:
    """Look up an entry by title through the index's name map."""
    position = index.name_map.get(name.lower())
    return index.entries[position] if position is not None else None
