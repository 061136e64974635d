"""Note commands - read, write and the writing guide."""

from __future__ import annotations

import sys

from rich.console import Console

from ..service import VaultService


def run_read(service: VaultService, path: str) -> int:
    # Raw text, no rich rendering
    sys.stdout.write(service.read(path))
    return 0


def run_write(
    service: VaultService,
    category: str,
    filename: str,
    *,
    tags: list[str],
    aliases: list[str],
    status: str,
    content: str,
) -> int:
    """Create or append to a note and report the outcome on stderr."""
    console = Console(stderr=True)
    result = service.write(
        category,
        filename,
        tags=tags,
        aliases=aliases,
        status=status,
        content=content,
    )
    style = "green" if result.action == "created" else "yellow"
    console.print(result.message, style=style, markup=False, highlight=False)
    return 0


def run_tips(service: VaultService) -> int:
    sys.stdout.write(service.guidance())
    return 0
