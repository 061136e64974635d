"""Query command - search notes by tag, name and keyword."""

from __future__ import annotations

import json

from rich.console import Console
from rich.table import Table

from ..service import VaultService
from ..vault.query import QueryFilter


def run_query(
    service: VaultService,
    *,
    tags: list[str] | None = None,
    exact_name: str | None = None,
    keyword: str | None = None,
    output_json: bool = False,
) -> int:
    """Run a query and print the matches.

    Returns:
        Exit code (0 = matches found, 1 = no matches)
    """
    console = Console()
    entries = service.query(QueryFilter.build(tags, exact_name, keyword))

    if output_json:
        print(json.dumps([e.to_dict() for e in entries], ensure_ascii=False, indent=2))
        return 0 if entries else 1

    if not entries:
        console.print("[dim]No matching notes found.[/dim]")
        return 1

    table = Table(title=f"{len(entries)} matching notes")
    table.add_column("Note", style="bold")
    table.add_column("Path", style="cyan")
    table.add_column("Tags")
    table.add_column("Aliases")
    table.add_column("Status")
    for e in entries:
        table.add_row(e.title, e.rel_path, ", ".join(e.tags), ", ".join(e.aliases), e.status)
    console.print(table)
    return 0
