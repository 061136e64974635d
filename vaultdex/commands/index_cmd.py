"""Index command - file tree, tag table and totals."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ..service import VaultService
from ..vault.tree import render_tree


def run_tree(service: VaultService, *, markdown: bool = False) -> int:
    """Print the vault tree and tag summary.

    Args:
        service: Vault service
        markdown: Print the same Markdown the MCP tool returns

    Returns:
        Exit code (always 0)
    """
    console = Console()

    if markdown:
        console.print(service.list_index(), markup=False, highlight=False, soft_wrap=True)
        return 0

    index = service.snapshot()
    console.print(f"[bold]{service.root}[/bold]")
    console.print(render_tree(service.root), markup=False, highlight=False)
    console.print()

    table = Table(title=f"Tags ({len(index.distinct_tags())})")
    table.add_column("Tag", style="cyan")
    table.add_column("Notes", justify="right")
    for tag, count in index.tag_counts().items():
        table.add_row(tag, str(count))
    console.print(table)

    console.print(f"Notes: {len(index)}  Tags: {len(index.distinct_tags())}", style="dim")
    return 0
