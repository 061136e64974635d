"""Watch command - rebuild the index whenever notes change."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console

from ..service import VaultService
from ..vault.index import VaultIndex
from ..watcher import run_watch_loop


def run_watch(service: VaultService) -> int:
    """
    Watch the vault and report each rebuild.

    This is a blocking command that runs until interrupted (Ctrl+C).
    """
    console = Console(stderr=True)
    index = service.snapshot()

    console.print(f"[bold]Watching[/bold] {service.root}")
    console.print(f"  Notes: {len(index)}  Tags: {len(index.tag_map)}")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    rebuilds = 0

    def on_rebuild(index: VaultIndex, changed: list[str]) -> None:
        nonlocal rebuilds
        rebuilds += 1
        timestamp = datetime.now().strftime("%H:%M:%S")
        console.print(
            f"[dim]{timestamp}[/dim] {len(changed)} change(s) -> "
            f"{len(index)} notes, {len(index.tag_map)} tags"
        )

    run_watch_loop(service, on_rebuild=on_rebuild)
    console.print()
    console.print(f"[bold]Stopped.[/bold] Rebuilt {rebuilds} times.")
    return 0
