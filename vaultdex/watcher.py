"""File system watcher that keeps the index fresh between calls.

Changes are debounced; each flush triggers one full rebuild (never an
incremental update).
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .service import VaultService
from .vault.index import VaultIndex

logger = logging.getLogger(__name__)


class RebuildEventHandler(FileSystemEventHandler):
    """
    Collects note changes and rebuilds the index once they settle.

    Key behaviors:
    - Debounces rapid modifications (e.g., editor save cycles)
    - Ignores files without the note extension
    """

    DEBOUNCE_SECONDS = 1.0

    def __init__(
        self,
        service: VaultService,
        on_rebuild: Callable[[VaultIndex, list[str]], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the event handler.

        Args:
            service: Service whose index is rebuilt
            on_rebuild: Callback receiving the new index and the changed paths
            clock: Time source (injectable for tests)
        """
        super().__init__()
        self.service = service
        self.on_rebuild = on_rebuild
        self.clock = clock

        # Changed paths since the last rebuild, and when the last one arrived
        self.changed: set[str] = set()
        self.last_change: float | None = None
        self._pending_lock = threading.Lock()

    def _is_relevant(self, path: str) -> bool:
        # Same rule as the index walk: exact extension match, hidden notes included
        return Path(path).name.endswith(self.service.config.extension)

    def _record(self, *paths: str, check: bool = True) -> None:
        relevant = [p for p in paths if p and (not check or self._is_relevant(p))]
        if not relevant:
            return
        with self._pending_lock:
            self.changed.update(relevant)
            self.last_change = self.clock()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        # Directory deletions can remove notes without per-file events
        if event.is_directory:
            self._record(event.src_path, check=False)
        else:
            self._record(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            self._record(event.dest_path, check=False)
        else:
            self._record(event.src_path, event.dest_path)

    def flush_pending(self) -> VaultIndex | None:
        """Rebuild if changes have settled past the debounce window."""
        with self._pending_lock:
            if self.last_change is None or self.clock() - self.last_change < self.DEBOUNCE_SECONDS:
                return None
            changed = sorted(self.changed)
            self.changed.clear()
            self.last_change = None

        index = self.service.rebuild()
        logger.info(f"Rebuilt index after {len(changed)} change(s): {len(index)} notes")
        if self.on_rebuild:
            self.on_rebuild(index, changed)
        return index


def watch_vault(
    service: VaultService,
    on_rebuild: Callable[[VaultIndex, list[str]], None] | None = None,
) -> tuple[Observer, RebuildEventHandler]:
    """
    Start watching a vault.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = RebuildEventHandler(service, on_rebuild=on_rebuild)
    observer = Observer()
    observer.schedule(handler, str(service.root), recursive=True)
    observer.start()
    return observer, handler


def run_watch_loop(
    service: VaultService,
    on_rebuild: Callable[[VaultIndex, list[str]], None] | None = None,
) -> None:
    """Watch and rebuild until interrupted."""
    observer, handler = watch_vault(service, on_rebuild=on_rebuild)

    try:
        while True:
            time.sleep(0.5)
            handler.flush_pending()
    except KeyboardInterrupt:
        observer.stop()

    observer.join()
