"""File watcher and debounced incremental re-indexing."""

import itertools
import logging
import threading
from collections.abc import Callable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from config import DEFAULT_DEBOUNCE_MS
from index import LinkIndex
from indexer import apply_read, read_note_file
from vault import Vault

logger = logging.getLogger(__name__)


class ChangeCoordinator:
    """Apply add/change/remove events for notes to a LinkIndex.

    Adds and changes are debounced per path: a new event for the same path
    restarts its timer, and the file is re-read when the timer fires.
    Removals cancel any pending timer and apply immediately.

    Every scheduled timer gets a fresh token from one shared counter. A
    timer commits only if its token is still the path's current one when it
    takes the index lock, so a superseded or cancelled run never changes
    the index. Tokens are dropped once a path settles, and numbers are never
    reused.
    """

    def __init__(
        self,
        index: LinkIndex,
        vault: Vault,
        debounce_seconds: float = DEFAULT_DEBOUNCE_MS / 1000,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        """Initialize the coordinator.

        Args:
            index: Index to keep up to date.
            vault: Vault the event paths are relative to.
            debounce_seconds: Quiet period before a changed file is re-read.
            timer_factory: Builds the per-path timers (threading.Timer signature).
        """
        self._index = index
        self._vault = vault
        self._debounce_seconds = debounce_seconds
        self._timer_factory = timer_factory
        self._pending: dict[str, threading.Timer] = {}
        self._tokens: dict[str, int] = {}
        self._counter = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def debounce_seconds(self) -> float:
        return self._debounce_seconds

    def on_added(self, path: str) -> None:
        """Handle a new note."""
        self._schedule(path)

    def on_changed(self, path: str) -> None:
        """Handle a modified note."""
        self._schedule(path)

    def on_removed(self, path: str) -> None:
        """Handle a deleted note: cancel pending work and drop it now."""
        self._cancel([path])
        if self._index.remove(path):
            logger.debug("Removed %s", path)

    def on_removed_tree(self, prefix: str) -> None:
        """Handle a deleted folder: drop every note under `prefix`.

        An empty prefix means the whole vault.
        """
        under = prefix.rstrip("/") + "/" if prefix else ""

        with self._lock:
            waiting = [p for p in self._pending if p.startswith(under)]
        self._cancel(waiting)

        with self._index.lock:
            doomed = [p for p in self._index.notes if p.startswith(under)]
            for path in doomed:
                self._index.remove(path)
        if doomed:
            logger.debug("Removed %d notes under %s/", len(doomed), prefix)

    def pending_paths(self) -> list[str]:
        """Paths with a re-index waiting on its debounce timer."""
        with self._lock:
            return list(self._pending)

    def cancel_all(self) -> None:
        """Cancel every pending timer without touching the index."""
        with self._lock:
            timers = list(self._pending.values())
            self._pending.clear()
            self._tokens.clear()
        for timer in timers:
            timer.cancel()

    def _cancel(self, paths: list[str]) -> None:
        """Invalidate and cancel any pending timers for `paths`."""
        timers = []
        with self._lock:
            for path in paths:
                self._tokens.pop(path, None)
                timer = self._pending.pop(path, None)
                if timer is not None:
                    timers.append(timer)
        for timer in timers:
            timer.cancel()

    def _schedule(self, path: str) -> None:
        with self._lock:
            token = next(self._counter)
            self._tokens[path] = token
            previous = self._pending.pop(path, None)
            timer = self._timer_factory(
                self._debounce_seconds, self._fire, args=(path, token)
            )
            timer.daemon = True
            self._pending[path] = timer
        if previous is not None:
            previous.cancel()
        timer.start()

    def _is_current(self, path: str, token: int) -> bool:
        with self._lock:
            return self._tokens.get(path) == token

    def _settle(self, path: str, token: int) -> None:
        """Forget a path's token once its run has committed."""
        with self._lock:
            if self._tokens.get(path) == token:
                del self._tokens[path]

    def _fire(self, path: str, token: int) -> None:
        with self._lock:
            if self._tokens.get(path) != token:
                return
            self._pending.pop(path, None)

        try:
            read = read_note_file(self._vault, path)
            with self._index.lock:
                if not self._is_current(path, token):
                    return
                changed = apply_read(self._index, path, read)
                self._settle(path, token)
            if changed:
                logger.debug("Re-indexed %s", path)
        except Exception:
            logger.exception("Failed to re-index %s", path)
            self._settle(path, token)


class WatchHandler(FileSystemEventHandler):
    """Translate watchdog events for notes into coordinator calls.

    Folder deletions, and folder moves out of the indexed part of the vault,
    come through as a single directory event; they drop every note under
    the folder. Folders moved into place re-add the notes found inside.
    """

    def __init__(self, coordinator: ChangeCoordinator, vault: Vault):
        super().__init__()
        self._coordinator = coordinator
        self._vault = vault

    def _note_path(self, raw_path: str | bytes) -> str | None:
        """Vault-relative path of an indexable note, else None."""
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode()
        path = Path(raw_path)
        if not self._vault.is_note(path):
            return None
        return self._vault.relative(path)

    def _folder_path(self, raw_path: str | bytes) -> str | None:
        """Vault-relative path of a folder inside the vault, else None."""
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode()
        path = Path(raw_path)
        try:
            rel = path.relative_to(self._vault.root).as_posix()
        except ValueError:
            return None
        return "" if rel == "." else rel

    def _add_folder(self, raw_path: str | bytes) -> None:
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode()
        folder = Path(raw_path)
        if self._folder_path(folder) is None:
            return
        for p in sorted(folder.rglob("*.md")):
            if p.is_file() and self._vault.is_note(p):
                self._coordinator.on_added(self._vault.relative(p))

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        if event.is_directory:
            return
        path = self._note_path(event.src_path)
        if path:
            self._coordinator.on_added(path)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        if event.is_directory:
            return
        path = self._note_path(event.src_path)
        if path:
            self._coordinator.on_changed(path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle file or folder deletion."""
        if event.is_directory:
            folder = self._folder_path(event.src_path)
            if folder is not None:
                self._coordinator.on_removed_tree(folder)
            return
        path = self._note_path(event.src_path)
        if path:
            self._coordinator.on_removed(path)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle a move/rename as a removal plus an addition."""
        dest_path = getattr(event, "dest_path", None)

        if event.is_directory:
            folder = self._folder_path(event.src_path)
            if folder is not None:
                self._coordinator.on_removed_tree(folder)
            if dest_path:
                self._add_folder(dest_path)
            return

        src = self._note_path(event.src_path)
        if src:
            self._coordinator.on_removed(src)
        dest = self._note_path(dest_path) if dest_path else None
        if dest:
            self._coordinator.on_added(dest)


class FileWatcher:
    """Watch a vault for note changes and feed them to a coordinator."""

    def __init__(self, coordinator: ChangeCoordinator, vault: Vault):
        self._coordinator = coordinator
        self._vault = vault
        self._observer: Observer | None = None
        self._running = False

    def start(self) -> None:
        """Start watching for file changes."""
        if self._running:
            return

        self._observer = Observer()
        handler = WatchHandler(self._coordinator, self._vault)
        self._observer.schedule(handler, str(self._vault.root), recursive=True)
        self._observer.start()
        self._running = True
        logger.info("Started watching: %s", self._vault.root)

    def stop(self) -> None:
        """Stop watching and cancel pending re-indexes."""
        if not self._running or self._observer is None:
            return

        self._observer.stop()
        self._observer.join(timeout=5.0)
        self._observer = None
        self._running = False
        self._coordinator.cancel_all()
        logger.info("Stopped file watcher")

    @property
    def is_running(self) -> bool:
        """Check if watcher is running."""
        return self._running

    def __enter__(self) -> "FileWatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
