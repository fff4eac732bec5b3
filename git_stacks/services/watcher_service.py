"""File system watcher for repository changes.

Bursts of filesystem events are coalesced: each event restarts a quiescence
window and a single change notification fires once the window elapses.
"""

import threading
import weakref
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from git_stacks.constants import DEFAULT_DEBOUNCE_MS
from git_stacks.exceptions import WatcherError
from git_stacks.logging_config import get_logger

logger = get_logger(__name__)

ChangeCallback = Callable[[], None]


@dataclass
class WatchSubscription:
    """Handle for an active watch, returned by ``RepoWatcher.watch``."""

    path: str
    watcher: "RepoWatcher"

    @property
    def active(self) -> bool:
        return self.watcher.subscription is self

    def cancel(self) -> None:
        """Stop watching if this subscription is still the current one."""
        if self.active:
            self.watcher.stop()


class _ChangeHandler(FileSystemEventHandler):
    """Forwards write events to the owning watcher.

    Read-only events (opened, closed without writing) are ignored, since
    reading the repository would otherwise trigger another refresh.
    """

    def __init__(self, on_event: Callable[[FileSystemEvent], None]):
        super().__init__()
        self.on_event = on_event

    def on_created(self, event: FileSystemEvent) -> None:
        self.on_event(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self.on_event(event)

    def on_deleted(self, event: FileSystemEvent) -> None:
        self.on_event(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        self.on_event(event)


class RepoWatcher:
    """Watches one repository directory and emits debounced change notifications.

    Usage:
        watcher = RepoWatcher(debounce_ms=100)
        watcher.watch("/path/to/repo", on_change)
        # ... later
        watcher.stop()
    """

    def __init__(self, debounce_ms: int = DEFAULT_DEBOUNCE_MS):
        self.debounce_ms = debounce_ms
        self.subscription: Optional[WatchSubscription] = None
        self._observer: Optional[Observer] = None
        self._timer: Optional[threading.Timer] = None
        self._callback_ref: Optional[Callable[[], Optional[ChangeCallback]]] = None
        self._lock = threading.Lock()

    @property
    def is_watching(self) -> bool:
        return self.subscription is not None

    @property
    def has_pending_notification(self) -> bool:
        with self._lock:
            return self._timer is not None

    def watch(self, path: Union[str, Path], on_change: ChangeCallback) -> Optional[WatchSubscription]:
        """Start watching ``path`` recursively, replacing any previous watch.

        Bound methods are held weakly: once their object is gone, notifications
        become no-ops.

        Returns:
            The new subscription, or None if the path could not be watched
        """
        self.stop()

        path = str(path)
        try:
            if not Path(path).is_dir():
                raise WatcherError(path, "not a directory")
            observer = Observer()
            observer.schedule(_ChangeHandler(self._handle_event), path, recursive=True)
            observer.start()
        except (OSError, WatcherError) as e:
            logger.error(f"Failed to watch repo: {e}")
            return None

        self._observer = observer
        self._callback_ref = _make_ref(on_change)
        self.subscription = WatchSubscription(path=path, watcher=self)
        logger.debug(f"Watching {path} (debounce {self.debounce_ms}ms)")
        return self.subscription

    def stop(self) -> None:
        """Cancel any pending notification and release the observer. Safe to call when idle."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            observer = self._observer
            self._observer = None
            self._callback_ref = None
            self.subscription = None

        if observer is not None:
            observer.stop()
            # The observer thread may be the caller when stop() runs from a callback
            if observer is not threading.current_thread():
                observer.join(timeout=2)
            logger.debug("Stopped watching")

    def _handle_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or _is_lock_file(event):
            return
        with self._lock:
            if self._observer is None:
                return
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.debounce_ms / 1000.0, self._fire)
            timer.args = (timer,)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self, timer: threading.Timer) -> None:
        with self._lock:
            if timer is not self._timer:
                # Superseded by a newer event, stop() or a newer watch
                return
            self._timer = None
            callback = self._callback_ref() if self._callback_ref else None

        if callback is None:
            logger.debug("Change listener is gone, dropping notification")
            return
        callback()


def _make_ref(callback: ChangeCallback) -> Callable[[], Optional[ChangeCallback]]:
    if hasattr(callback, "__self__") and hasattr(callback, "__func__"):
        return weakref.WeakMethod(callback)
    return lambda: callback


def _is_lock_file(event: FileSystemEvent) -> bool:
    paths = [event.src_path, getattr(event, "dest_path", "") or ""]
    return all(not p or str(p).endswith(".lock") for p in paths)
