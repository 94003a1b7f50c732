"""Filesystem notification source built on watchdog."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from hotpotato.freshness.delta import (
    ChangeEvent,
    ChangeEventType,
    DeltaFlag,
    DeltaKind,
    ResourceDelta,
    ResourceType,
    build_delta_tree,
)
from hotpotato.interfaces.host import ChangeListener

logger = logging.getLogger(__name__)

_DEFAULT_IGNORE = (".git", "node_modules", "__pycache__", ".venv", ".tox")


def event_to_deltas(event: FileSystemEvent) -> list[ResourceDelta]:
    """Translate one watchdog event into leaf deltas (empty if irrelevant)."""
    rtype = ResourceType.folder if event.is_directory else ResourceType.file
    src = str(event.src_path)

    if event.event_type == EVENT_TYPE_MODIFIED:
        # A directory "modification" is just its listing changing
        flags = DeltaFlag.none if event.is_directory else DeltaFlag.content
        return [ResourceDelta(src, DeltaKind.changed, rtype, flags)]
    if event.event_type == EVENT_TYPE_CREATED:
        return [ResourceDelta(src, DeltaKind.added, rtype)]
    if event.event_type == EVENT_TYPE_DELETED:
        return [ResourceDelta(src, DeltaKind.removed, rtype)]
    if event.event_type == EVENT_TYPE_MOVED:
        dest = str(event.dest_path)
        return [
            ResourceDelta(src, DeltaKind.removed, rtype, DeltaFlag.moved_to),
            ResourceDelta(dest, DeltaKind.added, rtype, DeltaFlag.moved_from),
        ]
    return []


class _DeltaHandler(FileSystemEventHandler):
    """Turns watchdog events into change trees and fans them out."""

    def __init__(self, watcher: WorkspaceWatcher) -> None:
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        leaves = []
        for d in event_to_deltas(event):
            if not self._watcher.contains(d.path):
                logger.debug("Dropping delta outside workspace: %s", d.path)
            elif not self._watcher.should_ignore(d.path):
                leaves.append(d)
        if not leaves:
            return
        tree = build_delta_tree(self._watcher.root, leaves)
        self._watcher.publish(ChangeEvent(ChangeEventType.post_change, tree))


class WorkspaceWatcher:
    """Watches a directory tree and publishes ``post_change`` events.

    Implements the NotificationSource protocol. Paths containing any
    ignored directory component never produce events.
    """

    def __init__(
        self,
        root: str | Path,
        ignore_patterns: list[str] | tuple[str, ...] = _DEFAULT_IGNORE,
    ) -> None:
        self.root = Path(root).resolve()
        self._ignore = frozenset(ignore_patterns)
        self._lock = threading.Lock()
        self._listeners: list[ChangeListener] = []
        self._observer: Observer | None = None
        self._handler = _DeltaHandler(self)

    def contains(self, path: str) -> bool:
        """Return True if *path* lies strictly below the watched root."""
        p = Path(path)
        return p != self.root and p.is_relative_to(self.root)

    def should_ignore(self, path: str) -> bool:
        """Return True if the path contains any ignored directory component."""
        p = Path(path)
        if p.is_relative_to(self.root):
            p = p.relative_to(self.root)
        return any(part in self._ignore for part in p.parts)

    def add_listener(self, listener: ChangeListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(self, event: ChangeEvent) -> None:
        """Deliver *event* to every listener in registration order."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed")

    def start(self) -> None:
        """Begin watching the root directory recursively."""
        if self._observer is not None:
            return
        self._observer = Observer()
        self._observer.schedule(self._handler, str(self.root), recursive=True)
        self._observer.start()
        logger.info("Watching %s for changes", self.root)

    def stop(self) -> None:
        """Stop watching and clean up."""
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info("Stopped watching %s", self.root)

    def __enter__(self) -> WorkspaceWatcher:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
