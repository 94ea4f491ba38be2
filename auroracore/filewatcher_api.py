"""Callback-based file watcher running in a background thread."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import IntFlag

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer


class EventType(IntFlag):
    """File event kinds, with the kernel's inotify mask values."""

    ACCESS = 0x001
    MODIFY = 0x002
    ATTRIB = 0x004
    MOVE = 0x0C0
    CREATE = 0x100
    DELETE = 0x200


DEFAULT_EVENTS = int(EventType.MODIFY | EventType.CREATE | EventType.DELETE)

_WATCHDOG_KINDS = {
    "modified": EventType.MODIFY,
    "created": EventType.CREATE,
    "deleted": EventType.DELETE,
    "moved": EventType.MOVE,
}


@dataclass(frozen=True)
class FileEvent:
    """One change seen on a watched path."""

    path: str
    filename: str
    type: EventType
    mask: int


EventCallback = Callable[[FileEvent], None]


class _WatchHandler(FileSystemEventHandler):
    """Turns watchdog events on one watched path into FileEvents."""

    def __init__(self, path: str, events: int, callback: EventCallback) -> None:
        super().__init__()
        self.path = path
        self.target = os.path.abspath(path)
        self.is_dir = os.path.isdir(self.target)
        self.events = events
        self.callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        kind = _WATCHDOG_KINDS.get(event.event_type)
        if kind is None or not kind & self.events:
            return
        src = os.path.abspath(os.fsdecode(event.src_path))
        if self.is_dir:
            if os.path.dirname(src) != self.target:
                return
            filename = os.path.basename(src)
        elif src == self.target:
            filename = ""
        else:
            return
        self.callback(FileEvent(self.path, filename, kind, int(kind)))


class FileWatcher:
    """Watches paths and calls a callback for each matching change."""

    def __init__(self) -> None:
        self._observer = Observer()
        self._observer.daemon = True
        self._handlers: list[_WatchHandler] = []
        self._running = False

    def add_watch(
        self, path: str, callback: EventCallback, events: int = DEFAULT_EVENTS
    ) -> None:
        """Watch ``path``; raise FileNotFoundError if it does not exist."""
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        handler = _WatchHandler(path, int(events), callback)
        directory = handler.target if handler.is_dir else os.path.dirname(handler.target)
        self._observer.schedule(handler, directory, recursive=False)
        self._handlers.append(handler)

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._observer.start()

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        self._observer.stop()
        self._observer.join()

    def is_running(self) -> bool:
        return self._running

    def __enter__(self) -> FileWatcher:
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()


def make_event_mask(events: Iterable[EventType]) -> int:
    """OR a set of event types into one mask."""
    mask = 0
    for event in events:
        mask |= int(event)
    return mask


_NAMES = {member: member.name for member in EventType}


def event_type_to_string(event_type: EventType) -> str:
    return _NAMES.get(event_type, "UNKNOWN")  # type: ignore[call-overload]