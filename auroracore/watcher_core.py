"""Watcher that runs a shell command whenever a watched path changes."""

from __future__ import annotations

import os
import subprocess
import threading
import time
from dataclasses import dataclass, field

from watchdog.observers import Observer

from auroracore.filewatcher_api import FileEvent, _WatchHandler


def expand_command(command: str, path: str, filename: str = "") -> str:
    """Replace the first ``$FILE`` in ``command`` with the changed file's path."""
    target = f"{path}/{filename}" if filename else path
    return command.replace("$FILE", target, 1)


def _mtime(path: str) -> float | None:
    try:
        return os.stat(path).st_mtime
    except OSError:
        return None


@dataclass
class _Watch:
    path: str
    command: str
    events: int
    last_mtime: float | None = field(default=None)


class WatcherCore:
    """Runs commands on file events; optionally polls, or stops after one event."""

    def __init__(self, periodic_interval: int = 0, one_shot: bool = False) -> None:
        self.periodic_interval = periodic_interval
        self.one_shot = one_shot
        self._watches: list[_Watch] = []
        self._observer = Observer()
        self._observer.daemon = True
        self._stopped = threading.Event()

    def add_watch(self, path: str, command: str, events: int) -> None:
        """Watch ``path``; raise FileNotFoundError if it does not exist."""
        if not os.path.exists(path):
            raise FileNotFoundError(path)
        watch = _Watch(path, command, int(events), _mtime(path))

        def on_event(event: FileEvent) -> None:
            self._execute(watch.command, watch.path, event.filename)

        handler = _WatchHandler(path, watch.events, on_event)
        directory = handler.target if handler.is_dir else os.path.dirname(handler.target)
        self._observer.schedule(handler, directory, recursive=False)
        self._watches.append(watch)

    def _execute(self, command: str, path: str, filename: str) -> None:
        if self._stopped.is_set() and self.one_shot:
            return
        subprocess.Popen(expand_command(command, path, filename), shell=True)
        if self.one_shot:
            self.stop()

    def _periodic_check(self) -> None:
        for watch in self._watches:
            current = _mtime(watch.path)
            if current != watch.last_mtime:
                watch.last_mtime = current
                self._execute(watch.command, watch.path, "")

    def start(self) -> None:
        """Watch until stop() is called; blocks."""
        self._stopped.clear()
        self._observer.start()
        try:
            next_check = time.monotonic() + self.periodic_interval
            while not self._stopped.wait(1.0 if self.periodic_interval <= 0 else 0.1):
                if self.periodic_interval > 0 and time.monotonic() >= next_check:
                    self._periodic_check()
                    next_check = time.monotonic() + self.periodic_interval
        finally:
            self._observer.stop()
            self._observer.join()

    def stop(self) -> None:
        self._stopped.set()