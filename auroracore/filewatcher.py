"""Command-line tool that runs a command whenever a watched path changes."""

from __future__ import annotations

import re
import signal
import sys
import threading
from collections.abc import Sequence

from auroracore.filewatcher_api import DEFAULT_EVENTS, EventType
from auroracore.watcher_core import WatcherCore

PROG = "filewatcher"

_EVENT_NAMES = {
    "modify": EventType.MODIFY,
    "create": EventType.CREATE,
    "delete": EventType.DELETE,
    "move": EventType.MOVE,
    "attrib": EventType.ATTRIB,
    "access": EventType.ACCESS,
}

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def parse_events(events_str: str) -> int:
    """Parse a comma-separated event list; unknown names are ignored."""
    mask = 0
    for token in events_str.split(","):
        if token in _EVENT_NAMES:
            mask |= int(_EVENT_NAMES[token])
    return mask or DEFAULT_EVENTS


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def _usage() -> str:
    return "\n".join(
        [
            f"Usage: {PROG} [options] <path> <command>",
            "Options:",
            "  -e <events>  Event mask (default: modify,create,delete)",
            "               Available: modify,create,delete,move,attrib,access",
            "  -p <seconds> Enable periodic check every N seconds (0 to disable)",
            "  -o           One-shot mode: exit after first event detection",
            "  -h           Show this help",
            "",
            "Examples:",
            f'  {PROG} /tmp/test.txt "echo File changed: $FILE"',
            f'  {PROG} -e create,delete /tmp/ "logger_client File event: $FILE"',
            f'  {PROG} -p 30 /tmp/test.txt "echo Periodic check: $FILE"',
            f'  {PROG} -o -p 10 /tmp/test.txt "echo One-time check: $FILE"',
        ]
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    path: str | None = None
    command: str | None = None
    events = DEFAULT_EVENTS
    interval = 0
    one_shot = False

    remaining = iter(args)
    for arg in remaining:
        if arg in ("-e", "-p"):
            value = next(remaining, None)
            if value is None:
                if path is None:
                    path = arg
                elif command is None:
                    command = arg
                continue
            if arg == "-e":
                events = parse_events(value)
            else:
                interval = _atoi(value)
                if interval < 0:
                    print(f"Invalid periodic interval: {interval}", file=sys.stderr)
                    return 1
        elif arg == "-o":
            one_shot = True
        elif arg == "-h":
            print(_usage())
            return 0
        elif path is None:
            path = arg
        elif command is None:
            command = arg

    if path is None or command is None:
        print(_usage())
        return 1

    watcher = WatcherCore(periodic_interval=max(interval, 0), one_shot=one_shot)
    try:
        watcher.add_watch(path, command, events)
    except OSError:
        print(f"Failed to add watch for: {path}", file=sys.stderr)
        return 1

    print(f"Watching: {path}")
    print(f"Command: {command}")
    if not one_shot:
        print("Press Ctrl+C to stop")

    previous = {}
    if threading.current_thread() is threading.main_thread():
        for signum in (signal.SIGTERM, signal.SIGINT):
            previous[signum] = signal.signal(signum, lambda *_: watcher.stop())
    try:
        watcher.start()
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    print("File watcher stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())