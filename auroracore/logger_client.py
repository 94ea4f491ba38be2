"""Command-line tool that sends a single log message to the logger daemon."""

from __future__ import annotations

import sys
from collections.abc import Sequence

from auroracore.buffer_manager import LogLevel
from auroracore.ipc_client import IPCClient

DEFAULT_SOCKET_PATH = "/tmp/logger_daemon"
PROG = "logger_client"

_LEVEL_NAMES = {
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warning": LogLevel.WARNING,
    "warn": LogLevel.WARNING,
    "error": LogLevel.ERROR,
    "critical": LogLevel.CRITICAL,
    "crit": LogLevel.CRITICAL,
}


def parse_level_string(level_str: str) -> LogLevel:
    """Map a case-insensitive level name to a LogLevel, defaulting to INFO."""
    return _LEVEL_NAMES.get(level_str.lower(), LogLevel.INFO)


def _usage() -> str:
    return "\n".join(
        [
            f"Usage: {PROG} [options] <message>",
            "Options:",
            f"  -p <path>     Socket path (default: {DEFAULT_SOCKET_PATH})",
            "  -l <level>    Log level: debug, info, warning, error, critical (default: info)",
            "  -m <message>  Log message (alternative to positional argument)",
            "  -h, --help    Show this help message",
            "",
            "Examples:",
            f'  {PROG} "Application started"',
            f'  {PROG} -l error "Database connection failed"',
            f'  {PROG} -p /custom/socket -l critical "System failure"',
        ]
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    socket_path = DEFAULT_SOCKET_PATH
    message: str | None = None
    level = LogLevel.INFO

    remaining = iter(args)
    for arg in remaining:
        if arg in ("-p", "-l", "-m"):
            value = next(remaining, None)
            if value is None:
                continue
            if arg == "-p":
                socket_path = value
            elif arg == "-l":
                level = parse_level_string(value)
            else:
                message = value
        elif arg in ("-h", "--help"):
            print(_usage())
            return 0
        elif not arg.startswith("-") and message is None:
            message = arg

    if message is None:
        print("Error: No message provided\n", file=sys.stderr)
        print(_usage())
        return 1

    client = IPCClient(socket_path)
    try:
        try:
            client.connect()
        except OSError:
            print(f"Failed to connect to daemon at {socket_path}", file=sys.stderr)
            print("Make sure the logger daemon is running", file=sys.stderr)
            return 1
        try:
            client.send_log(message, level)
        except OSError:
            print("Failed to send log message", file=sys.stderr)
            return 1
    finally:
        client.close()

    print("Log sent successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())