"""Logging daemon: receives datagrams, buffers them and writes rotated log files."""

from __future__ import annotations

import contextlib
import os
import re
import select
import signal
import socket
import sys
import threading
from collections.abc import Sequence
from datetime import datetime

from auroracore.buffer_manager import DEFAULT_BUFFER_SIZE, BufferManager, LogLevel
from auroracore.file_manager import DEFAULT_MAX_FILES, DEFAULT_MAX_SIZE, FileManager

DEFAULT_LOG_PATH = "/data/local/tmp/app.log"
DEFAULT_SOCKET_PATH = "/tmp/logger_daemon"
DEFAULT_FLUSH_INTERVAL_MS = 5000
DEFAULT_SLEEP_MS = 100
RECV_SIZE = 4095
PROG = "logger_daemon"

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def parse_log_level(message: str) -> LogLevel:
    """Read the level from a ``[LEVEL]`` prefix, defaulting to INFO."""
    for level in LogLevel:
        if message.startswith(f"[{level.name}]"):
            return level
    return LogLevel.INFO


def format_entry(message: str, now: datetime | None = None) -> str:
    """Prefix ``message`` with a local timestamp and end it with a newline."""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    return f"[{stamp}] {message}\n"


class LoggerDaemon:
    """Receives log datagrams on a Unix socket and writes them through a buffer."""

    def __init__(
        self,
        log_path: str | os.PathLike[str] = DEFAULT_LOG_PATH,
        max_size: int = DEFAULT_MAX_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        socket_path: str = DEFAULT_SOCKET_PATH,
        flush_interval_ms: int = DEFAULT_FLUSH_INTERVAL_MS,
        sleep_ms: int = DEFAULT_SLEEP_MS,
    ) -> None:
        self.socket_path = socket_path
        self.sleep_ms = sleep_ms
        self.buffer = BufferManager(buffer_size)
        self.buffer.flush_interval_ms = flush_interval_ms
        self.file_manager = FileManager(log_path, max_size, max_files)
        self._stopping = threading.Event()
        self._force_flush = False

    def __enter__(self) -> LoggerDaemon:
        return self

    def __exit__(self, *args: object) -> None:
        self.file_manager.close()

    def handle_message(self, message: str) -> None:
        """Buffer one received message; ERROR and CRITICAL are written at once."""
        level = parse_log_level(message)
        entry = format_entry(message).encode("utf-8")
        if not self.buffer.add_log(entry, level):
            self.flush()
            self.buffer.add_log(entry, level)
        if level >= LogLevel.ERROR:
            self.flush(sync=True)

    def flush(self, sync: bool = False) -> None:
        """Write buffered data to the log file, syncing to disk if asked."""
        data = self.buffer.data()
        if data:
            self.file_manager.write_data(data)
            if sync:
                self.file_manager.force_sync()
            self.buffer.clear()

    def request_flush(self) -> None:
        """Ask the running loop to flush and sync on its next pass."""
        self._force_flush = True

    def _check_flush(self) -> None:
        forced = self._force_flush
        if self.buffer.should_flush() or self.buffer.should_force_flush() or forced:
            self.flush(sync=forced)
            self._force_flush = False

    def run(self) -> None:
        """Serve until stop() is called, then flush what is left."""
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
        try:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(self.socket_path)
            sock.bind(self.socket_path)
        except OSError:
            sock.close()
            raise

        print(f"Logger daemon started, socket: {self.socket_path}", flush=True)
        print("Logger daemon ready to receive logs...", flush=True)
        timeout = self.sleep_ms / 1000
        try:
            while not self._stopping.is_set():
                readable, _, _ = select.select([sock], [], [], timeout)
                if readable:
                    payload = sock.recv(RECV_SIZE)
                    if payload:
                        self.handle_message(payload.decode("utf-8", errors="replace"))
                self._check_flush()
                if not readable:
                    self._stopping.wait(timeout)
            self.flush(sync=True)
        finally:
            sock.close()
            with contextlib.suppress(FileNotFoundError):
                os.unlink(self.socket_path)
        print("Logger daemon stopped", flush=True)

    def stop(self) -> None:
        """Ask the running loop to flush and exit."""
        self._force_flush = True
        self._stopping.set()


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


_OPTIONS = {
    "-f": ("log_path", str),
    "-s": ("max_size", _atoi),
    "-n": ("max_files", _atoi),
    "-b": ("buffer_size", _atoi),
    "-p": ("socket_path", str),
    "-t": ("flush_interval_ms", _atoi),
}


def _usage() -> str:
    return "\n".join(
        [
            f"Usage: {PROG} [options]",
            "Options:",
            f"  -f <path>     Log file path (default: {DEFAULT_LOG_PATH})",
            "  -s <size>     Max file size in bytes (default: 10MB)",
            "  -n <count>    Max number of log files (default: 5)",
            "  -b <size>     Buffer size in bytes (default: 64KB)",
            f"  -p <path>     Socket path (default: {DEFAULT_SOCKET_PATH})",
            "  -t <ms>       Flush interval in milliseconds (default: 5000)",
            "  -h, --help    Show this help message",
        ]
    )


def _install_signals(daemon: LoggerDaemon) -> dict[int, object]:
    def shutdown(signum: int, _frame: object) -> None:
        print(f"\nReceived signal {signum}, initiating graceful shutdown...", flush=True)
        daemon.stop()

    def flush_only(_signum: int, _frame: object) -> None:
        print("\nReceived SIGUSR1, forcing buffer flush...", flush=True)
        daemon.request_flush()

    handlers = {
        getattr(signal, name): shutdown
        for name in ("SIGTERM", "SIGINT", "SIGQUIT")
        if hasattr(signal, name)
    }
    if hasattr(signal, "SIGUSR1"):
        handlers[signal.SIGUSR1] = flush_only
    return {signum: signal.signal(signum, handler) for signum, handler in handlers.items()}


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    options: dict[str, object] = {}
    remaining = iter(args)
    for arg in remaining:
        if arg in _OPTIONS:
            value = next(remaining, None)
            if value is None:
                continue
            name, convert = _OPTIONS[arg]
            options[name] = convert(value)
        elif arg in ("-h", "--help"):
            print(_usage())
            return 0

    try:
        daemon = LoggerDaemon(**options)  # type: ignore[arg-type]
    except OSError as exc:
        print(f"open: {exc}", file=sys.stderr)
        return 1

    with daemon:
        previous = {}
        if threading.current_thread() is threading.main_thread():
            previous = _install_signals(daemon)
        try:
            daemon.run()
        except OSError as exc:
            print(f"bind: {exc}", file=sys.stderr)
            return 1
        finally:
            for signum, handler in previous.items():
                signal.signal(signum, handler)
    return 0


if __name__ == "__main__":
    sys.exit(main())