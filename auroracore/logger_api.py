"""In-process buffered logger with a background flush thread and file rotation."""

from __future__ import annotations

import contextlib
import os
import threading
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO

FLUSH_RATIO = 0.8


class LogLevel(IntEnum):
    """Severity of a log entry, ordered from least to most severe."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    FATAL = 5


@dataclass
class Config:
    """Settings for an InternalLogger."""

    log_path: str = "app.log"
    max_file_size: int = 10 * 1024 * 1024
    max_files: int = 5
    buffer_size: int = 64 * 1024
    flush_interval_ms: int = 1000
    auto_flush: bool = True
    min_log_level: LogLevel = LogLevel.INFO
    log_format: str = "{timestamp} [{level}] [{thread_id}] {message}"


class InternalLogger:
    """Formats entries into a memory buffer and writes them to a rotated file."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()
        self._running = True
        self._buffer = bytearray()
        self._cond = threading.Condition()
        self._file: BinaryIO | None = None
        self._thread: threading.Thread | None = None
        if self.config.auto_flush:
            self._thread = threading.Thread(target=self._flush_worker, daemon=True)
            self._thread.start()

    def _format(self, level: LogLevel, message: str) -> str:
        text = self.config.log_format
        for key, value in (
            ("{timestamp}", str(int(time.time()))),
            ("{level}", level.name),
            ("{thread_id}", str(threading.get_ident())),
            ("{message}", message),
        ):
            text = text.replace(key, value, 1)
        return text + "\n"

    def _over_threshold(self) -> bool:
        return len(self._buffer) > self.config.buffer_size * FLUSH_RATIO

    def log(self, level: LogLevel, message: str) -> None:
        """Buffer ``message`` if ``level`` reaches the configured minimum."""
        if level < self.config.min_log_level:
            return
        entry = self._format(level, message).encode("utf-8")
        with self._cond:
            if len(self._buffer) + len(entry) > self.config.buffer_size:
                self._flush_locked()
            self._buffer += entry
            if self._over_threshold():
                self._cond.notify()

    def flush(self) -> None:
        """Write buffered entries to the log file now."""
        with self._cond:
            self._flush_locked()

    def stop(self) -> None:
        """Stop the flush thread and write what is left."""
        with self._cond:
            if not self._running:
                return
            self._running = False
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join()
        self.flush()
        if self._file is not None:
            self._file.close()
            self._file = None

    def _flush_worker(self) -> None:
        interval = self.config.flush_interval_ms / 1000
        while True:
            with self._cond:
                if not self._running:
                    return
                self._cond.wait_for(
                    lambda: not self._running or self._over_threshold(), interval
                )
                if self._buffer:
                    self._flush_locked()

    def _flush_locked(self) -> None:
        if not self._buffer:
            return
        if self._file is None or self._file.tell() > self.config.max_file_size:
            self._rotate()
        assert self._file is not None
        self._file.write(self._buffer)
        self._file.flush()
        self._buffer.clear()

    def _rotate(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
        path = self.config.log_path
        for index in range(self.config.max_files - 1, 0, -1):
            with contextlib.suppress(OSError):
                os.replace(f"{path}.{index - 1}", f"{path}.{index}")
        with contextlib.suppress(OSError):
            os.replace(path, f"{path}.0")
        self._file = open(path, "ab")


_logger: InternalLogger | None = None
_lock = threading.Lock()


def init_logger(config: Config | None = None) -> None:
    """Create the global logger unless one already exists."""
    global _logger
    with _lock:
        if _logger is None:
            _logger = InternalLogger(config)


def flush_logs() -> None:
    if _logger is not None:
        _logger.flush()


def shutdown_logger() -> None:
    """Stop and discard the global logger."""
    global _logger
    with _lock:
        logger, _logger = _logger, None
    if logger is not None:
        logger.stop()


def _emit(level: LogLevel, message: str) -> None:
    init_logger()
    logger = _logger
    if logger is not None:
        logger.log(level, message)


def trace(message: str) -> None:
    _emit(LogLevel.TRACE, message)


def debug(message: str) -> None:
    _emit(LogLevel.DEBUG, message)


def info(message: str) -> None:
    _emit(LogLevel.INFO, message)


def warn(message: str) -> None:
    _emit(LogLevel.WARNING, message)


def error(message: str) -> None:
    _emit(LogLevel.ERROR, message)


def fatal(message: str) -> None:
    _emit(LogLevel.FATAL, message)