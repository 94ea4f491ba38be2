"""In-memory staging buffer for log entries waiting to be written to disk."""

from __future__ import annotations

import time
from enum import IntEnum

DEFAULT_BUFFER_SIZE = 64 * 1024
DEFAULT_FLUSH_INTERVAL_MS = 5000
FLUSH_RATIO = 0.8


class LogLevel(IntEnum):
    """Severity of a log entry, ordered from least to most severe."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    CRITICAL = 4


class BufferManager:
    """Fixed-capacity byte buffer that decides when its contents should be flushed.

    A flush is due once the buffer is 80% full, or once ``flush_interval_ms``
    has passed since the last clear and the buffer holds data.
    """

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        self.buffer_size = buffer_size
        self.flush_threshold = int(buffer_size * FLUSH_RATIO)
        self.flush_interval_ms = DEFAULT_FLUSH_INTERVAL_MS
        self._buffer = bytearray()
        self._has_critical_logs = False
        self._last_flush = time.monotonic()

    def __len__(self) -> int:
        return len(self._buffer)

    def add_log(self, data: bytes, level: LogLevel = LogLevel.INFO) -> bool:
        """Append ``data``; return False, storing nothing, if it does not fit."""
        if len(self._buffer) + len(data) > self.buffer_size:
            return False
        self._buffer += data
        if level >= LogLevel.ERROR:
            self._has_critical_logs = True
        return True

    def should_flush(self) -> bool:
        """True when the size threshold or the time interval has been reached."""
        if len(self._buffer) >= self.flush_threshold:
            return True
        elapsed_ms = (time.monotonic() - self._last_flush) * 1000
        return elapsed_ms >= self.flush_interval_ms and bool(self._buffer)

    def should_force_flush(self) -> bool:
        """True when the buffer holds an ERROR or CRITICAL entry."""
        return self._has_critical_logs

    def data(self) -> bytes:
        """The buffered bytes."""
        return bytes(self._buffer)

    def clear(self) -> None:
        """Drop the buffered bytes and restart the flush interval."""
        self._buffer.clear()
        self._has_critical_logs = False
        self._last_flush = time.monotonic()

    def available_space(self) -> int:
        return self.buffer_size - len(self._buffer)

    def is_empty(self) -> bool:
        return not self._buffer