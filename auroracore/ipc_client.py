"""Datagram client that sends formatted log lines to the logger daemon."""

from __future__ import annotations

import socket

from auroracore.buffer_manager import LogLevel

MAX_MESSAGE_BYTES = 4095


def format_log_message(message: str, level: LogLevel = LogLevel.INFO) -> str:
    """Return ``"[LEVEL] message"``, cut to the size of one datagram."""
    encoded = f"[{level.name}] {message}".encode("utf-8")
    return encoded[:MAX_MESSAGE_BYTES].decode("utf-8", errors="ignore")


class IPCClient:
    """Sends log messages over a Unix datagram socket."""

    def __init__(self, socket_path: str) -> None:
        self.socket_path = socket_path
        self._sock: socket.socket | None = None

    def connect(self) -> None:
        """Create the socket; datagram sockets need no handshake."""
        self.close()
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)

    def send_log(self, message: str, level: LogLevel = LogLevel.INFO) -> int:
        """Send one message and return the number of bytes sent."""
        if self._sock is None:
            raise ConnectionError("client is not connected")
        payload = format_log_message(message, level).encode("utf-8")
        return self._sock.sendto(payload, self.socket_path)

    def is_connected(self) -> bool:
        return self._sock is not None

    def log_debug(self, message: str) -> int:
        return self.send_log(message, LogLevel.DEBUG)

    def log_info(self, message: str) -> int:
        return self.send_log(message, LogLevel.INFO)

    def log_warning(self, message: str) -> int:
        return self.send_log(message, LogLevel.WARNING)

    def log_error(self, message: str) -> int:
        return self.send_log(message, LogLevel.ERROR)

    def log_critical(self, message: str) -> int:
        return self.send_log(message, LogLevel.CRITICAL)

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> IPCClient:
        if self._sock is None:
            self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()