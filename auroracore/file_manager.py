"""Append-only log file with size-based rotation."""

from __future__ import annotations

import contextlib
import os
from typing import BinaryIO

DEFAULT_MAX_SIZE = 10 * 1024 * 1024
DEFAULT_MAX_FILES = 5


def _open_private(path: str, flags: int) -> int:
    return os.open(path, flags, 0o644)


class FileManager:
    """Writes to ``base_path``, rotating it to ``base_path.0``, ``.1``, ... when full."""

    def __init__(
        self,
        base_path: str | os.PathLike[str],
        max_size: int = DEFAULT_MAX_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
    ) -> None:
        self.base_path = os.fspath(base_path)
        self.max_size = max_size
        self.max_files = max_files
        self._file: BinaryIO | None = None
        self._size = 0
        self._open_current()

    def _open_current(self) -> None:
        self._file = open(self.base_path, "ab", buffering=0, opener=_open_private)
        self._size = os.fstat(self._file.fileno()).st_size

    def _rotate(self) -> None:
        if self._file is not None:
            os.fsync(self._file.fileno())
            self._file.close()
            self._file = None
        for index in range(self.max_files - 1, 0, -1):
            with contextlib.suppress(FileNotFoundError):
                os.replace(f"{self.base_path}.{index - 1}", f"{self.base_path}.{index}")
        with contextlib.suppress(FileNotFoundError):
            os.replace(self.base_path, f"{self.base_path}.0")
        self._open_current()

    def write_data(self, data: bytes) -> bool:
        """Write ``data``, rotating first if it would exceed the size limit.

        Returns True when every byte was written.
        """
        if self._file is None:
            raise ValueError("log file is closed")
        if self._size + len(data) > self.max_size:
            self._rotate()
        written = self._file.write(data) or 0
        self._size += written
        return written > 0 and written == len(data)

    def force_sync(self) -> None:
        """Flush the current file to disk."""
        if self._file is not None:
            os.fsync(self._file.fileno())

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> FileManager:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()