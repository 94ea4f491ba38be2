"""Buffered log daemon and client, in-process logger, and file watching tools."""

__version__ = "0.1.0"