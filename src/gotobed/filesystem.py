"""
File access for the storage layer.

StorageManager only ever needs the four operations listed by the
FileSystem protocol. RealFileSystem talks to the disk; tests pass the in-memory
MockFileSystem from tests/conftest.py instead.

Writes follow a write-temp-then-replace pattern (see StorageManager), so
RealFileSystem.write_text syncs to disk before returning: the replace that
follows must never publish a file whose bytes are still in the page cache.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

__all__ = ["FileSystem", "RealFileSystem"]


class FileSystem(Protocol):
    """Operations StorageManager performs on its data directory."""

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        """
        Create path and any missing parents.

        Raises:
            OSError: When path exists and exist_ok is False.
        """
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """
        Whole file as text.

        Raises:
            FileNotFoundError: No file at path.
            UnicodeDecodeError: Content is not valid in encoding.
        """
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Create or truncate path and write content."""
        ...

    def replace(self, src: str, dst: str) -> None:
        """
        Rename src to dst, replacing dst if present.

        Raises:
            FileNotFoundError: No file at src.
        """
        ...


class RealFileSystem:
    """FileSystem backed by the local disk."""

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        Path(path).mkdir(parents=True, exist_ok=exist_ok)

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return Path(path).read_text(encoding=encoding)

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        with open(path, "w", encoding=encoding) as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())

    def replace(self, src: str, dst: str) -> None:
        # Atomic on POSIX when src and dst share a filesystem.
        os.replace(src, dst)
