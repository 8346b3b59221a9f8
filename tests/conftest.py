"""
Pytest configuration and shared fixtures for gotobed tests.

This module contains:
- MockFileSystem: In-memory filesystem for testing without actual I/O
- Shared fixtures available to all test modules
- Scenario helpers building bedtimes in a fixed zone
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

import pytest

ZONE = "Australia/Melbourne"


class MockFileSystem:
    """
    In-memory file system for testing.

    Simulates a file system using dictionaries:
    - _files: dict mapping path -> content (str)
    - _dirs: set of directory paths
    - _read_only: paths whose writes raise PermissionError

    FEATURES:
    - No actual I/O operations
    - Easy to inspect state
    - Supports write failure simulation
    """

    def __init__(self) -> None:
        """
        Initialize empty mock file system.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.list_files()
            []
        """
        self._files: dict[str, str] = {}
        self._dirs: set[str] = set()
        self._read_only: set[str] = set()

    def exists(self, path: str) -> bool:
        """True if path is a mock file or directory."""
        return path in self._files or path in self._dirs

    def makedirs(self, path: str, exist_ok: bool = False) -> None:
        """
        Create mock directory and parent directories.

        Raises:
            OSError: If directory exists and exist_ok is False,
                or if path is an existing file.
        """
        if path in self._dirs:
            if not exist_ok:
                raise OSError(f"Directory exists: {path}")
            return

        if path in self._files:
            raise OSError(f"Path is a file, not directory: {path}")

        # Create all parent directories
        parts = path.rstrip("/").split("/")
        for i in range(1, len(parts) + 1):
            parent = "/".join(parts[:i])
            if parent:
                self._dirs.add(parent)

    def read_text(self, path: str, _encoding: str = "utf-8") -> str:
        """
        Read mock file contents.

        Raises:
            FileNotFoundError: If path not in _files.
        """
        if path not in self._files:
            raise FileNotFoundError(f"No such file: {path}")
        return self._files[path]

    def write_text(self, path: str, content: str, _encoding: str = "utf-8") -> None:
        """
        Write text to mock file, creating parent directories.

        Raises:
            PermissionError: If path is in _read_only set.
        """
        if path in self._read_only:
            raise PermissionError(f"Permission denied: {path}")

        parent = "/".join(path.rstrip("/").split("/")[:-1])
        if parent and parent not in self._dirs:
            self.makedirs(parent, exist_ok=True)

        self._files[path] = content

    def replace(self, src: str, dst: str) -> None:
        """
        Move src over dst.

        Raises:
            FileNotFoundError: If src doesn't exist.
        """
        if src not in self._files:
            raise FileNotFoundError(f"No such file: {src}")
        self._files[dst] = self._files.pop(src)

    # =========================================================================
    # TEST HELPERS
    # =========================================================================

    def get_file(self, path: str) -> str | None:
        """File content or None if missing. Never raises."""
        return self._files.get(path)

    def set_file(self, path: str, content: str) -> None:
        """Set file content directly (delegates to write_text)."""
        self.write_text(path, content)

    def set_read_only(self, path: str) -> None:
        """Make every later write to path fail with PermissionError."""
        self._read_only.add(path)

    def list_files(self) -> list[str]:
        """
        Sorted list of all file paths.

        Example:
            >>> fs = MockFileSystem()
            >>> fs.set_file('/data/b.json', '{}')
            >>> fs.set_file('/data/a.json', '{}')
            >>> fs.list_files()
            ['/data/a.json', '/data/b.json']
        """
        return sorted(self._files.keys())


def local(
    year: int, month: int, day: int, hour: int, minute: int, zone: str = ZONE
) -> datetime:
    """Aware datetime for a wall-clock time in zone."""
    return datetime(year, month, day, hour, minute, tzinfo=ZoneInfo(zone))


def as_utc(moment: datetime) -> datetime:
    """Same instant expressed in UTC, as stored in LogEntry.bedtime."""
    return moment.astimezone(UTC)


@pytest.fixture
def mock_fs() -> MockFileSystem:
    """
    Create a MockFileSystem for testing.

    Provides a fresh in-memory filesystem instance for each test,
    ensuring test isolation without actual disk I/O.
    """
    return MockFileSystem()


@pytest.fixture
def reset_config() -> Iterator[None]:
    """Clear Config test overrides after the test."""
    from gotobed.config import Config

    yield
    Config.reset_test_overrides()
