"""
Error taxonomy for loading the time log.

PURPOSE: Name the ways a persisted log can be unusable for rendering.
AI CONTEXT: Storage returns these inside LoadResult rather than raising them;
only entry points (web routes, cli, bot) decide what each one means.

POLICY:
- MissingLogError: not fatal - render the "no data yet" chart
- EmptyLogError: not fatal - render the "no data yet" chart
- CorruptLogError: fatal to the current request only (HTTP 500), never to the process
"""

from __future__ import annotations

__all__ = [
    "TrackerError",
    "MissingLogError",
    "CorruptLogError",
    "EmptyLogError",
]


class TrackerError(Exception):
    """Base class for time log load failures."""

    recoverable: bool = True
    """Whether a render may substitute placeholder content for this error."""

    def __init__(self, path: str, detail: str = "") -> None:
        self.path = path
        self.detail = detail
        message = f"{self.describe()}: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    def describe(self) -> str:
        return "Time log unavailable"


class MissingLogError(TrackerError):
    """No persisted log exists yet."""

    def describe(self) -> str:
        return "No time log found"


class CorruptLogError(TrackerError):
    """A persisted log exists but cannot be parsed or validated."""

    recoverable = False

    def describe(self) -> str:
        return "Cannot restore time log"


class EmptyLogError(TrackerError):
    """The log parsed fine but holds no entries."""

    def describe(self) -> str:
        return "Time log has no entries"
