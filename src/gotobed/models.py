"""
Data models for gotobed.

PURPOSE: Type-safe dataclasses for the persisted time log and relay state.
AI CONTEXT: These models define the JSON schema of time_log.json and telegram.json.

MODEL HIERARCHY:
- Tracker: Persisted document (current target + TimeLog)
- LogEntry: One logged bedtime, immutable once appended
- TelegramContext: Relay state (last chat the bot talked to)

SERIALIZATION:
All models have to_dict() for JSON persistence and from_dict() for loading.
from_dict() raises KeyError, TypeError or ValueError on malformed input;
the storage layer maps those to CorruptLogError.

Bedtimes are stored as ISO 8601 UTC strings together with the IANA zone they
were logged in, so the local clock time can always be recovered.

USAGE:
    tracker = Tracker.new()
    entry = LogEntry.create(timezone="Australia/Melbourne", target=(23, 0))
    tracker = tracker.append(entry)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import Config

__all__ = [
    "Target",
    "LogEntry",
    "Tracker",
    "TelegramContext",
    "format_target",
]

Target = tuple[int, int]
"""(hour, minute) pair. Bounds are enforced by the command parser, not here."""


def format_target(target: Target) -> str:
    """
    Format a target as zero-padded HH:MM.

    Example:
        >>> format_target((23, 5))
        '23:05'
    """
    hour, minute = target
    return f"{hour:02d}:{minute:02d}"


def _parse_target(raw: Any) -> Target:
    """Validate a persisted [hour, minute] pair."""
    if not isinstance(raw, list | tuple) or len(raw) != 2:
        raise ValueError(f"target must be a [hour, minute] pair, got {raw!r}")
    hour, minute = raw
    if not isinstance(hour, int) or not isinstance(minute, int):
        raise TypeError(f"target values must be integers, got {raw!r}")
    return (hour, minute)


def _parse_zone(name: Any) -> str:
    """Validate an IANA zone identifier."""
    if not isinstance(name, str):
        raise TypeError(f"timezone must be a string, got {name!r}")
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"unknown timezone {name!r}") from e
    return name


@dataclass(frozen=True)
class LogEntry:
    """
    One logged bedtime.

    Attributes:
        bedtime: Timezone-aware UTC instant of the log command.
        timezone: IANA zone the user was in when logging.
        target: Target (hour, minute) in force when the entry was logged.
    """

    bedtime: datetime
    timezone: str
    target: Target

    @classmethod
    def create(
        cls,
        timezone: str,
        target: Target,
        now: datetime | None = None,
    ) -> LogEntry:
        """
        Factory for a new entry stamped with the current UTC time.

        Args:
            timezone: IANA zone identifier for local display.
            target: Target in force at logging time.
            now: Optional instant for testability. Naive values are taken as UTC.

        Returns:
            New LogEntry.

        Raises:
            ValueError: timezone is not a known IANA zone.

        Example:
            >>> entry = LogEntry.create('Europe/Rome', (23, 0))
            >>> entry.bedtime.tzinfo is UTC
            True
        """
        zone = _parse_zone(timezone)
        instant = now or datetime.now(UTC)
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        return cls(bedtime=instant.astimezone(UTC), timezone=zone, target=target)

    def local_time(self) -> datetime:
        """
        Convert the UTC bedtime into the zone it was logged in.

        Returns:
            Timezone-aware datetime in self.timezone.

        Example:
            >>> entry = LogEntry(datetime(2024, 1, 1, 12, 30, tzinfo=UTC), 'Australia/Melbourne', (23, 0))
            >>> entry.local_time().strftime('%H:%M')
            '23:30'
        """
        return self.bedtime.astimezone(ZoneInfo(self.timezone))

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON storage."""
        return {
            "bedtime": self.bedtime.isoformat(),
            "timezone": self.timezone,
            "target": list(self.target),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogEntry:
        """
        Deserialize a stored entry.

        Accepts both 'Z' and '+00:00' UTC suffixes. Naive timestamps are
        taken as UTC.

        Raises:
            KeyError: If a field is missing.
            TypeError: If a field has the wrong type.
            ValueError: If the timestamp or timezone is invalid.
        """
        raw = data["bedtime"]
        if not isinstance(raw, str):
            raise TypeError(f"bedtime must be a string, got {raw!r}")
        bedtime = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        if bedtime.tzinfo is None:
            bedtime = bedtime.replace(tzinfo=UTC)
        return cls(
            bedtime=bedtime.astimezone(UTC),
            timezone=_parse_zone(data["timezone"]),
            target=_parse_target(data["target"]),
        )


@dataclass(frozen=True)
class Tracker:
    """
    The persisted time log document.

    DESIGN: Frozen - append() and with_target() return new instances, so a
    snapshot handed to the chart code can never change under it.

    INVARIANT: time_log is chronological (non-decreasing bedtime).
    """

    current_target: Target
    time_log: tuple[LogEntry, ...] = field(default_factory=tuple)

    @classmethod
    def new(cls) -> Tracker:
        """Empty tracker with Config.DEFAULT_TARGET."""
        return cls(current_target=Config.DEFAULT_TARGET)

    @property
    def is_empty(self) -> bool:
        return not self.time_log

    def append(self, entry: LogEntry) -> Tracker:
        """
        Return a tracker with entry appended.

        Raises:
            ValueError: If entry is older than the last logged bedtime.
        """
        if self.time_log and entry.bedtime < self.time_log[-1].bedtime:
            raise ValueError("log entries must be appended in chronological order")
        return replace(self, time_log=(*self.time_log, entry))

    def with_target(self, target: Target) -> Tracker:
        return replace(self, current_target=target)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON storage."""
        return {
            "current_target": list(self.current_target),
            "time_log": [entry.to_dict() for entry in self.time_log],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tracker:
        """
        Deserialize the stored document.

        Raises:
            KeyError: If a field is missing.
            TypeError: If the document or a field has the wrong type.
            ValueError: If an entry is invalid or entries are out of order.
        """
        if not isinstance(data, dict):
            raise TypeError(f"time log must be a JSON object, got {type(data).__name__}")
        entries = data["time_log"]
        if not isinstance(entries, list):
            raise TypeError("time_log must be a list")
        tracker = cls(current_target=_parse_target(data["current_target"]))
        for raw in entries:
            tracker = tracker.append(LogEntry.from_dict(raw))
        return tracker


@dataclass
class TelegramContext:
    """
    Relay state that must survive restarts.

    LIFECYCLE: Loaded once when the relay starts, saved whenever
    update_chat_id() reports a change.
    """

    chat_id: int | None = None

    def update_chat_id(self, new_id: int) -> bool:
        """
        Record the chat the bot should answer.

        Args:
            new_id: Chat id from the latest Telegram update.

        Returns:
            True if the stored id changed (caller should persist).

        Example:
            >>> ctx = TelegramContext()
            >>> ctx.update_chat_id(42)
            True
            >>> ctx.update_chat_id(42)
            False
        """
        if self.chat_id == new_id:
            return False
        self.chat_id = new_id
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"chat_id": self.chat_id}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TelegramContext:
        if not isinstance(data, dict):
            raise TypeError(f"context must be a JSON object, got {type(data).__name__}")
        chat_id = data.get("chat_id")
        if chat_id is not None and not isinstance(chat_id, int):
            raise TypeError(f"chat_id must be an integer, got {chat_id!r}")
        return cls(chat_id=chat_id)
