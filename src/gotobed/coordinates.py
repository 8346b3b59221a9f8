"""
Chart coordinates for logged bedtimes.

PURPOSE: Map local bedtimes onto (day offset, fractional hour) chart points.
AI CONTEXT: Pure functions - no I/O. ticks.py and presenters.py must go
through these helpers so gridlines and data share one convention.

NOON-WRAP CONVENTION:
Bedtimes cluster around midnight, so the chart day runs from local noon to
local noon. An instant belongs to the calendar date of (t - 12h).

    x(t) = days between chart_day(t) and chart_day(t_first)
    y(t) = 24 - (((hour - 12) mod 24) + minute / 60)

y is 24 at noon and decreases through the evening and night, so a later
bedtime has a smaller y. Noon itself maps to 24 (never 0); y = 0 is accepted
by the inverse and also reads back as 12:00.

    19:00 -> 17.0    23:00 -> 13.0    00:30 -> 11.5    11:59 -> 0.0167

USAGE:
    times = local_times(tracker.time_log)
    xs, ys = map_times(times)
    hour, minute = y_to_hourminute(ys[0])
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from .config import Config

if TYPE_CHECKING:
    from .models import LogEntry

__all__ = [
    "hourminute_to_y",
    "y_to_hourminute",
    "chart_day",
    "x_coord",
    "local_times",
    "map_times",
    "format_hourminute",
    "format_day",
]

HOURS_PER_DAY = 24


def hourminute_to_y(hour: int, minute: int) -> float:
    """
    Fold a clock time onto the y axis.

    Args:
        hour: 0-23.
        minute: 0-59.

    Returns:
        y in (0, 24]. Noon is 24.

    Example:
        >>> hourminute_to_y(23, 10)
        12.833333333333334
        >>> hourminute_to_y(12, 0)
        24.0
    """
    folded = (hour - Config.DAY_WRAP_HOUR) % HOURS_PER_DAY
    return HOURS_PER_DAY - (folded + minute / 60.0)


def y_to_hourminute(y: float) -> tuple[int, int]:
    """
    Recover the clock time of a y value, rounded to the nearest minute.

    A minute that rounds up to 60 carries into the hour.

    Args:
        y: Value in [0, 24].

    Returns:
        (hour, minute) with hour in 0-23 and minute in 0-59.

    Raises:
        ValueError: If y is outside [0, 24].

    Example:
        >>> y_to_hourminute(11.5)
        (0, 30)
        >>> y_to_hourminute(0.0)
        (12, 0)
    """
    if not 0.0 <= y <= HOURS_PER_DAY:
        raise ValueError(f"y must be within [0, 24], got {y}")
    clock = HOURS_PER_DAY - y
    hour = math.floor(clock)
    minute = round((clock - hour) * 60)
    if minute == 60:
        hour += 1
        minute = 0
    return (hour + Config.DAY_WRAP_HOUR) % HOURS_PER_DAY, minute


def chart_day(t: datetime) -> date:
    """
    Calendar date of the noon-to-noon chart day containing t.

    Example:
        >>> chart_day(datetime(2024, 3, 2, 0, 5))
        datetime.date(2024, 3, 1)
    """
    return (t - timedelta(hours=Config.DAY_WRAP_HOUR)).date()


def x_coord(t_min: datetime, t: datetime) -> int:
    """Chart-day offset of t from the chart day of t_min."""
    return (chart_day(t) - chart_day(t_min)).days


def local_times(entries: Iterable[LogEntry]) -> list[datetime]:
    """Each entry's bedtime in the zone it was logged in, in log order."""
    return [entry.local_time() for entry in entries]


def map_times(times: Sequence[datetime]) -> tuple[list[int], list[float]]:
    """
    Map chronological local times to chart coordinates.

    Args:
        times: Local, timezone-aware datetimes in log order.

    Returns:
        (xs, ys). x counts chart days from the earliest one, so xs has a 0
        and no negatives even when entries logged in different zones are
        out of order by chart day. For a single zone xs is non-decreasing
        with gaps for days without an entry. Both lists are empty for
        empty input.
    """
    if not times:
        return [], []
    t_min = min(times, key=chart_day)
    xs = [x_coord(t_min, t) for t in times]
    ys = [hourminute_to_y(t.hour, t.minute) for t in times]
    return xs, ys


def format_hourminute(hour: int, minute: int) -> str:
    """Zero-padded HH:MM."""
    return f"{hour:02d}:{minute:02d}"


def format_day(d: date) -> str:
    """
    Short day/month label without year or padding.

    Example:
        >>> format_day(date(2024, 3, 7))
        '7/3'
    """
    return f"{d.day}/{d.month}"
