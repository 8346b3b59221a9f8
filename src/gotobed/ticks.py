"""
Axis ticks for the bedtime chart.

PURPOSE: Day ticks for x and time-of-day ticks for y.
AI CONTEXT: Labels are derived through coordinates.py so each gridline sits
exactly where a bedtime at that clock time would be plotted.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from .config import Config
from .coordinates import chart_day, format_day, format_hourminute, y_to_hourminute

__all__ = ["Tick", "x_ticks", "y_ticks"]


@dataclass(frozen=True)
class Tick:
    """One axis tick: position on the axis and its label."""

    value: float
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "label": self.label}


def x_ticks(times: Sequence[datetime]) -> list[Tick]:
    """
    One tick per chart day from the earliest to the latest entry, inclusive.

    Days are noon-to-noon (see coordinates.chart_day), so a log spanning K
    chart days yields K + 1 ticks labelled day/month.

    Args:
        times: Local datetimes in log order.

    Returns:
        Ticks with values 0.0, 1.0, ... Empty for empty input.

    Example:
        >>> [t.label for t in x_ticks([datetime(2024, 1, 31, 23), datetime(2024, 2, 2, 1)])]
        ['31/1', '1/2']
    """
    if not times:
        return []
    days = [chart_day(t) for t in times]
    first_day = min(days)
    span = (max(days) - first_day).days
    return [
        Tick(value=float(i), label=format_day(first_day + timedelta(days=i)))
        for i in range(span + 1)
    ]


def y_ticks() -> list[Tick]:
    """
    Ticks every Config.Y_TICK_MINUTES across the full 24-hour y range.

    With the default 15 minutes this is 96 ticks at 0.0, 0.25, ... 23.75,
    labelled 12:00, 11:45, ... 12:15.
    """
    step_minutes = Config.Y_TICK_MINUTES
    count = 24 * 60 // step_minutes
    ticks = []
    for i in range(count):
        value = i * step_minutes / 60.0
        ticks.append(Tick(value=value, label=format_hourminute(*y_to_hourminute(value))))
    return ticks
