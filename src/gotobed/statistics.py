"""
Statistics engine for gotobed.

PURPOSE: Trend smoothing and streak analysis over the y series.
AI CONTEXT: Pure data processing - no visualization, no I/O.

METRICS:
1. Trend: causal moving average of bedtime y values
2. Streaks: runs of consecutive on-target days, newest first

Both operate on y values from coordinates.map_times(). y falls as the
night goes on: 22:30 -> 13.5, 23:00 -> 13.0, 00:05 -> 11.92.

QUALIFYING DAYS:
A day counts toward a streak when y < target_y, with target_y computed by
coordinates.hourminute_to_y(). The comparison is strict and made in chart
space; on the clock it selects bedtimes after the target, up to noon.

USAGE:
    engine = StatisticsEngine()
    trend = engine.smooth(ys)
    summary = engine.streak_summary(ys, target_y)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .config import Config

__all__ = ["StatisticsEngine", "StreakSummary"]


@dataclass(frozen=True)
class StreakSummary:
    """
    Streak statistics for one render.

    Attributes:
        runs: StreakRun lengths, newest first.
        current: Run ending at the most recent entry (0 if it missed).
        best: Longest run (0 if none).
    """

    runs: list[int] = field(default_factory=list)
    current: int = 0
    best: int = 0


class StatisticsEngine:
    """
    Calculator for trend and streak statistics.

    DESIGN:
    - Stateless: Each method operates on provided data
    - Pure: No side effects, only data transformation
    - Configurable: Smoothing window from Config or constructor
    """

    def __init__(self, window: int | None = None) -> None:
        """
        Args:
            window: Moving-average window. Default: Config.SMOOTHING_WINDOW (7).

        Raises:
            ValueError: If window is less than 1.
        """
        self.window = window if window is not None else Config.SMOOTHING_WINDOW
        if self.window < 1:
            raise ValueError(f"window must be at least 1, got {self.window}")

    def smooth(self, values: Sequence[float]) -> list[float]:
        """
        Causal moving average of values.

        Each output averages the current value and the window - 1 values
        before it. The series is left-padded by repeating its first value,
        so output length equals input length and nothing looks ahead.

        Args:
            values: Chronological y values.

        Returns:
            Smoothed values, same length. Empty for empty input.

        Example:
            >>> StatisticsEngine(window=3).smooth([3.0, 6.0, 9.0, 12.0])
            [3.0, 4.0, 6.0, 9.0]
        """
        if not values:
            return []
        n = self.window
        padded = [values[0]] * (n - 1) + list(values)
        return [sum(padded[i : i + n]) / n for i in range(len(values))]

    def streak_runs(self, values: Sequence[float], target_y: float) -> list[int]:
        """
        Partition the series into runs, scanning from the newest entry back.

        A maximal run of qualifying days (y < target_y) becomes one value
        equal to its length. Each non-qualifying day closes the run before
        it (appending that run, if any) and adds its own 0, so adjacent
        misses show up as adjacent zeros.

        Args:
            values: Chronological y values.
            target_y: Target time in chart coordinates.

        Returns:
            Run lengths, newest first. Empty for empty input.

        Example:
            >>> engine = StatisticsEngine()
            >>> # oldest -> newest: hit, miss, hit, hit
            >>> engine.streak_runs([12.0, 14.0, 12.5, 12.8], 13.0)
            [2, 0, 1]
        """
        runs: list[int] = []
        count = 0
        for y in reversed(values):
            if y < target_y:
                count += 1
                continue
            if count:
                runs.append(count)
            runs.append(0)
            count = 0
        if count:
            runs.append(count)
        return runs

    def streak_summary(self, values: Sequence[float], target_y: float) -> StreakSummary:
        """
        Current and best streaks.

        Returns:
            StreakSummary; all zeros for an empty series.
        """
        runs = self.streak_runs(values, target_y)
        return StreakSummary(
            runs=runs,
            current=runs[0] if runs else 0,
            best=max(runs, default=0),
        )
