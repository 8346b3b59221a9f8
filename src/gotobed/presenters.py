"""
Presenters for the gotobed chart.

PURPOSE: Testable layer between the time log and whatever draws it.
AI CONTEXT: assemble() is pure data transformation; render_png() is the one
place that touches matplotlib.

DESIGN PRINCIPLES:
1. Presenters receive data, return view models (dataclasses)
2. ChartData is renderer-agnostic - the PNG route and the JSON API share it
3. Load failures come back as ChartResult, never as exceptions

USAGE:
    presenter = ChartPresenter(storage, statistics)
    result = presenter.build_chart()
    if result.success:
        png = presenter.render_png(result.chart)
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .config import Config
from .coordinates import (
    format_day,
    format_hourminute,
    hourminute_to_y,
    local_times,
    map_times,
    y_to_hourminute,
)
from .errors import EmptyLogError
from .models import format_target
from .ticks import Tick, x_ticks, y_ticks

if TYPE_CHECKING:
    from .errors import TrackerError
    from .models import Tracker
    from .statistics import StatisticsEngine
    from .storage import StorageManager

__all__ = [
    "Series",
    "AxisHints",
    "ChartSummary",
    "ChartData",
    "ChartResult",
    "ChartPresenter",
]

NO_DATA_NOTICE = "No data yet"


@dataclass
class Series:
    """One line on the chart with its style hints."""

    name: str
    xs: list[float]
    ys: list[float]
    color: str
    mode: str = "lines"
    """'lines' or 'lines+markers'."""
    hover: list[str] | None = None

    @property
    def points(self) -> list[tuple[float, float]]:
        return list(zip(self.xs, self.ys, strict=True))

    @property
    def has_markers(self) -> bool:
        return "markers" in self.mode

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "x": self.xs,
            "y": self.ys,
            "color": self.color,
            "mode": self.mode,
            "hover": self.hover,
        }


@dataclass
class AxisHints:
    """
    Axis range hints for the renderer.

    y_constrain "top" keeps noon (y = 24) at the top edge, matching the
    y tick labels that run 12:00 at the bottom up to 12:15 at the top.
    """

    x_range: tuple[float, float] = (0.0, 0.0)
    y_range: tuple[float, float] = (0.0, 24.0)
    y_constrain: str = "top"

    def to_dict(self) -> dict[str, Any]:
        return {
            "x_range": list(self.x_range),
            "y_range": list(self.y_range),
            "y_constrain": self.y_constrain,
        }


@dataclass
class ChartSummary:
    """View model for the target and streak text block."""

    target: str
    current_streak: int = 0
    best_streak: int = 0

    @property
    def text(self) -> str:
        """
        Multi-line summary for chat replies and the dashboard.

        Example:
            >>> ChartSummary('23:00', 3, 5).text
            'Target: 23:00\\nCurrent streak: 3\\nBest streak: 5'
        """
        return (
            f"Target: {self.target}\n"
            f"Current streak: {self.current_streak}\n"
            f"Best streak: {self.best_streak}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
        }


@dataclass
class ChartData:
    """
    Everything a renderer needs to draw the history chart.

    An empty log produces a ChartData with no series and notice set to
    "No data yet"; the summary still carries the configured target.
    """

    summary: ChartSummary
    x_ticks: list[Tick] = field(default_factory=list)
    y_ticks: list[Tick] = field(default_factory=list)
    series: list[Series] = field(default_factory=list)
    axes: AxisHints = field(default_factory=AxisHints)
    notice: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.series

    def get_series(self, name: str) -> Series | None:
        return next((s for s in self.series if s.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "x_ticks": [t.to_dict() for t in self.x_ticks],
            "y_ticks": [t.to_dict() for t in self.y_ticks],
            "series": [s.to_dict() for s in self.series],
            "axes": self.axes.to_dict(),
            "summary": self.summary.to_dict(),
            "notice": self.notice,
        }


@dataclass
class ChartResult:
    """
    Result of loading and assembling the chart.

    success is False only for errors that must not be papered over
    (CorruptLogError). Missing and empty logs succeed with a placeholder
    chart and error set to the reason.
    """

    success: bool
    chart: ChartData | None = None
    error: TrackerError | None = None


class ChartPresenter:
    """
    Presenter for the bedtime history chart.

    Pipeline per call: load snapshot -> coordinates -> ticks -> trend ->
    streaks -> ChartData. Nothing is cached between calls.
    """

    def __init__(
        self,
        storage: StorageManager,
        statistics: StatisticsEngine,
    ) -> None:
        """
        Args:
            storage: StorageManager used to load the tracker snapshot.
            statistics: StatisticsEngine for trend and streaks.
        """
        self.storage = storage
        self.statistics = statistics

    def build_chart(self) -> ChartResult:
        """
        Load the current log and assemble the chart.

        Returns:
            ChartResult. A missing or empty log yields success with the
            "No data yet" chart; a corrupt log yields success=False.
        """
        loaded = self.storage.load_tracker()
        if loaded.tracker is None:
            if loaded.error is not None and not loaded.error.recoverable:
                return ChartResult(success=False, error=loaded.error)
            chart = self.empty_chart(Config.DEFAULT_TARGET)
            return ChartResult(success=True, chart=chart, error=loaded.error)

        chart = self.assemble(loaded.tracker)
        error = EmptyLogError(self.storage.log_file) if chart.is_empty else None
        return ChartResult(success=True, chart=chart, error=error)

    def empty_chart(self, target: tuple[int, int]) -> ChartData:
        """Placeholder chart for a log with no entries."""
        return ChartData(
            summary=ChartSummary(target=format_target(target)),
            y_ticks=y_ticks(),
            notice=NO_DATA_NOTICE,
        )

    def assemble(self, tracker: Tracker) -> ChartData:
        """
        Turn a tracker snapshot into chart data.

        Args:
            tracker: Snapshot to chart. Not modified.

        Returns:
            ChartData with history, trend and target series, both tick
            sets, axis hints and the streak summary.
        """
        if tracker.is_empty:
            return self.empty_chart(tracker.current_target)

        times = local_times(tracker.time_log)
        xs, ys = map_times(times)
        target_y = hourminute_to_y(*tracker.current_target)

        hover = [
            f"{format_day(t.date())} {format_hourminute(*y_to_hourminute(y))}"
            for t, y in zip(times, ys, strict=True)
        ]
        trend = self.statistics.smooth(ys)
        streaks = self.statistics.streak_summary(ys, target_y)
        x_max = float(max(xs))

        return ChartData(
            summary=ChartSummary(
                target=format_target(tracker.current_target),
                current_streak=streaks.current,
                best_streak=streaks.best,
            ),
            x_ticks=x_ticks(times),
            y_ticks=y_ticks(),
            series=[
                Series(
                    name="history",
                    xs=[float(x) for x in xs],
                    ys=ys,
                    color=Config.HISTORY_COLOR,
                    mode="lines+markers",
                    hover=hover,
                ),
                Series(
                    name="trend",
                    xs=[float(x) for x in xs],
                    ys=trend,
                    color=Config.TREND_COLOR,
                ),
                Series(
                    name="target",
                    xs=[0.0, x_max],
                    ys=[target_y, target_y],
                    color=Config.TARGET_COLOR,
                ),
            ],
            axes=AxisHints(x_range=(0.0, x_max)),
        )

    def render_png(self, chart: ChartData) -> bytes:
        """
        Draw chart data as a PNG.

        Only every fourth y tick (whole hours) is labelled to keep the axis
        readable; all 96 gridline positions are kept.

        Returns:
            PNG image bytes, 1000x600 pixels at 100 DPI.

        Raises:
            ImportError: If matplotlib is not installed. Caller should
                catch this and provide a fallback.
        """
        # Lazy import matplotlib to keep it optional
        import matplotlib

        matplotlib.use("Agg")  # Non-interactive backend
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=(10, 6))

        if chart.is_empty:
            ax.text(0.5, 0.5, chart.notice or NO_DATA_NOTICE, ha="center", va="center", fontsize=14)
            ax.set_xlim(0, 1)
            ax.set_ylim(0, 1)
            ax.axis("off")
        else:
            for series in chart.series:
                ax.plot(
                    series.xs,
                    series.ys,
                    color=series.color,
                    marker="o" if series.has_markers else None,
                    linewidth=1.5,
                )

            ax.set_xticks([t.value for t in chart.x_ticks])
            ax.set_xticklabels([t.label for t in chart.x_ticks], rotation=45, ha="right")
            ax.set_yticks([t.value for t in chart.y_ticks])
            ax.set_yticklabels(
                [t.label if i % 4 == 0 else "" for i, t in enumerate(chart.y_ticks)]
            )
            x_lo, x_hi = chart.axes.x_range
            ax.set_xlim(x_lo - 0.5, x_hi + 0.5)
            ax.set_ylim(*chart.axes.y_range)
            ax.grid(axis="y", alpha=0.2)
            ax.spines["top"].set_visible(False)
            ax.spines["right"].set_visible(False)

        ax.set_title(chart.summary.text.replace("\n", "  |  "), fontsize=10)

        buf = io.BytesIO()
        plt.tight_layout()
        plt.savefig(buf, format="png", dpi=100, bbox_inches="tight")
        plt.close(fig)
        buf.seek(0)
        return buf.read()
