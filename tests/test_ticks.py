"""Tests for ticks module."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Add tests directory to path for conftest imports
sys.path.insert(0, str(Path(__file__).parent))

from conftest import local
from gotobed.coordinates import chart_day, hourminute_to_y
from gotobed.ticks import Tick, x_ticks, y_ticks


class TestXTicks:
    """Test suite for day ticks on the x axis.

    Categories:
    1. Count - K chart days give K + 1 ticks (2 tests)
    2. Labels - day/month, strictly increasing dates, zone changes (3 tests)
    3. Empty - no entries, no ticks (1 test)
    """

    def test_empty_input(self) -> None:
        assert x_ticks([]) == []

    def test_single_entry_has_one_tick(self) -> None:
        ticks = x_ticks([local(2024, 3, 1, 23, 0)])
        assert ticks == [Tick(value=0.0, label="1/3")]

    def test_count_is_span_plus_one(self) -> None:
        """Verifies a log spanning K chart days yields K + 1 ticks.

        Arrangement:
        Two entries ten chart days apart with nothing in between.

        Assertion Strategy:
        Gaps still get a tick; values run 0.0 to 10.0 in unit steps.
        """
        times = [local(2024, 3, 1, 23, 0), local(2024, 3, 12, 0, 30)]
        ticks = x_ticks(times)
        assert len(ticks) == 11
        assert [t.value for t in ticks] == [float(i) for i in range(11)]

    def test_labels_cross_month_boundary(self) -> None:
        times = [local(2024, 1, 30, 22, 0), local(2024, 2, 2, 1, 0)]
        assert [t.label for t in x_ticks(times)] == ["30/1", "31/1", "1/2"]

    def test_zone_change_covers_earliest_day(self) -> None:
        first = local(2024, 3, 2, 13, 0, "Australia/Melbourne")
        second = (first + timedelta(minutes=30)).astimezone(ZoneInfo("Europe/Rome"))
        assert [t.label for t in x_ticks([first, second])] == ["1/3", "2/3"]

    def test_labels_are_strictly_increasing_dates(self) -> None:
        """Verifies tick dates match the chart days they sit on.

        Assertion Strategy:
        Rebuilds each expected label from the chart day of the first entry
        plus the tick value.
        """
        times = [local(2024, 2, 27, 23, 0), local(2024, 3, 3, 23, 0)]
        first = chart_day(times[0])
        for tick in x_ticks(times):
            expected = first + timedelta(days=int(tick.value))
            assert tick.label == f"{expected.day}/{expected.month}"


class TestYTicks:
    """Test suite for the fixed time-of-day ticks."""

    def test_count_and_spacing(self) -> None:
        ticks = y_ticks()
        assert len(ticks) == 96
        assert ticks[0].value == 0.0
        assert ticks[-1].value == 23.75
        for a, b in zip(ticks, ticks[1:], strict=False):
            assert b.value - a.value == pytest.approx(0.25)

    def test_labels_run_backwards_from_noon(self) -> None:
        labels = [t.label for t in y_ticks()]
        assert labels[:3] == ["12:00", "11:45", "11:30"]
        assert labels[-1] == "12:15"

    def test_label_matches_data_position(self) -> None:
        """Verifies a bedtime exactly on a tick is plotted on its gridline.

        Business context:
        Gridlines are only useful if a 23:00 bedtime lands on the line
        labelled 23:00.

        Assertion Strategy:
        Looks up the 23:00 tick and compares its value to the folded y.
        """
        ticks = {t.label: t.value for t in y_ticks()}
        assert ticks["23:00"] == hourminute_to_y(23, 0)
        assert ticks["00:15"] == pytest.approx(hourminute_to_y(0, 15))

    def test_labels_are_unique(self) -> None:
        labels = [t.label for t in y_ticks()]
        assert len(set(labels)) == len(labels)

    def test_to_dict(self) -> None:
        assert Tick(0.25, "11:45").to_dict() == {"value": 0.25, "label": "11:45"}


def test_x_ticks_accepts_naive_datetimes() -> None:
    ticks = x_ticks([datetime(2024, 1, 31, 23), datetime(2024, 2, 2, 1)])
    assert [t.label for t in ticks] == ["31/1", "1/2"]
