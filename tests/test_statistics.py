"""Tests for statistics module."""

from __future__ import annotations

import pytest

from gotobed.config import Config
from gotobed.coordinates import hourminute_to_y
from gotobed.statistics import StatisticsEngine, StreakSummary


@pytest.fixture
def engine() -> StatisticsEngine:
    """Create StatisticsEngine with default configuration.

    Returns:
        StatisticsEngine: Instance using Config.SMOOTHING_WINDOW (7).
    """
    return StatisticsEngine()


class TestStatisticsEngineInit:
    """Tests for StatisticsEngine construction."""

    def test_default_window(self, engine: StatisticsEngine) -> None:
        assert engine.window == Config.SMOOTHING_WINDOW == 7

    def test_custom_window(self) -> None:
        assert StatisticsEngine(window=3).window == 3

    @pytest.mark.parametrize("window", [0, -1])
    def test_rejects_non_positive_window(self, window: int) -> None:
        with pytest.raises(ValueError):
            StatisticsEngine(window=window)


class TestSmooth:
    """Test suite for the causal moving average.

    Categories:
    1. Shape - output length equals input length (2 tests)
    2. Identity - constant series unchanged (1 test)
    3. Padding - leading outputs use the repeated first value (2 tests)
    4. Causality - later values never affect earlier outputs (1 test)
    """

    def test_empty(self, engine: StatisticsEngine) -> None:
        assert engine.smooth([]) == []

    @pytest.mark.parametrize("length", [1, 3, 7, 20])
    def test_length_preserved(self, engine: StatisticsEngine, length: int) -> None:
        assert len(engine.smooth([float(i) for i in range(length)])) == length

    def test_constant_series_is_unchanged(self, engine: StatisticsEngine) -> None:
        """Verifies smoothing a flat series leaves it flat.

        Arrangement:
        Ten copies of 13.0, longer than the window.

        Assertion Strategy:
        Every output approximately equals the input value; sums of floats
        are compared with pytest.approx.
        """
        assert engine.smooth([13.0] * 10) == pytest.approx([13.0] * 10)

    def test_small_window_example(self) -> None:
        assert StatisticsEngine(window=3).smooth([3.0, 6.0, 9.0, 12.0]) == pytest.approx(
            [3.0, 4.0, 6.0, 9.0]
        )

    def test_first_output_is_first_value(self, engine: StatisticsEngine) -> None:
        assert engine.smooth([12.0, 0.0, 0.0])[0] == 12.0

    def test_is_causal(self, engine: StatisticsEngine) -> None:
        """Verifies appending values never changes earlier outputs.

        Business context:
        The trend line for past days must not move when a new bedtime is
        logged.

        Action:
        Smooth a series, then the same series with an outlier appended.

        Assertion Strategy:
        The shared prefix of both outputs is identical.
        """
        base = [12.0, 13.5, 11.0, 12.25, 14.0]
        assert engine.smooth(base + [1.0])[: len(base)] == engine.smooth(base)

    def test_window_one_is_identity(self) -> None:
        values = [1.0, 5.0, 2.0]
        assert StatisticsEngine(window=1).smooth(values) == values


class TestStreakRuns:
    """Test suite for run partitioning.

    Categories:
    1. Reference Example - hit, miss, hit, hit (1 test)
    2. Edge Cases - empty, all hits, all misses, adjacent misses (4 tests)
    3. Comparison - strict less-than against target_y (1 test)
    """

    def test_reference_pattern(self, engine: StatisticsEngine) -> None:
        """Verifies [qualify, not, qualify, qualify] gives [2, 0, 1].

        Arrangement:
        Oldest to newest: 12.0 (hit), 14.0 (miss), 12.5 (hit), 12.8 (hit)
        against target_y 13.0.

        Action:
        Partition with streak_runs.

        Assertion Strategy:
        Newest-first runs: the latest two hits, the miss as 0, then the
        oldest hit.
        """
        assert engine.streak_runs([12.0, 14.0, 12.5, 12.8], 13.0) == [2, 0, 1]

    def test_empty(self, engine: StatisticsEngine) -> None:
        assert engine.streak_runs([], 13.0) == []

    def test_all_qualifying(self, engine: StatisticsEngine) -> None:
        assert engine.streak_runs([12.0, 12.0, 12.0], 13.0) == [3]

    def test_all_missing(self, engine: StatisticsEngine) -> None:
        assert engine.streak_runs([14.0, 15.0], 13.0) == [0, 0]

    def test_newest_miss_leads_with_zero(self, engine: StatisticsEngine) -> None:
        assert engine.streak_runs([12.0, 12.0, 14.0], 13.0) == [0, 2]

    def test_equal_to_target_does_not_qualify(self, engine: StatisticsEngine) -> None:
        assert engine.streak_runs([13.0], 13.0) == [0]


class TestStreakSummary:
    """Tests for current and best streaks."""

    def test_empty(self, engine: StatisticsEngine) -> None:
        assert engine.streak_summary([], 13.0) == StreakSummary(runs=[], current=0, best=0)

    def test_reference_pattern(self, engine: StatisticsEngine) -> None:
        summary = engine.streak_summary([12.0, 14.0, 12.5, 12.8], 13.0)
        assert summary.current == 2
        assert summary.best == 2

    def test_current_zero_after_miss(self, engine: StatisticsEngine) -> None:
        summary = engine.streak_summary([12.0, 12.0, 12.0, 14.0], 13.0)
        assert summary.current == 0
        assert summary.best == 3

    def test_scenario(self, engine: StatisticsEngine) -> None:
        """Verifies 23:10, 23:40 and 00:05 against a 23:00 target.

        Arrangement:
        y values folded from the three clock times and the target.

        Assertion Strategy:
        All three lie below target_y 13.0, so both streaks are 3.
        """
        ys = [hourminute_to_y(23, 10), hourminute_to_y(23, 40), hourminute_to_y(0, 5)]
        summary = engine.streak_summary(ys, hourminute_to_y(23, 0))
        assert summary.runs == [3]
        assert summary.current == 3
        assert summary.best == 3
