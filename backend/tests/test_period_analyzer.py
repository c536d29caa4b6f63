"""Tests for daily/weekly/monthly period analysis."""

import math
from datetime import datetime, timedelta, timezone

import pytest

from core.indicators import IndicatorCalculator
from core.models.point import TimeSeriesPoint
from core.period_analyzer import (
    EmptyInputError,
    analyze_daily,
    analyze_monthly,
    analyze_weekly,
)


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------

BASE = datetime(2024, 6, 3, tzinfo=timezone.utc)


def make_point(
    day: int,
    close: float,
    high: float | None = None,
    low: float | None = None,
    volume: int = 1000,
) -> TimeSeriesPoint:
    """Build a daily point `day` days after BASE; high/low default around close."""
    return TimeSeriesPoint(
        timestamp=BASE + timedelta(days=day),
        open=close,
        high=close + 1 if high is None else high,
        low=close - 1 if low is None else low,
        close=close,
        volume=volume,
    )


def make_series(closes: list[float]) -> list[TimeSeriesPoint]:
    return [make_point(i, c) for i, c in enumerate(closes)]


SAMPLE_SERIES = [
    [100.0, 110.0],
    [3500.0, 3520.5, 3490.25, 3601.0, 3555.5],
    [10.0, 9.0, 8.0, 12.0, 11.0, 15.0, 7.0],
    [1.0, 1000.0, 500.0],
]


# ---------------------------------------------------------------------------
# Daily
# ---------------------------------------------------------------------------

class TestAnalyzeDaily:
    """Tests for analyze_daily."""

    def test_empty_input_raises(self):
        with pytest.raises(EmptyInputError):
            analyze_daily([])

    def test_empty_input_error_is_value_error(self):
        with pytest.raises(ValueError, match="No data available"):
            analyze_daily([])

    def test_price_change_pct(self):
        summary = analyze_daily(make_series([100.0, 110.0]))

        assert summary.price_change_pct == pytest.approx(10.0)
        assert summary.current_price == 110.0
        assert summary.previous_price == 100.0

    def test_uses_last_two_points(self):
        summary = analyze_daily(make_series([50.0, 200.0, 100.0, 90.0]))

        assert summary.current.close == 90.0
        assert summary.previous.close == 100.0
        assert summary.price_change_pct == pytest.approx(-10.0)

    def test_single_point_compares_to_itself(self):
        point = make_point(0, 100.0)
        summary = analyze_daily([point])

        assert summary.previous == summary.current == point
        assert summary.price_change_pct == 0.0

    def test_historical_extrema_cover_whole_window(self):
        points = [
            make_point(0, 100.0, high=150.0, low=95.0),
            make_point(1, 105.0, high=110.0, low=80.0),
            make_point(2, 120.0, high=125.0, low=100.0),
        ]
        summary = analyze_daily(points)

        assert summary.historical_high == 150.0
        assert summary.historical_low == 80.0

    def test_relative_position(self):
        points = [
            make_point(0, 100.0, high=200.0, low=100.0),
            make_point(1, 125.0, high=130.0, low=120.0),
        ]
        summary = analyze_daily(points)

        # (125 - 100) / (200 - 100) = 25%
        assert summary.relative_to_high == pytest.approx(25.0)
        # (200 - 125) / (200 - 100) = 75%
        assert summary.relative_to_low == pytest.approx(75.0)

    @pytest.mark.parametrize("closes", SAMPLE_SERIES)
    def test_relative_fields_sum_to_100(self, closes):
        summary = analyze_daily(make_series(closes))

        assert summary.relative_to_high + summary.relative_to_low == pytest.approx(100.0)

    @pytest.mark.parametrize("closes", SAMPLE_SERIES)
    def test_extrema_bound_every_point(self, closes):
        points = make_series(closes)
        summary = analyze_daily(points)

        assert all(summary.historical_high >= p.high for p in points)
        assert all(summary.historical_low <= p.low for p in points)

    def test_flat_range_gives_nan_not_error(self):
        point = make_point(0, 100.0, high=100.0, low=100.0)
        summary = analyze_daily([point])

        assert math.isnan(summary.relative_to_high)
        assert math.isnan(summary.relative_to_low)

    def test_flat_range_with_close_outside_gives_infinity(self):
        point = make_point(0, 105.0, high=100.0, low=100.0)
        summary = analyze_daily([point])

        assert summary.relative_to_high == math.inf
        assert summary.relative_to_low == -math.inf

    def test_zero_previous_close_gives_infinity(self):
        summary = analyze_daily([make_point(0, 0.0, low=0.0), make_point(1, 10.0)])

        assert summary.price_change_pct == math.inf

    def test_zero_to_zero_close_gives_nan(self):
        points = [make_point(0, 0.0, low=0.0), make_point(1, 0.0, low=0.0)]
        summary = analyze_daily(points)

        assert math.isnan(summary.price_change_pct)

    def test_volume_and_date_from_current(self):
        points = [make_point(0, 100.0, volume=5), make_point(1, 101.0, volume=7)]
        summary = analyze_daily(points)

        assert summary.volume == 7
        assert summary.date == points[1].timestamp

    def test_no_indicators_by_default(self):
        assert analyze_daily(make_series([100.0, 101.0])).indicators is None

    def test_indicators_attached_when_calculator_given(self):
        closes = [100.0 + i for i in range(30)]
        summary = analyze_daily(make_series(closes), IndicatorCalculator())

        assert summary.indicators is not None
        assert summary.indicators.rsi == 100.0
        # mean of the last 20 closes: 110..129
        assert summary.indicators.moving_average == pytest.approx(119.5)


# ---------------------------------------------------------------------------
# Weekly / monthly
# ---------------------------------------------------------------------------

class TestAnalyzeWeekly:
    """Tests for analyze_weekly."""

    def test_empty_input_raises(self):
        with pytest.raises(EmptyInputError):
            analyze_weekly([])

    def test_basic_summary(self):
        points = [
            make_point(0, 100.0, high=102.0, low=98.0, volume=100),
            make_point(1, 104.0, high=108.0, low=101.0, volume=200),
            make_point(2, 97.0, high=103.0, low=95.0, volume=300),
            make_point(3, 105.0, high=106.0, low=96.0, volume=401),
        ]
        summary = analyze_weekly(points)

        assert summary.start == points[0]
        assert summary.end == points[-1]
        assert summary.start_price == 100.0
        assert summary.end_price == 105.0
        assert summary.change_pct == pytest.approx(5.0)
        assert summary.highest_price == 108.0
        assert summary.highest_date == points[1].timestamp
        assert summary.lowest_price == 95.0
        assert summary.lowest_date == points[2].timestamp
        assert summary.total_volume == 1001
        assert summary.average_volume == pytest.approx(250.25)

    def test_single_point(self):
        point = make_point(0, 100.0, high=103.0, low=97.0, volume=1234)
        summary = analyze_weekly([point])

        assert summary.start == summary.end == point
        assert summary.change_pct == 0.0
        assert summary.highest_price == 103.0
        assert summary.lowest_price == 97.0
        assert summary.highest_date == summary.lowest_date == point.timestamp
        assert summary.average_volume == 1234.0

    def test_ties_keep_first_occurrence(self):
        points = [
            make_point(0, 100.0, high=110.0, low=90.0),
            make_point(1, 100.0, high=110.0, low=90.0),
            make_point(2, 100.0, high=110.0, low=90.0),
        ]
        summary = analyze_weekly(points)

        assert summary.highest_date == points[0].timestamp
        assert summary.lowest_date == points[0].timestamp

    def test_average_volume_is_float_division(self):
        points = [make_point(0, 100.0, volume=1), make_point(1, 100.0, volume=2)]
        summary = analyze_weekly(points)

        assert summary.total_volume == 3
        assert summary.average_volume == 1.5

    def test_zero_start_price_gives_infinity(self):
        points = [make_point(0, 0.0, low=0.0), make_point(1, 5.0)]

        assert analyze_weekly(points).change_pct == math.inf


class TestAnalyzeMonthly:
    """Tests for analyze_monthly."""

    def test_empty_input_raises(self):
        with pytest.raises(EmptyInputError):
            analyze_monthly([])

    def test_tags_end_point_month(self):
        points = [
            TimeSeriesPoint(
                timestamp=datetime(2024, 1, 30 + i, tzinfo=timezone.utc),
                open=10, high=11, low=9, close=10, volume=1,
            )
            for i in range(2)
        ] + [
            TimeSeriesPoint(
                timestamp=datetime(2024, 2, 1, tzinfo=timezone.utc),
                open=10, high=12, low=8, close=11, volume=1,
            )
        ]
        summary = analyze_monthly(points)

        assert (summary.year, summary.month) == (2024, 2)
        assert summary.change_pct == pytest.approx(10.0)

    def test_matches_weekly_aggregates(self):
        points = make_series([100.0, 95.0, 99.0, 120.0, 80.0, 90.0])
        weekly = analyze_weekly(points)
        monthly = analyze_monthly(points)

        assert monthly.change_pct == weekly.change_pct
        assert monthly.highest_price == weekly.highest_price
        assert monthly.highest_date == weekly.highest_date
        assert monthly.lowest_price == weekly.lowest_price
        assert monthly.lowest_date == weekly.lowest_date
        assert monthly.total_volume == weekly.total_volume
        assert monthly.average_volume == weekly.average_volume

    def test_single_point(self):
        point = make_point(0, 50.0, volume=10)
        summary = analyze_monthly([point])

        assert summary.start == summary.end
        assert summary.change_pct == 0.0
        assert summary.highest_price == point.high
        assert summary.lowest_price == point.low
        assert summary.average_volume == 10.0
