"""Daily, weekly and monthly summaries over a time-series window.

Divisions are done in numpy float64 with divide/invalid warnings silenced:
a zero start price or a flat high/low range yields inf or NaN in the
summary rather than an exception.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from core.indicators import IndicatorCalculator
from core.models.point import TimeSeriesPoint, closes_of
from core.models.summary import DailySummary, MonthlySummary, PeriodSummary

logger = logging.getLogger(__name__)


class EmptyInputError(ValueError):
    """Raised when an analysis is requested over an empty series."""

    def __init__(self, message: str = "No data available for analysis"):
        super().__init__(message)


def _ratio(numerator: float, denominator: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


def _pct_change(new: float, old: float) -> float:
    return _ratio(new - old, old) * 100.0


def analyze_daily(
    points: Sequence[TimeSeriesPoint],
    calculator: IndicatorCalculator | None = None,
) -> DailySummary:
    """
    Summarize the latest bar against the whole window.

    Args:
        points: Ascending series, oldest first
        calculator: Optional indicator calculator; its snapshot of the
            window's closes is attached to the summary

    Returns:
        DailySummary

    Raises:
        EmptyInputError: if points is empty
    """
    if not points:
        raise EmptyInputError()

    current = points[-1]
    # A single bar is compared against itself (0% change)
    previous = points[-2] if len(points) > 1 else current

    price_change_pct = _pct_change(current.close, previous.close)

    historical_high = float("-inf")
    historical_low = float("inf")
    for point in points:
        if point.high > historical_high:
            historical_high = point.high
        if point.low < historical_low:
            historical_low = point.low

    price_range = historical_high - historical_low
    relative_to_high = _ratio(current.close - historical_low, price_range) * 100.0
    relative_to_low = _ratio(historical_high - current.close, price_range) * 100.0

    indicators = None
    if calculator is not None:
        indicators = calculator.calculate_latest(closes_of(points))

    summary = DailySummary(
        current=current,
        previous=previous,
        price_change_pct=price_change_pct,
        relative_to_high=relative_to_high,
        relative_to_low=relative_to_low,
        historical_high=historical_high,
        historical_low=historical_low,
        indicators=indicators,
    )

    logger.info(
        f"Daily analysis completed: Price {summary.current_price:.2f}, "
        f"Change {price_change_pct:.2f}%, "
        f"Relative to High {relative_to_high:.2f}%, "
        f"Relative to Low {relative_to_low:.2f}%"
    )
    return summary


def _scan_period(points: Sequence[TimeSeriesPoint]) -> dict:
    """Single forward pass: change, first-occurrence extrema, volume totals."""
    if not points:
        raise EmptyInputError()

    start = points[0]
    end = points[-1]

    highest_price = float("-inf")
    lowest_price = float("inf")
    highest_date = start.timestamp
    lowest_date = start.timestamp
    total_volume = 0

    for point in points:
        # Strict comparisons keep the earliest bar on ties
        if point.high > highest_price:
            highest_price = point.high
            highest_date = point.timestamp
        if point.low < lowest_price:
            lowest_price = point.low
            lowest_date = point.timestamp
        total_volume += point.volume

    return {
        "start": start,
        "end": end,
        "change_pct": _pct_change(end.close, start.close),
        "highest_price": highest_price,
        "highest_date": highest_date,
        "lowest_price": lowest_price,
        "lowest_date": lowest_date,
        "average_volume": total_volume / len(points),
        "total_volume": total_volume,
    }


def analyze_weekly(points: Sequence[TimeSeriesPoint]) -> PeriodSummary:
    """
    Summarize a weekly window.

    Raises:
        EmptyInputError: if points is empty
    """
    summary = PeriodSummary(**_scan_period(points))

    logger.info(
        f"Weekly analysis completed: Weekly change {summary.change_pct:.2f}%, "
        f"Highest price {summary.highest_price:.2f}, "
        f"Lowest price {summary.lowest_price:.2f}"
    )
    return summary


def analyze_monthly(points: Sequence[TimeSeriesPoint]) -> MonthlySummary:
    """
    Summarize a monthly window, tagged with the end point's year and month.

    Raises:
        EmptyInputError: if points is empty
    """
    fields = _scan_period(points)
    end = fields["end"]
    summary = MonthlySummary(
        year=end.timestamp.year,
        month=end.timestamp.month,
        **fields,
    )

    logger.info(
        f"Monthly analysis completed: Monthly change {summary.change_pct:.2f}%, "
        f"Highest price {summary.highest_price:.2f}, "
        f"Lowest price {summary.lowest_price:.2f}"
    )
    return summary
