"""Derived analysis models (daily, weekly, monthly summaries).

All summaries are immutable and recomputed from an input slice on every call.
Percentages may be NaN or +/-inf when a denominator is zero; that is a valid
value here, not an error.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from core.models.point import TimeSeriesPoint


class IndicatorSnapshot(BaseModel):
    """Latest indicator values for a closing-price series."""

    model_config = ConfigDict(frozen=True)

    ma_period: int
    moving_average: float
    ema_period: int
    ema: float
    rsi_period: int
    rsi: float | None = None  # None when there are fewer than rsi_period + 1 closes
    macd: float
    macd_signal: float
    macd_histogram: float


class DailySummary(BaseModel):
    """Latest-bar summary relative to the whole input window."""

    model_config = ConfigDict(frozen=True)

    current: TimeSeriesPoint
    previous: TimeSeriesPoint
    price_change_pct: float
    relative_to_high: float
    relative_to_low: float
    historical_high: float
    historical_low: float
    indicators: IndicatorSnapshot | None = None

    @property
    def date(self) -> datetime:
        return self.current.timestamp

    @property
    def current_price(self) -> float:
        return self.current.close

    @property
    def previous_price(self) -> float:
        return self.previous.close

    @property
    def volume(self) -> int:
        return self.current.volume


class PeriodSummary(BaseModel):
    """Aggregate statistics over a contiguous window (weekly reports)."""

    model_config = ConfigDict(frozen=True)

    start: TimeSeriesPoint
    end: TimeSeriesPoint
    change_pct: float
    highest_price: float
    highest_date: datetime
    lowest_price: float
    lowest_date: datetime
    average_volume: float
    total_volume: int

    @property
    def start_date(self) -> datetime:
        return self.start.timestamp

    @property
    def end_date(self) -> datetime:
        return self.end.timestamp

    @property
    def start_price(self) -> float:
        return self.start.close

    @property
    def end_price(self) -> float:
        return self.end.close


class MonthlySummary(PeriodSummary):
    """Period summary tagged with the calendar month of its end point."""

    year: int
    month: int
