"""Technical indicators (pure math, no I/O)."""

from core.indicators.indicators import (
    moving_average,
    ema,
    rsi,
    macd,
    IndicatorCalculator,
)

__all__ = [
    "moving_average",
    "ema",
    "rsi",
    "macd",
    "IndicatorCalculator",
]
