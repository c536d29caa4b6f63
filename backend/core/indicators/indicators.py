"""Technical indicators over an ordered closing-price sequence.

All functions are pure and return plain lists of floats. Insufficient data is
signalled in-band: moving_average pads with 0.0, rsi returns an empty list.
"""

from typing import Sequence

import numpy as np

from core.models.config import IndicatorConfig
from core.models.summary import IndicatorSnapshot


# =============================================================================
# Series transforms
# =============================================================================

def moving_average(values: Sequence[float], period: int) -> list[float]:
    """
    Calculate Simple Moving Average.

    Args:
        values: Sequence of close prices
        period: Window length

    Returns:
        List of the same length as the input. Indices before period - 1
        hold 0.0 (window not yet full).
    """
    arr = np.asarray(values, dtype=np.float64)
    result = np.zeros_like(arr)

    for i in range(period - 1, len(arr)):
        result[i] = arr[i - period + 1 : i + 1].sum() / period

    return result.tolist()


def ema(values: Sequence[float], period: int) -> list[float]:
    """
    Calculate Exponential Moving Average.

    Seeded with the first value (no SMA warmup), so every index has a value.

    Args:
        values: Sequence of values
        period: EMA period

    Returns:
        List of EMA values (same length as input)
    """
    if len(values) == 0:
        return []

    arr = np.asarray(values, dtype=np.float64)
    multiplier = 2.0 / (period + 1)

    result = np.empty_like(arr)
    result[0] = arr[0]
    for i in range(1, len(arr)):
        result[i] = arr[i] * multiplier + result[i - 1] * (1 - multiplier)

    return result.tolist()


def rsi(values: Sequence[float], period: int = 14) -> list[float]:
    """
    Calculate Relative Strength Index with simple (non-Wilder) averaging.

    Args:
        values: Sequence of close prices
        period: RSI period

    Returns:
        List of len(values) - period RSI values, or an empty list when
        fewer than period + 1 values are given.
    """
    if len(values) < period + 1:
        return []

    arr = np.asarray(values, dtype=np.float64)
    changes = np.diff(arr)
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes > 0, 0.0, np.abs(changes))

    result = []
    for i in range(period - 1, len(gains)):
        avg_gain = gains[i - period + 1 : i + 1].sum() / period
        avg_loss = losses[i - period + 1 : i + 1].sum() / period

        if avg_loss == 0.0:
            result.append(100.0)
        else:
            rs = avg_gain / avg_loss
            result.append(float(100.0 - 100.0 / (1.0 + rs)))

    return result


def macd(
    values: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[list[float], list[float], list[float]]:
    """
    Calculate MACD.

    macd_line = EMA(fast) - EMA(slow)
    signal_line = EMA(macd_line, signal)
    histogram = macd_line - signal_line

    Args:
        values: Sequence of close prices
        fast_period: Fast EMA period
        slow_period: Slow EMA period
        signal_period: Signal EMA period

    Returns:
        Tuple of (macd_line, signal_line, histogram) lists
    """
    fast_ema = ema(values, fast_period)
    slow_ema = ema(values, slow_period)

    n = min(len(fast_ema), len(slow_ema))
    macd_line = (
        np.asarray(fast_ema[:n], dtype=np.float64)
        - np.asarray(slow_ema[:n], dtype=np.float64)
    ).tolist()

    signal_line = ema(macd_line, signal_period)

    m = min(len(macd_line), len(signal_line))
    histogram = (
        np.asarray(macd_line[:m], dtype=np.float64)
        - np.asarray(signal_line[:m], dtype=np.float64)
    ).tolist()

    return macd_line, signal_line, histogram


# =============================================================================
# IndicatorCalculator class
# =============================================================================

class IndicatorCalculator:
    """Calculator for the indicators attached to a daily summary."""

    def __init__(self, config: IndicatorConfig | None = None):
        self.config = config or IndicatorConfig()

    def calculate_all(self, closes: Sequence[float]) -> dict:
        """
        Calculate all indicator series for the given closes.

        Args:
            closes: List of close prices

        Returns:
            Dict of indicator name to full series
        """
        cfg = self.config
        macd_line, signal_line, histogram = macd(
            closes, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal
        )
        return {
            "moving_average": moving_average(closes, cfg.ma_period),
            "ema": ema(closes, cfg.ema_period),
            "rsi": rsi(closes, cfg.rsi_period),
            "macd": macd_line,
            "macd_signal": signal_line,
            "macd_histogram": histogram,
        }

    def calculate_latest(self, closes: Sequence[float]) -> IndicatorSnapshot | None:
        """
        Calculate indicators for the latest bar only.

        Args:
            closes: List of close prices

        Returns:
            Snapshot of the last value of each series, or None for empty input
        """
        if len(closes) == 0:
            return None

        series = self.calculate_all(closes)
        cfg = self.config

        return IndicatorSnapshot(
            ma_period=cfg.ma_period,
            moving_average=series["moving_average"][-1],
            ema_period=cfg.ema_period,
            ema=series["ema"][-1],
            rsi_period=cfg.rsi_period,
            rsi=series["rsi"][-1] if series["rsi"] else None,
            macd=series["macd"][-1],
            macd_signal=series["macd_signal"][-1],
            macd_histogram=series["macd_histogram"][-1],
        )
