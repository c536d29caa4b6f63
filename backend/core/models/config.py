"""Indicator configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class IndicatorConfig(BaseModel):
    """Indicator periods used when enriching a daily summary."""

    ma_period: int = Field(default=20, ge=1)
    ema_period: int = Field(default=20, ge=1)
    rsi_period: int = Field(default=14, ge=1)

    # MACD (classic 12/26/9)
    macd_fast: int = Field(default=12, ge=1)
    macd_slow: int = Field(default=26, ge=1)
    macd_signal: int = Field(default=9, ge=1)
