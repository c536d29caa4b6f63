"""Time-series point (daily OHLCV bar) data model."""

from datetime import datetime, timezone
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimeSeriesPoint(BaseModel):
    """One OHLCV observation at a UTC instant.

    Sequences of points are expected in ascending timestamp order.
    Duplicate timestamps are not rejected.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    open: float = Field(ge=0)
    high: float = Field(ge=0)
    low: float = Field(ge=0)
    close: float = Field(ge=0)
    volume: int = Field(ge=0)

    @field_validator("timestamp")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def closes_of(points: Sequence[TimeSeriesPoint]) -> list[float]:
    """Get list of close prices."""
    return [p.close for p in points]
