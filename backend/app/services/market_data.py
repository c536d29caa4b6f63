"""Market data service with provider fallback.

Fetch order for the CSI 300 series:
1. TuShare Pro (index_daily)
2. Alpha Vantage (TIME_SERIES_DAILY)
3. Synthetic random walk, so a report can still be produced

A provider that raises or returns an empty series counts as failed.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable

import numpy as np

from app.clients import AlphaVantageClient, MarketDataError, TushareClient
from core.models.point import TimeSeriesPoint

logger = logging.getLogger(__name__)

WEEKLY_LOOKBACK_DAYS = 7
MONTHLY_LOOKBACK_DAYS = 30

# Synthetic series bounds
SYNTHETIC_DAYS = 30
SYNTHETIC_BASE_PRICE = 3500.0
SYNTHETIC_MIN_PRICE = 3000.0
SYNTHETIC_MAX_PRICE = 4000.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_synthetic_series(
    days: int = SYNTHETIC_DAYS,
    end: datetime | None = None,
    seed: int | None = None,
) -> list[TimeSeriesPoint]:
    """
    Generate a random-walk daily series ending at `end`.

    Closes move by up to +/-50 per day and are clamped to [3000, 4000].
    Volumes fall in [500000, 1500000).
    """
    rng = np.random.default_rng(seed)
    base_date = (end or utc_now()) - timedelta(days=days)
    price = SYNTHETIC_BASE_PRICE

    points = []
    for i in range(days):
        price += (rng.random() - 0.5) * 100.0
        price = float(np.clip(price, SYNTHETIC_MIN_PRICE, SYNTHETIC_MAX_PRICE))

        open_ = price + (rng.random() - 0.5) * 20.0
        high = open_ + rng.random() * 50.0
        low = open_ - rng.random() * 50.0

        points.append(
            TimeSeriesPoint(
                timestamp=base_date + timedelta(days=i),
                open=max(open_, 0.0),
                high=max(high, 0.0),
                low=max(low, 0.0),
                close=max(price, 0.0),
                volume=int(rng.integers(500_000, 1_500_000)),
            )
        )

    logger.info(f"Generated {len(points)} mock data points")
    return points


class MarketDataService:
    """Fetches the index series, falling back across providers."""

    def __init__(
        self,
        tushare: TushareClient,
        alpha_vantage: AlphaVantageClient,
        clock: Callable[[], datetime] = utc_now,
        synthetic_seed: int | None = None,
    ):
        self.tushare = tushare
        self.alpha_vantage = alpha_vantage
        self._clock = clock
        self._synthetic_seed = synthetic_seed

    async def close(self) -> None:
        await self.tushare.close()
        await self.alpha_vantage.close()

    async def _try_provider(
        self,
        name: str,
        fetch: Callable[[], Awaitable[list[TimeSeriesPoint]]],
    ) -> list[TimeSeriesPoint] | None:
        try:
            points = await fetch()
            if not points:
                raise MarketDataError(f"{name} returned no data")
        except Exception as e:
            logger.warning(f"{name} fetch failed: {e}")
            return None

        logger.info(f"Retrieved {len(points)} data points from {name}")
        return points

    async def fetch_history(self) -> list[TimeSeriesPoint]:
        """Fetch the full available daily history, oldest first."""
        logger.info("Starting to fetch CSI 300 data")

        points = await self._try_provider(
            "TuShare",
            lambda: self.tushare.get_index_daily(end_date=self._clock()),
        )
        if points is None:
            points = await self._try_provider("Alpha Vantage", self.alpha_vantage.get_daily)
        if points is None:
            logger.warning("All data providers failed, using mock data")
            points = generate_synthetic_series(end=self._clock(), seed=self._synthetic_seed)
        return points

    async def fetch_window(self, days: int) -> list[TimeSeriesPoint]:
        """
        Fetch history and keep only the trailing `days` calendar days.

        Falls back to the full history when nothing falls inside the window
        (e.g. a provider lagging behind by more than `days`).
        """
        points = await self.fetch_history()
        cutoff = self._clock() - timedelta(days=days)
        window = [p for p in points if p.timestamp >= cutoff]
        if not window:
            logger.warning(
                f"No data within the last {days} days, using full history "
                f"({len(points)} points)"
            )
            return points
        return window

    async def fetch_daily(self) -> list[TimeSeriesPoint]:
        return await self.fetch_history()

    async def fetch_weekly(self) -> list[TimeSeriesPoint]:
        return await self.fetch_window(WEEKLY_LOOKBACK_DAYS)

    async def fetch_monthly(self) -> list[TimeSeriesPoint]:
        return await self.fetch_window(MONTHLY_LOOKBACK_DAYS)

    async def latest_close(self) -> float:
        """Get the most recent close price."""
        points = await self.fetch_history()
        if not points:
            raise MarketDataError("Unable to get current price")
        return points[-1].close
