"""Alpha Vantage client (TIME_SERIES_DAILY)."""

import logging
from datetime import datetime, timezone

import httpx

from app.clients.errors import MarketDataError
from core.models.point import TimeSeriesPoint

logger = logging.getLogger(__name__)

HS300_SYMBOL = "000300.SS"


class AlphaVantageClient:
    """Alpha Vantage REST client."""

    BASE_URL = "https://www.alphavantage.co"

    def __init__(
        self,
        api_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_daily(self, symbol: str = HS300_SYMBOL) -> list[TimeSeriesPoint]:
        """
        Fetch the compact (last ~100 bars) daily series for a symbol.

        Returns:
            Points sorted oldest first
        """
        if not self.api_key:
            raise MarketDataError("ALPHA_VANTAGE_API_KEY environment variable not set")

        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": symbol,
            "outputsize": "compact",
            "apikey": self.api_key,
        }
        client = await self._get_client()
        response = await client.get("/query", params=params)
        if response.status_code != 200:
            raise MarketDataError(
                f"Alpha Vantage API request failed: {response.status_code}"
            )

        body = response.json()
        logger.debug(f"Alpha Vantage response keys: {list(body)}")
        return parse_time_series_daily(body)


def _field(values: dict, key: str) -> float:
    try:
        return float(values.get(key, 0.0))
    except (TypeError, ValueError):
        return 0.0


def parse_time_series_daily(body: dict) -> list[TimeSeriesPoint]:
    """Convert a TIME_SERIES_DAILY response into sorted points.

    Unparseable dates are skipped; unparseable numbers become 0.
    """
    if "Error Message" in body:
        raise MarketDataError(f"Alpha Vantage API error: {body['Error Message']}")

    time_series = body.get("Time Series (Daily)")
    if not isinstance(time_series, dict):
        raise MarketDataError("Alpha Vantage response format error")

    points = []
    for date_str, values in time_series.items():
        try:
            date = datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        except ValueError:
            continue
        if not isinstance(values, dict):
            continue

        points.append(
            TimeSeriesPoint(
                timestamp=date,
                open=_field(values, "1. open"),
                high=_field(values, "2. high"),
                low=_field(values, "3. low"),
                close=_field(values, "4. close"),
                volume=int(_field(values, "5. volume")),
            )
        )

    points.sort(key=lambda p: p.timestamp)
    return points
