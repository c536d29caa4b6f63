"""TuShare Pro client for daily index bars."""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from app.clients.errors import MarketDataError
from core.models.point import TimeSeriesPoint

logger = logging.getLogger(__name__)

HS300_TS_CODE = "000300.SH"  # CSI 300 index
DEFAULT_START_DATE = "20240101"


class TushareClient:
    """TuShare Pro HTTP API client (single JSON POST endpoint)."""

    BASE_URL = "https://api.tushare.pro"

    def __init__(
        self,
        token: str,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
    ):
        self.token = token
        self._transport = transport
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _query(self, api_name: str, params: dict[str, Any]) -> dict:
        if not self.token:
            raise MarketDataError("TUSHARE_TOKEN environment variable not set")

        payload = {"api_name": api_name, "token": self.token, "params": params}
        logger.debug(f"Sending request to TuShare: api={api_name} params={params}")

        client = await self._get_client()
        response = await client.post(self.BASE_URL, json=payload)
        if response.status_code != 200:
            raise MarketDataError(f"TuShare API request failed: {response.status_code}")

        body = response.json()
        if str(body.get("code")) != "0":
            raise MarketDataError(f"TuShare API error: {body.get('msg') or ''}")
        return body.get("data") or {}

    async def get_index_daily(
        self,
        ts_code: str = HS300_TS_CODE,
        start_date: str = DEFAULT_START_DATE,
        end_date: datetime | None = None,
    ) -> list[TimeSeriesPoint]:
        """
        Fetch daily bars for an index.

        Args:
            ts_code: TuShare index code (e.g., "000300.SH")
            start_date: First trade date, YYYYMMDD
            end_date: Last trade date (default: today, UTC)

        Returns:
            Points sorted oldest first
        """
        end_date = end_date or datetime.now(timezone.utc)
        data = await self._query(
            "index_daily",
            {
                "ts_code": ts_code,
                "start_date": start_date,
                "end_date": end_date.strftime("%Y%m%d"),
            },
        )
        return parse_index_daily(data)


def parse_index_daily(data: dict) -> list[TimeSeriesPoint]:
    """Convert a TuShare {fields, items} table into sorted points."""
    fields = data.get("fields") or []
    items = data.get("items") or []
    try:
        columns = {
            name: fields.index(name)
            for name in ("trade_date", "open", "high", "low", "close", "vol")
        }
    except ValueError as e:
        raise MarketDataError(f"TuShare response format error: {e}") from e

    points = []
    for row in items:
        try:
            points.append(
                TimeSeriesPoint(
                    timestamp=datetime.strptime(row[columns["trade_date"]], "%Y%m%d").replace(
                        tzinfo=timezone.utc
                    ),
                    open=float(row[columns["open"]] or 0.0),
                    high=float(row[columns["high"]] or 0.0),
                    low=float(row[columns["low"]] or 0.0),
                    close=float(row[columns["close"]] or 0.0),
                    volume=int(round(float(row[columns["vol"]] or 0))),
                )
            )
        # pydantic's ValidationError is a ValueError
        except (ValueError, TypeError, IndexError) as e:
            raise MarketDataError(f"TuShare response format error: bad row {row!r}: {e}") from e

    # TuShare returns newest first
    points.sort(key=lambda p: p.timestamp)
    return points
