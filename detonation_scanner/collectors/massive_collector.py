"""Massive (formerly Polygon) collector — previous-day aggregate as a quote.

Polygon-style ``/v2/aggs/ticker/{ticker}/prev`` returns one bar:
close is used as price and open as the previous-close approximation.
The ``/range/1/day`` aggregates also back-fill volume for other price
sources that came back without one.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict

from detonation_scanner.collectors.base import PriceDataProvider, decode
from detonation_scanner.config import settings
from detonation_scanner.models.market_data import RawQuote
from detonation_scanner.models.scan import ScanRequest
from detonation_scanner.utils.logger import logger

VOLUME_LOOKBACK_DAYS = 30


class MassiveBar(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    c: float | None = None
    o: float | None = None
    v: float | None = None
    t: int | None = None  # epoch ms


class MassiveAggsPayload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    results: list[MassiveBar] = []


class MassivePriceProvider(PriceDataProvider):
    """Quotes from the Massive aggregates API."""

    name = "Massive"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = settings.MASSIVE_API_KEY if api_key is None else api_key
        self.base_url = (
            settings.MASSIVE_BASE_URL if base_url is None else base_url.rstrip("/")
        )

    def is_configured(self) -> bool:
        return bool(self.api_key and self.base_url)

    async def fetch_quotes(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[RawQuote]:
        if not self.is_configured():
            logger.warning(
                "[Massive] MASSIVE_API_KEY / MASSIVE_API_BASE_URL not set — skipping quotes",
            )
            return []

        logger.info("[Massive] Fetching quotes for %d tickers", len(tickers))
        async with self._client() as client:
            quotes = await self._gather(
                tickers, lambda t: self._fetch_prev_bar(client, t),
            )
        logger.info("[Massive] Retrieved %d valid quotes", len(quotes))
        return quotes

    async def _fetch_prev_bar(
        self, client: httpx.AsyncClient, ticker: str,
    ) -> RawQuote | None:
        resp = await client.get(
            f"{self.base_url}/v2/aggs/ticker/{quote(ticker)}/prev",
            params={"apiKey": self.api_key},
        )
        resp.raise_for_status()
        data = decode(MassiveAggsPayload, resp.json())
        if not data.results:
            return None

        bar = data.results[0]
        if bar.c is None or bar.o is None:
            return None

        return RawQuote(
            source="massive",
            ticker=ticker,
            price=bar.c,
            prev_close=bar.o,
            volume=bar.v,
            timestamp=bar.t,
        )

    async def fetch_recent_daily_volume(self, ticker: str) -> float | None:
        """Most recent positive daily volume over the last 30 days, or None."""
        if not self.is_configured():
            return None

        today = datetime.now(timezone.utc).date()
        start = today - timedelta(days=VOLUME_LOOKBACK_DAYS)
        try:
            async with self._client() as client:
                resp = await client.get(
                    f"{self.base_url}/v2/aggs/ticker/{quote(ticker)}"
                    f"/range/1/day/{start.isoformat()}/{today.isoformat()}",
                    params={"adjusted": "true", "apiKey": self.api_key},
                )
                resp.raise_for_status()
                data = decode(MassiveAggsPayload, resp.json())
        except (httpx.HTTPError, ValueError) as e:
            logger.debug("[Massive] Daily volume unavailable for %s: %s", ticker, e)
            return None

        for bar in reversed(data.results):
            if bar.v is not None and bar.v > 0:
                return bar.v
        return None
