"""Finnhub collector — quotes, company news and profile fundamentals.

Docs: https://finnhub.io/docs/api

Quote fields:  c = current, pc = previous close, v = volume (tier
dependent), t = unix seconds.  A price of 0 means "no data".
When the quote has no volume we fall back to the most recent positive
daily candle volume over the last 30 days, then to Massive daily
aggregates when a Massive provider is wired in.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import httpx
from pydantic import BaseModel, ConfigDict, TypeAdapter

from detonation_scanner.collectors.base import (
    FundamentalsDataProvider,
    NewsDataProvider,
    PriceDataProvider,
    decode,
)
from detonation_scanner.collectors.massive_collector import MassivePriceProvider
from detonation_scanner.config import settings
from detonation_scanner.models.market_data import (
    FundamentalSnapshot,
    RawNewsItem,
    RawQuote,
)
from detonation_scanner.models.scan import ScanRequest
from detonation_scanner.utils.logger import logger

FINNHUB_BASE_URL = "https://finnhub.io/api/v1"
NEWS_LOOKBACK_DAYS = 3
NEWS_PER_TICKER = 5
CANDLE_LOOKBACK_DAYS = 30


# ── Vendor payloads ─────────────────────────────────────────────────


class _Payload(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")


class FinnhubQuotePayload(_Payload):
    c: float | None = None
    pc: float | None = None
    v: float | None = None
    t: int | None = None


class FinnhubCandlePayload(_Payload):
    s: str
    v: list[float] = []


class FinnhubNewsPayload(_Payload):
    headline: str | None = None
    summary: str | None = None
    url: str | None = None
    datetime: int | None = None
    category: str | None = None


class FinnhubProfilePayload(_Payload):
    marketCapitalization: float | None = None  # millions
    shareOutstanding: float | None = None  # millions
    finnhubIndustry: str | None = None


_news_list = TypeAdapter(list[FinnhubNewsPayload])


def _now_ms() -> float:
    return time.time() * 1000


def _iso_from_unix(seconds: int | None) -> str:
    ts = (
        datetime.fromtimestamp(seconds, tz=timezone.utc)
        if seconds is not None
        else datetime.now(timezone.utc)
    )
    return ts.isoformat().replace("+00:00", "Z")


class _FinnhubMixin:
    """Credential handling shared by the three Finnhub providers."""

    api_key: str

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _params(self, **extra: object) -> dict[str, object]:
        return {**extra, "token": self.api_key}


class FinnhubPriceProvider(_FinnhubMixin, PriceDataProvider):
    """Real-time quotes from Finnhub ``/quote``."""

    name = "Finnhub"

    def __init__(
        self,
        api_key: str | None = None,
        volume_fallback: MassivePriceProvider | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = settings.FINNHUB_API_KEY if api_key is None else api_key
        self.volume_fallback = volume_fallback

    async def fetch_quotes(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[RawQuote]:
        if not self.is_configured():
            logger.warning("[Finnhub] FINNHUB_API_KEY not set — skipping quotes")
            return []

        logger.info("[Finnhub] Fetching quotes for %d tickers", len(tickers))
        async with self._client() as client:
            quotes = await self._gather(
                tickers, lambda t: self._fetch_quote(client, t),
            )
        logger.info("[Finnhub] Retrieved %d valid quotes", len(quotes))
        return quotes

    async def _fetch_quote(
        self, client: httpx.AsyncClient, ticker: str,
    ) -> RawQuote | None:
        resp = await client.get(
            f"{FINNHUB_BASE_URL}/quote", params=self._params(symbol=ticker),
        )
        resp.raise_for_status()
        data = decode(FinnhubQuotePayload, resp.json())

        if data.c is None or data.pc is None:
            return None
        if data.c == 0:
            logger.debug("[Finnhub] 0 price for %s — no data available", ticker)
            return None

        volume = data.v if data.v is not None and data.v > 0 else None
        if volume is None:
            volume = await self._fetch_daily_volume(client, ticker)
        if volume is None and self.volume_fallback is not None:
            volume = await self.volume_fallback.fetch_recent_daily_volume(ticker)
            if volume is not None:
                logger.info("[Massive] Fallback volume for %s: %s", ticker, volume)

        return RawQuote(
            source="finnhub",
            ticker=ticker,
            price=data.c,
            prev_close=data.pc,
            volume=volume,
            timestamp=data.t * 1000 if data.t else _now_ms(),
        )

    async def _fetch_daily_volume(
        self, client: httpx.AsyncClient, ticker: str,
    ) -> float | None:
        """Most recent positive daily volume from the candle endpoint."""
        now = int(time.time())
        start = now - CANDLE_LOOKBACK_DAYS * 24 * 60 * 60
        try:
            resp = await client.get(
                f"{FINNHUB_BASE_URL}/stock/candle",
                params=self._params(symbol=ticker, resolution="D", **{"from": start, "to": now}),
            )
            resp.raise_for_status()
            data = decode(FinnhubCandlePayload, resp.json())
        except Exception as e:
            logger.debug("[Finnhub] Candle volume unavailable for %s: %s", ticker, e)
            return None

        if data.s != "ok":
            return None
        for vol in reversed(data.v):
            if vol > 0:
                return vol
        return None


class FinnhubNewsProvider(_FinnhubMixin, NewsDataProvider):
    """Company news from Finnhub ``/company-news`` (3-day lookback, 5 per ticker)."""

    name = "Finnhub News"

    def __init__(self, api_key: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.api_key = settings.FINNHUB_API_KEY if api_key is None else api_key

    async def fetch_news(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[RawNewsItem]:
        if not self.is_configured():
            logger.warning("[Finnhub] FINNHUB_API_KEY not set — skipping news")
            return []

        logger.info("[Finnhub] Fetching news for %d tickers", len(tickers))
        async with self._client() as client:
            items = await self._gather(
                tickers, lambda t: self._fetch_company_news(client, t),
            )
        logger.info("[Finnhub] Retrieved %d news items", len(items))
        return items

    async def _fetch_company_news(
        self, client: httpx.AsyncClient, ticker: str,
    ) -> list[RawNewsItem]:
        today = datetime.now(timezone.utc).date()
        start = today - timedelta(days=NEWS_LOOKBACK_DAYS)
        resp = await client.get(
            f"{FINNHUB_BASE_URL}/company-news",
            params=self._params(
                symbol=ticker, **{"from": start.isoformat(), "to": today.isoformat()},
            ),
        )
        resp.raise_for_status()
        articles = _news_list.validate_python(resp.json())

        return [
            RawNewsItem(
                source="finnhub-news",
                ticker=ticker,
                headline=a.headline or "No headline",
                summary=a.summary or "",
                url=a.url or "",
                datetime=_iso_from_unix(a.datetime),
                category=a.category,
            )
            for a in articles[:NEWS_PER_TICKER]
        ]


class FinnhubFundamentalsProvider(_FinnhubMixin, FundamentalsDataProvider):
    """Market cap, shares outstanding and industry from ``/stock/profile2``."""

    name = "Finnhub Fundamentals"

    def __init__(self, api_key: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.api_key = settings.FINNHUB_API_KEY if api_key is None else api_key

    async def fetch_fundamentals(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[FundamentalSnapshot]:
        if not self.is_configured():
            logger.warning("[Finnhub] FINNHUB_API_KEY not set — skipping fundamentals")
            return []

        logger.info("[Finnhub] Fetching fundamentals for %d tickers", len(tickers))
        async with self._client() as client:
            snaps = await self._gather(
                tickers, lambda t: self._fetch_profile(client, t),
            )
        logger.info("[Finnhub] Retrieved %d fundamental snapshots", len(snaps))
        return snaps

    async def _fetch_profile(
        self, client: httpx.AsyncClient, ticker: str,
    ) -> FundamentalSnapshot:
        resp = await client.get(
            f"{FINNHUB_BASE_URL}/stock/profile2", params=self._params(symbol=ticker),
        )
        resp.raise_for_status()
        data = decode(FinnhubProfilePayload, resp.json())

        return FundamentalSnapshot(
            ticker=ticker,
            market_cap=(
                data.marketCapitalization * 1_000_000
                if data.marketCapitalization is not None else None
            ),
            float_shares=(
                data.shareOutstanding * 1_000_000
                if data.shareOutstanding is not None else None
            ),
            sector=data.finnhubIndustry,
        )
