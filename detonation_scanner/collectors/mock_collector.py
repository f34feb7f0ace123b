"""Mock collectors — synthetic quotes, news and fundamentals for development.

Values are pseudo-random but seeded per (ticker, seed), so the same
scan returns the same numbers.  Market caps are drawn inside each
ticker's registry cap bucket so cap filters behave sensibly.
"""

from __future__ import annotations

import random
import time
import zlib
from datetime import datetime, timedelta, timezone

from detonation_scanner.collectors.base import (
    FundamentalsDataProvider,
    NewsDataProvider,
    PriceDataProvider,
)
from detonation_scanner.engine.universe import lookup
from detonation_scanner.models.market_data import (
    FundamentalSnapshot,
    RawNewsItem,
    RawQuote,
)
from detonation_scanner.models.scan import ScanRequest
from detonation_scanner.utils.logger import logger

CATALYST_HEADLINES = [
    "{t} FDA approval decision expected within 30 days",
    "{t} Q3 earnings report next week, beat expected",
    "{t} announces major partnership deal",
    "{t} schedules new product launch",
    "{t} phase 2 trial results due imminently",
    "Analyst upgrade cycle beginning for {t}",
    "{t} short squeeze setup with high short interest",
    "Institutional accumulation detected in {t}",
    "{t} breaks out from consolidation pattern",
    "{t} volume surges on positive news flow",
]

# Inclusive market-cap ranges per bucket
_CAP_RANGES = {
    "micro": (50_000_000, 290_000_000),
    "small": (300_000_000, 1_900_000_000),
    "mid": (2_000_000_000, 9_500_000_000),
    "large": (10_000_000_000, 2_000_000_000_000),
}


def _rng(ticker: str, seed: int, salt: str) -> random.Random:
    return random.Random(zlib.crc32(f"{ticker}|{seed}|{salt}".encode()))


class MockPriceProvider(PriceDataProvider):
    name = "Mock Prices"

    def __init__(self, seed: int = 0, **kwargs) -> None:
        super().__init__(**kwargs)
        self.seed = seed

    async def fetch_quotes(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[RawQuote]:
        now_ms = time.time() * 1000
        quotes = []
        for ticker in tickers:
            rng = _rng(ticker, self.seed, "quote")
            price = round(rng.uniform(10, 180), 2)
            change = rng.uniform(-12, 22)
            quotes.append(
                RawQuote(
                    source="mock",
                    ticker=ticker,
                    price=price,
                    prev_close=round(price / (1 + change / 100), 4),
                    volume=float(rng.randint(1_000_000, 15_000_000)),
                    timestamp=now_ms,
                )
            )
        logger.info("[Mock] Generated %d quotes", len(quotes))
        return quotes


class MockNewsProvider(NewsDataProvider):
    name = "Mock News"

    def __init__(self, seed: int = 0, **kwargs) -> None:
        super().__init__(**kwargs)
        self.seed = seed

    async def fetch_news(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[RawNewsItem]:
        now = datetime.now(timezone.utc).replace(microsecond=0)
        items = []
        for ticker in tickers:
            rng = _rng(ticker, self.seed, "news")
            published = now - timedelta(minutes=rng.randint(5, 3 * 24 * 60))
            items.append(
                RawNewsItem(
                    source="mock",
                    ticker=ticker,
                    headline=rng.choice(CATALYST_HEADLINES).format(t=ticker),
                    summary=f"Synthetic catalyst for {ticker}.",
                    url=f"https://example.com/news/{ticker.lower()}",
                    datetime=published.isoformat().replace("+00:00", "Z"),
                    category="company",
                )
            )
        logger.info("[Mock] Generated %d news items", len(items))
        return items


class MockFundamentalsProvider(FundamentalsDataProvider):
    name = "Mock Fundamentals"

    def __init__(self, seed: int = 0, **kwargs) -> None:
        super().__init__(**kwargs)
        self.seed = seed

    async def fetch_fundamentals(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[FundamentalSnapshot]:
        snaps = []
        for ticker in tickers:
            meta = lookup(ticker)
            if meta is None:
                continue
            rng = _rng(ticker, self.seed, "fundamentals")
            low, high = _CAP_RANGES[meta.cap_bucket]
            snaps.append(
                FundamentalSnapshot(
                    ticker=ticker,
                    market_cap=float(rng.randint(low, high)),
                    float_shares=float(rng.randint(20_000_000, 150_000_000)),
                    sector=meta.sector,
                )
            )
        logger.info("[Mock] Generated %d fundamental snapshots", len(snaps))
        return snaps
