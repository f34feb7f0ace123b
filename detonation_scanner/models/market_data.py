"""Market data models — normalized per-provider quotes, news and fundamentals.

Every vendor adapter decodes its payload into one of these shapes before
anything downstream (mergers, scorer) sees it.  All three are ephemeral:
produced per provider call and discarded when the scan finishes.
"""

from __future__ import annotations

from pydantic import BaseModel


class RawQuote(BaseModel):
    """One provider's quote for one ticker."""

    source: str
    ticker: str
    price: float | None = None
    prev_close: float | None = None
    volume: float | None = None
    timestamp: float | None = None  # epoch milliseconds

    @property
    def is_complete(self) -> bool:
        """True when both price and previous close are known."""
        return self.price is not None and self.prev_close is not None


class RawNewsItem(BaseModel):
    """One headline for one ticker."""

    source: str
    ticker: str
    headline: str
    summary: str = ""
    url: str = ""
    datetime: str  # ISO-8601, UTC
    category: str | None = None


class FundamentalSnapshot(BaseModel):
    """Point-in-time company fundamentals from one provider."""

    ticker: str
    market_cap: float | None = None
    float_shares: float | None = None
    sector: str | None = None
