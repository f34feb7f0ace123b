"""Benzinga collector — newsfeed v2, one batched request for all tickers.

Each article lists the stocks it mentions; it is fanned out into one
RawNewsItem per mentioned ticker.  ``created`` / ``updated`` arrive as
unix seconds or RFC-2822 strings depending on the account.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime

from pydantic import BaseModel, ConfigDict, TypeAdapter

from detonation_scanner.collectors.base import NewsDataProvider
from detonation_scanner.config import settings
from detonation_scanner.models.market_data import RawNewsItem
from detonation_scanner.models.scan import ScanRequest
from detonation_scanner.utils.logger import logger

BENZINGA_BASE_URL = "https://api.benzinga.com/api/v2/news"
NEWS_LOOKBACK_DAYS = 3


class BenzingaNamed(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class BenzingaArticle(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = ""
    teaser: str | None = None
    summary: str | None = None
    url: str = ""
    created: int | float | str | None = None
    updated: int | float | str | None = None
    stocks: list[str | BenzingaNamed] = []
    channels: list[str | BenzingaNamed] = []


_articles = TypeAdapter(list[BenzingaArticle])


def _names(entries: list[str | BenzingaNamed]) -> list[str]:
    return [e if isinstance(e, str) else e.name for e in entries]


def _parse_timestamp(value: int | float | str | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _article_iso(article: BenzingaArticle) -> str:
    ts = _parse_timestamp(article.updated) or _parse_timestamp(article.created)
    if ts is None:
        ts = datetime.now(timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class BenzingaNewsProvider(NewsDataProvider):
    """Benzinga Pro headlines."""

    name = "Benzinga Pro"

    def __init__(self, api_key: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.api_key = settings.BENZINGA_API_KEY if api_key is None else api_key

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def fetch_news(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[RawNewsItem]:
        if not self.is_configured():
            logger.warning("[Benzinga] BENZINGA_API_KEY not set — skipping news")
            return []
        if not tickers:
            return []

        logger.info("[Benzinga] Fetching news for %d tickers", len(tickers))
        since = (datetime.now(timezone.utc) - timedelta(days=NEWS_LOOKBACK_DAYS)).date()
        try:
            async with self._client() as client:
                resp = await client.get(
                    BENZINGA_BASE_URL,
                    params={
                        "token": self.api_key,
                        "tickers": ",".join(tickers),
                        "date": since.isoformat(),
                    },
                    headers={"Accept": "application/json"},
                )
                resp.raise_for_status()
                articles = _articles.validate_python(resp.json())
        except Exception as e:
            logger.error("[Benzinga] News fetch failed: %s", e)
            return []

        wanted = {t.upper() for t in tickers}
        items: list[RawNewsItem] = []
        for article in articles:
            channels = _names(article.channels)
            when = _article_iso(article)
            for symbol in _names(article.stocks):
                symbol = symbol.upper()
                if symbol not in wanted:
                    continue
                items.append(
                    RawNewsItem(
                        source="benzinga-news",
                        ticker=symbol,
                        headline=article.title,
                        summary=article.teaser or article.summary or "",
                        url=article.url,
                        datetime=when,
                        category=channels[0] if channels else None,
                    )
                )

        logger.info("[Benzinga] Retrieved %d news items", len(items))
        return items
