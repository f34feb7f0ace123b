"""Provider capabilities — the interface every vendor adapter implements.

One ABC per data category.  The scan pipeline only ever sees these;
it iterates the registered list and never switches on vendor identity.

Contract for every fetch method:
  * never raise for a per-ticker failure, return what succeeded
  * a missing credential is a soft failure: log and return []
  * vendor payloads are decoded through strict pydantic models; anything
    malformed is dropped at this boundary
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from detonation_scanner.models.market_data import (
    FundamentalSnapshot,
    RawNewsItem,
    RawQuote,
)
from detonation_scanner.models.scan import ScanRequest
from detonation_scanner.utils.logger import logger

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def decode(model: type[M], payload: Any) -> M:
    """Validate a vendor payload; raises ``pydantic.ValidationError`` if malformed."""
    return model.model_validate(payload)


class BaseProvider(ABC):
    """Shared plumbing: HTTP client factory and bounded per-ticker fan-out."""

    name: str = "base"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        concurrency: int = 8,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.concurrency = concurrency
        self._transport = transport

    def is_configured(self) -> bool:
        """Whether the credentials this provider needs are present."""
        return True

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _gather(
        self,
        tickers: list[str],
        fetch_one: Callable[[str], Awaitable[T | list[T] | None]],
    ) -> list[T]:
        """Run ``fetch_one`` for every ticker concurrently.

        Each call is isolated: an exception for one ticker is logged and
        contributes nothing, the rest still come back.
        """
        sem = asyncio.Semaphore(self.concurrency)

        async def _bounded(ticker: str) -> T | list[T] | None:
            async with sem:
                return await fetch_one(ticker)

        results = await asyncio.gather(
            *[_bounded(t) for t in tickers], return_exceptions=True,
        )

        records: list[T] = []
        for ticker, result in zip(tickers, results):
            if isinstance(result, BaseException):
                logger.warning("[%s] %s failed: %s", self.name, ticker, result)
                continue
            if result is None:
                continue
            if isinstance(result, list):
                records.extend(result)
            else:
                records.append(result)
        return records


class PriceDataProvider(BaseProvider):
    """Fetches current quotes."""

    @abstractmethod
    async def fetch_quotes(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[RawQuote]: ...


class NewsDataProvider(BaseProvider):
    """Fetches recent company news."""

    @abstractmethod
    async def fetch_news(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[RawNewsItem]: ...


class FundamentalsDataProvider(BaseProvider):
    """Fetches market cap, float and sector."""

    @abstractmethod
    async def fetch_fundamentals(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[FundamentalSnapshot]: ...
