"""yFinance collector — market cap, float and sector from ``Ticker.info``.

No credential required.  yfinance is synchronous, so each lookup runs
in a thread pool and the results are gathered back on the event loop.
"""

from __future__ import annotations

import asyncio
import concurrent.futures

import yfinance as yf
from pydantic import BaseModel, ConfigDict, Field

from detonation_scanner.collectors.base import FundamentalsDataProvider, decode
from detonation_scanner.models.market_data import FundamentalSnapshot
from detonation_scanner.models.scan import ScanRequest
from detonation_scanner.utils.logger import logger


class YFinanceInfo(BaseModel):
    """The handful of ``.info`` keys we read."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    market_cap: float | None = Field(default=None, alias="marketCap")
    float_shares: float | None = Field(default=None, alias="floatShares")
    sector: str | None = None


class YFinanceFundamentalsProvider(FundamentalsDataProvider):
    """Fundamentals from Yahoo Finance."""

    name = "yFinance"

    async def fetch_fundamentals(
        self, tickers: list[str], request: ScanRequest,
    ) -> list[FundamentalSnapshot]:
        if not tickers:
            return []

        logger.info("[yFinance] Fetching fundamentals for %d tickers", len(tickers))
        # yf.Ticker caches .info on the instance, so tickers live for one call only
        handles: dict[str, yf.Ticker] = {t: yf.Ticker(t) for t in tickers}
        loop = asyncio.get_running_loop()
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=min(len(tickers), self.concurrency)
        ) as pool:
            futures = [
                loop.run_in_executor(pool, self._fetch_one, t, handles[t])
                for t in tickers
            ]
            results = await asyncio.gather(*futures, return_exceptions=True)

        snaps: list[FundamentalSnapshot] = []
        for ticker, result in zip(tickers, results):
            if isinstance(result, BaseException):
                logger.warning("[yFinance] %s failed: %s", ticker, result)
                continue
            if result is not None:
                snaps.append(result)

        logger.info("[yFinance] Retrieved %d fundamental snapshots", len(snaps))
        return snaps

    def _fetch_one(
        self, symbol: str, handle: yf.Ticker,
    ) -> FundamentalSnapshot | None:
        info = handle.info or {}
        data = decode(YFinanceInfo, info)
        if data.market_cap is None and data.float_shares is None and data.sector is None:
            return None
        return FundamentalSnapshot(
            ticker=symbol,
            market_cap=data.market_cap,
            float_shares=data.float_shares,
            sector=data.sector,
        )
