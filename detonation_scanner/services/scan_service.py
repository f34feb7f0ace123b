"""Scan Service — orchestrates one market scan end to end.

Stages run strictly in sequence; calls inside a stage run in parallel:
  1. normalize filters
  2. build the bounded universe
  3. quotes      (all price providers)        → merge per ticker
  4. fundamentals (all fundamentals providers) → merge per ticker
  5. pick the top movers by absolute change
  6. news for the movers only (news is the most rate-limited resource)
  7. assemble, filter, rank

A failing provider call degrades to "no data" and is never retried
within the scan.  The only fatal condition is having no configured
price provider at all.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from detonation_scanner.collectors.base import BaseProvider
from detonation_scanner.collectors.registry import ProviderRegistry, build_registry
from detonation_scanner.engine.filters import normalize_filters
from detonation_scanner.engine.merger import (
    group_by_ticker,
    merge_all_fundamentals,
    merge_all_quotes,
)
from detonation_scanner.engine.result_assembler import assemble, change_percent
from detonation_scanner.engine.universe import build_universe
from detonation_scanner.models.market_data import RawQuote
from detonation_scanner.models.scan import ScanConfig, ScanRequest, ScanResult
from detonation_scanner.utils.logger import logger

P = TypeVar("P", bound=BaseProvider)
R = TypeVar("R")


class ScanError(Exception):
    """A scan could not run at all."""


class NoPriceProviderError(ScanError):
    """No registered price provider has the credentials it needs."""


def select_movers(merged_quotes: dict[str, RawQuote], top_n: int) -> list[str]:
    """Tickers with the largest absolute % change, biggest first."""
    moves: list[tuple[str, float]] = []
    for ticker, quote in merged_quotes.items():
        change = change_percent(quote)
        if change is not None:
            moves.append((ticker, abs(change)))
    moves.sort(key=lambda m: m[1], reverse=True)
    return [ticker for ticker, _ in moves[:top_n]]


async def fan_out(
    providers: Sequence[P],
    call: Callable[[P], Awaitable[list[R]]],
    stage: str,
) -> list[R]:
    """Call every provider concurrently; a provider that raises yields nothing."""
    results = await asyncio.gather(
        *[call(p) for p in providers], return_exceptions=True,
    )
    records: list[R] = []
    for provider, result in zip(providers, results):
        if isinstance(result, BaseException):
            logger.error("[Scan] %s provider %s failed: %s", stage, provider.name, result)
            continue
        records.extend(result)
    return records


class ScanService:
    """Runs scans against a provider registry.

    Pass ``registry`` to pin the providers (tests, embedding); otherwise
    one is built per call from the ``ScanConfig``.
    """

    def __init__(self, registry: ProviderRegistry | None = None) -> None:
        self._registry = registry

    async def run_scan(
        self,
        request: ScanRequest,
        config: ScanConfig | None = None,
    ) -> list[ScanResult]:
        """Run the full pipeline and return ranked results.

        Raises NoPriceProviderError when no price source is configured.
        An empty list means "no candidates", not failure.
        """
        config = config or ScanConfig()
        registry = self._registry or build_registry(config)
        start = time.time()

        logger.info("=" * 70)
        logger.info(
            "[Scan] Starting %s scan (data mode: %s)", request.mode, config.data_mode,
        )

        if not registry.has_price_source():
            msg = (
                "No price data provider is configured. "
                "Set FINNHUB_API_KEY or MASSIVE_API_KEY/MASSIVE_API_BASE_URL."
            )
            logger.error("[Scan] %s", msg)
            raise NoPriceProviderError(msg)

        # 1–2. Filters and universe
        filters = normalize_filters(request.filters)
        universe = build_universe(filters, request.mode, cap=config.universe_cap)
        tickers = [m.symbol for m in universe]
        logger.info("[Scan] Universe size: %d tickers", len(tickers))
        if not tickers:
            logger.info("[Scan] Empty universe — nothing to scan")
            return []

        # 3. Quotes
        quotes = await fan_out(
            registry.price, lambda p: p.fetch_quotes(tickers, request), "price",
        )
        merged_quotes = merge_all_quotes(quotes)
        usable = sum(1 for q in merged_quotes.values() if change_percent(q) is not None)
        logger.info(
            "[Scan] %d raw quotes → %d merged (%d usable)",
            len(quotes), len(merged_quotes), usable,
        )
        if usable == 0:
            logger.warning("[Scan] No usable quotes across the universe")
            return []

        # 4. Fundamentals
        snapshots = await fan_out(
            registry.fundamentals,
            lambda p: p.fetch_fundamentals(tickers, request),
            "fundamentals",
        )
        merged_fundamentals = merge_all_fundamentals(snapshots)
        logger.info("[Scan] Merged fundamentals for %d tickers", len(merged_fundamentals))

        # 5–6. News for top movers only
        movers = select_movers(merged_quotes, config.movers_top_n)
        news_by_ticker = {}
        if movers:
            news = await fan_out(
                registry.news, lambda p: p.fetch_news(movers, request), "news",
            )
            news_by_ticker = group_by_ticker(news)
        logger.info(
            "[Scan] News for %d of %d movers", len(news_by_ticker), len(movers),
        )

        # 7. Assemble, filter, rank
        results = assemble(
            universe,
            merged_quotes,
            merged_fundamentals,
            news_by_ticker,
            filters,
            request.mode,
        )

        elapsed = time.time() - start
        logger.info("[Scan] Complete: %d results in %.1fs", len(results), elapsed)
        for r in results[:10]:
            logger.info(
                "[Scan]   %s: %d potential, %+.1f%% (%s)",
                r.ticker, r.explosive_potential, r.change_percent, r.momentum_grade,
            )
        logger.info("=" * 70)
        return results


async def run_scan(
    request: ScanRequest,
    config: ScanConfig | None = None,
) -> list[ScanResult]:
    """Convenience entry point: one scan with a freshly built registry."""
    return await ScanService().run_scan(request, config)
