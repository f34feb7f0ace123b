"""Result assembler — joins merged quotes, fundamentals and news into ScanResults.

For every universe entry with usable price data:
  1. change % from price vs previous close
  2. fundamentals (placeholders when unknown)
  3. sub-scores, labels, composite
  4. catalyst summary + tags
then filters and ranks the lot by explosive potential.

Unknown fundamentals use placeholders rather than an "unknown" sentinel:
market cap 1B, float = market cap / 100, sector from the registry.
The record therefore stays filterable (1B falls in the "small" bucket).
"""

from __future__ import annotations

from collections.abc import Mapping

from detonation_scanner.engine import catalyst_extractor, scorer
from detonation_scanner.engine.filters import apply_filters, normalize_filters
from detonation_scanner.models.market_data import (
    FundamentalSnapshot,
    RawNewsItem,
    RawQuote,
)
from detonation_scanner.models.scan import ScanFilters, ScanResult, TickerMeta
from detonation_scanner.utils.logger import logger

PLACEHOLDER_MARKET_CAP = 1_000_000_000
PLACEHOLDER_FLOAT_DIVISOR = 100


def change_percent(quote: RawQuote | None) -> float | None:
    """Percent move vs previous close, or None when the quote is unusable."""
    if quote is None or quote.price is None or quote.prev_close is None:
        return None
    if quote.prev_close == 0:
        return None
    return (quote.price - quote.prev_close) / quote.prev_close * 100


def build_result(
    meta: TickerMeta,
    quote: RawQuote,
    change: float,
    fundamentals: FundamentalSnapshot | None,
    news: list[RawNewsItem],
    mode: str,
) -> ScanResult:
    """Score and label one ticker."""
    breakdown = scorer.score(change, quote.volume, mode)
    potential = scorer.explosive_potential(breakdown, mode)
    risk = scorer.risk_level(change, mode)

    catalyst = catalyst_extractor.extract(news)
    base_tags = scorer.derive_tags(
        change, quote.volume, meta.sector, meta.cap_bucket, mode,
    )
    tags = list(dict.fromkeys(base_tags + catalyst.ordered_tags()))

    market_cap = (
        fundamentals.market_cap
        if fundamentals and fundamentals.market_cap is not None
        else PLACEHOLDER_MARKET_CAP
    )
    float_shares = (
        fundamentals.float_shares
        if fundamentals and fundamentals.float_shares is not None
        else market_cap / PLACEHOLDER_FLOAT_DIVISOR
    )
    sector = (
        fundamentals.sector
        if fundamentals and fundamentals.sector is not None
        else meta.sector
    )

    if quote.volume is None:
        logger.debug("[Assembler] No volume for %s, defaulting to 0", meta.symbol)

    primary = catalyst.primary
    direction = "Upward" if change >= 0 else "Downward"
    return ScanResult(
        ticker=meta.symbol,
        company_name=meta.symbol,
        sector=sector,
        scan_mode=mode,  # type: ignore[arg-type]
        price=quote.price,  # type: ignore[arg-type]
        change_percent=change,
        volume=quote.volume or 0,
        market_cap=market_cap,
        float_shares=float_shares,
        momentum_grade=scorer.momentum_grade(change),
        sentiment=scorer.sentiment_label(change),
        risk_level=risk,
        explosive_potential=potential,
        score_breakdown=breakdown,
        catalyst_summary=catalyst.catalyst_summary,
        risk_notes="Extreme volatility detected" if risk == "High" else "Monitor closely",
        why_it_might_move=f"{direction} momentum with {abs(change):.1f}% move",
        tags=tags,
        primary_news_headline=primary.headline if primary else None,
        primary_news_url=primary.url if primary else None,
        primary_news_datetime=primary.datetime if primary else None,
    )


def rank(results: list[ScanResult]) -> list[ScanResult]:
    """Descending explosive potential; ties keep input order (stable sort)."""
    return sorted(results, key=lambda r: r.explosive_potential, reverse=True)


def assemble(
    universe: list[TickerMeta],
    merged_quotes: Mapping[str, RawQuote],
    merged_fundamentals: Mapping[str, FundamentalSnapshot],
    news_by_ticker: Mapping[str, list[RawNewsItem]],
    filters: ScanFilters,
    mode: str = "unified",
) -> list[ScanResult]:
    """Build, filter and rank results for the universe."""
    results: list[ScanResult] = []
    skipped = 0

    for meta in universe:
        quote = merged_quotes.get(meta.symbol)
        change = change_percent(quote)
        if quote is None or change is None:
            skipped += 1
            continue

        results.append(
            build_result(
                meta,
                quote,
                change,
                merged_fundamentals.get(meta.symbol),
                news_by_ticker.get(meta.symbol, []),
                mode,
            )
        )

    filtered = apply_filters(results, normalize_filters(filters))
    logger.info(
        "[Assembler] %d built (%d skipped for missing data), %d after filters",
        len(results), skipped, len(filtered),
    )
    return rank(filtered)
