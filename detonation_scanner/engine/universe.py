"""Universe selector — the bounded candidate set for a live scan.

Starts from the curated ``TICKER_UNIVERSE`` registry, applies the
mode policy table, then the user's cap-bucket and sector filters, and
finally truncates to the universe cap.

The cap is a hard ceiling on outbound provider calls, not a sample:
the first N survivors in registry order are kept, nothing is shuffled.
"""

from __future__ import annotations

from typing import Callable

from detonation_scanner.models.scan import ScanFilters, TickerMeta

UNIVERSE_CAP = 40

# Curated for volatility and detonation-style moves: high-beta,
# story-driven names across sectors and cap sizes.
TICKER_UNIVERSE: tuple[TickerMeta, ...] = tuple(
    TickerMeta(symbol=s, sector=sec, cap_bucket=cap)  # type: ignore[arg-type]
    for s, sec, cap in [
        # Large-cap / high-beta tech
        ("AAPL", "Technology", "large"),
        ("MSFT", "Technology", "large"),
        ("GOOGL", "Technology", "large"),
        ("AMZN", "Technology", "large"),
        ("META", "Technology", "large"),
        ("TSLA", "Consumer", "large"),
        ("NVDA", "Technology", "large"),
        ("AMD", "Technology", "large"),
        ("AVGO", "Technology", "large"),
        # Mid-cap tech / volatile
        ("SMCI", "Technology", "mid"),
        ("PLTR", "Technology", "mid"),
        ("ARM", "Technology", "mid"),
        ("AI", "Technology", "mid"),
        # Leveraged ETFs / volatility products
        ("TQQQ", "ETF", "mid"),
        ("SOXL", "ETF", "mid"),
        ("IWM", "ETF", "large"),
        ("SPY", "ETF", "large"),
        ("QQQ", "ETF", "large"),
        # Crypto miners / blockchain
        ("RIOT", "Crypto", "small"),
        ("MARA", "Crypto", "small"),
        ("CLSK", "Crypto", "small"),
        # Small-cap tech / speculative
        ("IONQ", "Technology", "small"),
        ("DNA", "Biotech", "small"),
        ("JOBY", "Industrial", "small"),
        ("ASTS", "Communications", "small"),
        ("SOUN", "Technology", "small"),
        ("PLUG", "Energy", "small"),
        # Meme / high short interest
        ("GME", "Consumer", "mid"),
        ("AMC", "Consumer", "mid"),
        ("CVNA", "Consumer", "mid"),
        # Micro-cap volatility plays
        ("FFIE", "Consumer", "micro"),
        ("HUDI", "Industrial", "micro"),
        # Biotech small / mid caps
        ("MRNA", "Biotech", "mid"),
        ("CRSP", "Biotech", "small"),
        ("RXRX", "Biotech", "small"),
    ]
)

# Distinct sectors in first-seen registry order; drives the sector filter choices.
SECTORS: tuple[str, ...] = tuple(dict.fromkeys(m.sector for m in TICKER_UNIVERSE))

# Mode → predicate over TickerMeta.  Modes not listed scan the full registry.
MODE_POLICIES: dict[str, Callable[[TickerMeta], bool]] = {
    "cmbm-style": lambda m: m.cap_bucket in ("micro", "small"),
    "momentum": lambda m: m.sector in ("Technology", "Crypto", "ETF"),
    "catalyst-hunter": lambda m: not (m.cap_bucket == "large" and m.sector == "ETF"),
}


def matches_market_cap(filters: ScanFilters, meta: TickerMeta) -> bool:
    if filters.market_cap == "any":
        return True
    return filters.market_cap == meta.cap_bucket


def matches_sector(filters: ScanFilters, meta: TickerMeta) -> bool:
    if not filters.sectors:
        return True
    return meta.sector in filters.sectors


def build_universe(
    filters: ScanFilters,
    mode: str | None = None,
    *,
    cap: int = UNIVERSE_CAP,
    registry: tuple[TickerMeta, ...] | list[TickerMeta] = TICKER_UNIVERSE,
) -> list[TickerMeta]:
    """Return the ordered, bounded list of tickers to scan.

    An empty list is a valid outcome and means "no candidates".
    """
    pool = list(registry)

    policy = MODE_POLICIES.get(mode or "")
    if policy is not None:
        pool = [m for m in pool if policy(m)]

    pool = [
        m for m in pool
        if matches_market_cap(filters, m) and matches_sector(filters, m)
    ]
    return pool[:cap]


def lookup(symbol: str) -> TickerMeta | None:
    """Find a registry entry by symbol."""
    for meta in TICKER_UNIVERSE:
        if meta.symbol == symbol:
            return meta
    return None
