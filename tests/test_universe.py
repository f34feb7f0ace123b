"""Tests for the universe selector.

Run: python -m pytest tests/test_universe.py -v -s
"""

from __future__ import annotations

import logging

from detonation_scanner.engine.universe import (
    MODE_POLICIES,
    SECTORS,
    TICKER_UNIVERSE,
    UNIVERSE_CAP,
    build_universe,
    lookup,
)
from detonation_scanner.models.scan import ScanFilters, TickerMeta

# ── Logging setup ─────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s | %(levelname)-7s | %(message)s",
)
log = logging.getLogger(__name__)


def _registry(n: int) -> list[TickerMeta]:
    return [
        TickerMeta(symbol=f"T{i:03d}", sector="Technology", cap_bucket="small")
        for i in range(n)
    ]


# ══════════════════════════════════════════════════════════════════
# 1. REGISTRY + BOUNDS
# ══════════════════════════════════════════════════════════════════


class TestUniverseBounds:
    """The universe is a bounded, ordered subset of the registry."""

    def test_default_universe_is_whole_registry(self) -> None:
        universe = build_universe(ScanFilters())
        log.info("Default universe: %d tickers", len(universe))
        assert universe == list(TICKER_UNIVERSE)[:UNIVERSE_CAP]

    def test_never_exceeds_cap(self) -> None:
        """A registry bigger than the cap is truncated to the first N."""
        registry = _registry(100)
        universe = build_universe(ScanFilters(), registry=registry)
        assert len(universe) == UNIVERSE_CAP
        assert universe == registry[:UNIVERSE_CAP]

    def test_sectors_match_registry(self) -> None:
        """Every registry sector is listed once, in first-seen order."""
        log.info("Sectors: %s", SECTORS)
        assert set(SECTORS) == {m.sector for m in TICKER_UNIVERSE}
        assert len(SECTORS) == len(set(SECTORS))
        assert SECTORS[:3] == ("Technology", "Consumer", "ETF")

    def test_custom_cap(self) -> None:
        universe = build_universe(ScanFilters(), cap=5)
        assert [m.symbol for m in universe] == [m.symbol for m in TICKER_UNIVERSE[:5]]

    def test_output_is_subset_of_registry(self) -> None:
        symbols = {m.symbol for m in TICKER_UNIVERSE}
        for mode in [None, *MODE_POLICIES]:
            for m in build_universe(ScanFilters(), mode):
                assert m.symbol in symbols

    def test_empty_universe_is_valid(self) -> None:
        universe = build_universe(ScanFilters(sectors=["Nonexistent"]))
        assert universe == []


# ══════════════════════════════════════════════════════════════════
# 2. USER FILTERS
# ══════════════════════════════════════════════════════════════════


class TestUniverseFilters:
    """Cap-bucket equality and sector membership."""

    def test_sector_filter(self) -> None:
        universe = build_universe(ScanFilters(sectors=["Biotech"]))
        log.info("Biotech universe: %s", [m.symbol for m in universe])
        assert universe
        assert all(m.sector == "Biotech" for m in universe)

    def test_multiple_sectors(self) -> None:
        universe = build_universe(ScanFilters(sectors=["Crypto", "Energy"]))
        assert {m.sector for m in universe} == {"Crypto", "Energy"}

    def test_market_cap_filter(self) -> None:
        universe = build_universe(ScanFilters(market_cap="micro"))
        assert [m.symbol for m in universe] == ["FFIE", "HUDI"]

    def test_registry_order_preserved(self) -> None:
        universe = build_universe(ScanFilters(sectors=["Crypto"]))
        assert [m.symbol for m in universe] == ["RIOT", "MARA", "CLSK"]


# ══════════════════════════════════════════════════════════════════
# 3. MODE POLICIES
# ══════════════════════════════════════════════════════════════════


class TestModePolicies:
    """Mode pre-filtering happens before user filters."""

    def test_squeeze_mode_keeps_micro_and_small(self) -> None:
        universe = build_universe(ScanFilters(), "cmbm-style")
        assert universe
        assert {m.cap_bucket for m in universe} <= {"micro", "small"}

    def test_momentum_mode_sector_allowlist(self) -> None:
        universe = build_universe(ScanFilters(), "momentum")
        assert {m.sector for m in universe} <= {"Technology", "Crypto", "ETF"}

    def test_catalyst_mode_drops_large_etfs(self) -> None:
        symbols = [m.symbol for m in build_universe(ScanFilters(), "catalyst-hunter")]
        for etf in ("SPY", "QQQ", "IWM"):
            assert etf not in symbols
        assert "TQQQ" in symbols

    def test_unknown_mode_scans_everything(self) -> None:
        assert build_universe(ScanFilters(), "daily-volatility") == build_universe(
            ScanFilters()
        )

    def test_mode_and_filter_combine(self) -> None:
        """Squeeze mode plus a large-cap filter leaves nothing."""
        assert build_universe(ScanFilters(market_cap="large"), "cmbm-style") == []


class TestLookup:
    def test_lookup_known(self) -> None:
        meta = lookup("RIOT")
        assert meta is not None
        assert meta.sector == "Crypto"
        assert meta.cap_bucket == "small"

    def test_lookup_unknown(self) -> None:
        assert lookup("NOPE") is None
