"""Tests for ScanStore — profiles, watchlist and history on a temp DuckDB.

Run: python -m pytest tests/test_scan_store.py -v -s
"""

from __future__ import annotations

import logging

import pytest

from detonation_scanner.models.scan import ScanFilters
from detonation_scanner.services.scan_store import ScanStore

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s | %(levelname)-7s | %(message)s",
)
log = logging.getLogger(__name__)


@pytest.fixture
def store(clean_db) -> ScanStore:
    return ScanStore()


# ══════════════════════════════════════════════════════════════════
# 1. PROFILES
# ══════════════════════════════════════════════════════════════════


class TestProfiles:
    def test_save_and_list(self, store: ScanStore) -> None:
        filters = ScanFilters(market_cap="small", min_price=5, sectors=["Biotech"])
        saved = store.save_profile(
            name="Biotech squeeze", mode="cmbm-style", filters=filters,
            description="Small biotech", notes="check FDA calendar",
        )
        log.info("Saved profile: %s", saved)

        profiles = store.list_profiles()
        assert len(profiles) == 1
        p = profiles[0]
        assert p.id == saved.id
        assert p.name == "Biotech squeeze"
        assert p.mode == "cmbm-style"
        assert p.filters == filters
        assert p.notes == "check FDA calendar"

    def test_newest_first(self, store: ScanStore) -> None:
        store.save_profile(name="first")
        store.save_profile(name="second")
        assert [p.name for p in store.list_profiles()] == ["second", "first"]

    def test_delete(self, store: ScanStore) -> None:
        saved = store.save_profile(name="temp")
        assert store.delete_profile(saved.id) is True
        assert store.list_profiles() == []
        assert store.delete_profile(saved.id) is False


# ══════════════════════════════════════════════════════════════════
# 2. WATCHLIST
# ══════════════════════════════════════════════════════════════════


class TestWatchlist:
    def test_add_and_list(self, store: ScanStore, make_result) -> None:
        result = make_result("RIOT", price=12.5, sector="Crypto", scan_mode="momentum")
        item = store.add_to_watchlist(result)
        assert item is not None
        assert item.from_scan_mode == "momentum"

        items = store.list_watchlist()
        assert len(items) == 1
        assert items[0].result == result
        assert items[0].id == item.id

    def test_explicit_scan_mode(self, store: ScanStore, make_result) -> None:
        item = store.add_to_watchlist(make_result("RIOT"), from_scan_mode="cmbm-style")
        assert item is not None
        assert store.list_watchlist()[0].from_scan_mode == "cmbm-style"

    def test_duplicate_ticker_skipped(self, store: ScanStore, make_result) -> None:
        assert store.add_to_watchlist(make_result("RIOT")) is not None
        assert store.add_to_watchlist(make_result("RIOT", price=99)) is None
        items = store.list_watchlist()
        assert len(items) == 1
        assert items[0].result.price == 10.0

    def test_remove_and_clear(self, store: ScanStore, make_result) -> None:
        first = store.add_to_watchlist(make_result("AAA"))
        store.add_to_watchlist(make_result("BBB"))
        assert first is not None

        assert store.remove_from_watchlist(first.id) is True
        assert store.remove_from_watchlist(first.id) is False
        assert [i.result.ticker for i in store.list_watchlist()] == ["BBB"]

        store.clear_watchlist()
        assert store.list_watchlist() == []


# ══════════════════════════════════════════════════════════════════
# 3. HISTORY
# ══════════════════════════════════════════════════════════════════


class TestHistory:
    def test_record_and_list(self, store: ScanStore) -> None:
        entry = store.record_history(
            mode="unified", data_mode="mock",
            filters_summary="Cap: Any | Price: Any | Vol: Any | Sectors: All",
            result_count=12,
        )
        history = store.list_history()
        assert len(history) == 1
        assert history[0].id == entry.id
        assert history[0].result_count == 12
        assert history[0].data_mode == "mock"

    def test_newest_first_with_limit(self, store: ScanStore) -> None:
        for n in range(5):
            store.record_history("unified", "mock", "", n)
        history = store.list_history(limit=3)
        assert [h.result_count for h in history] == [4, 3, 2]

    def test_clear(self, store: ScanStore) -> None:
        store.record_history("momentum", "live", "", 0)
        store.clear_history()
        assert store.list_history() == []
