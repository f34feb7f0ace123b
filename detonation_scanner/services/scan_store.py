"""ScanStore — saved scan profiles, the watchlist, and scan history in DuckDB.

Usage (from main.py):
    store = ScanStore()
    store.save_profile(name="Squeeze", mode="cmbm-style", filters=filters)
    store.add_to_watchlist(result, from_scan_mode="cmbm-style")
    store.record_history(mode="unified", data_mode="mock", ...)
"""

from __future__ import annotations

import uuid
from datetime import datetime

from detonation_scanner.database import get_db
from detonation_scanner.models.scan import (
    SavedScanProfile,
    ScanFilters,
    ScanHistoryEntry,
    ScanResult,
    WatchlistItem,
)
from detonation_scanner.utils.logger import logger


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class ScanStore:
    """CRUD over the three scanner tables."""

    # ── Saved profiles ────────────────────────────────────────────

    def save_profile(
        self,
        name: str,
        mode: str = "unified",
        filters: ScanFilters | None = None,
        description: str | None = None,
        notes: str | None = None,
    ) -> SavedScanProfile:
        profile = SavedScanProfile(
            id=_new_id(),
            name=name,
            description=description,
            mode=mode,  # type: ignore[arg-type]
            filters=filters or ScanFilters(),
            notes=notes,
            created_at=datetime.now(),
        )
        db = get_db()
        db.execute(
            """
            INSERT INTO saved_scans
                (id, name, description, mode, filters_json, notes, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [
                profile.id, profile.name, profile.description, profile.mode,
                profile.filters.model_dump_json(), profile.notes, profile.created_at,
            ],
        )
        db.commit()
        logger.info("[Store] Saved profile '%s' (%s)", profile.name, profile.id)
        return profile

    def list_profiles(self) -> list[SavedScanProfile]:
        """All saved profiles, newest first."""
        rows = get_db().execute(
            """
            SELECT id, name, description, mode, filters_json, notes, created_at
            FROM saved_scans
            ORDER BY created_at DESC
            """
        ).fetchall()
        return [
            SavedScanProfile(
                id=r[0],
                name=r[1],
                description=r[2],
                mode=r[3],
                filters=ScanFilters.model_validate_json(r[4]),
                notes=r[5],
                created_at=r[6],
            )
            for r in rows
        ]

    def delete_profile(self, profile_id: str) -> bool:
        db = get_db()
        existing = db.execute(
            "SELECT id FROM saved_scans WHERE id = ?", [profile_id],
        ).fetchone()
        if not existing:
            return False
        db.execute("DELETE FROM saved_scans WHERE id = ?", [profile_id])
        db.commit()
        logger.info("[Store] Deleted profile %s", profile_id)
        return True

    # ── Watchlist ─────────────────────────────────────────────────

    def add_to_watchlist(
        self, result: ScanResult, from_scan_mode: str | None = None,
    ) -> WatchlistItem | None:
        """Store a copy of ``result``.  Returns None if the ticker is already on it."""
        db = get_db()
        existing = db.execute(
            "SELECT id FROM watchlist WHERE ticker = ?", [result.ticker],
        ).fetchone()
        if existing:
            logger.info("[Store] %s already on watchlist", result.ticker)
            return None

        item = WatchlistItem(
            id=_new_id(),
            from_scan_mode=from_scan_mode or result.scan_mode,  # type: ignore[arg-type]
            added_at=datetime.now(),
            result=result,
        )
        db.execute(
            """
            INSERT INTO watchlist (id, ticker, from_scan_mode, added_at, result_json)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                item.id, result.ticker, item.from_scan_mode, item.added_at,
                result.model_dump_json(),
            ],
        )
        db.commit()
        logger.info("[Store] Added %s to watchlist", result.ticker)
        return item

    def list_watchlist(self) -> list[WatchlistItem]:
        """Watchlist entries, most recently added first."""
        rows = get_db().execute(
            """
            SELECT id, from_scan_mode, added_at, result_json
            FROM watchlist
            ORDER BY added_at DESC
            """
        ).fetchall()
        return [
            WatchlistItem(
                id=r[0],
                from_scan_mode=r[1],
                added_at=r[2],
                result=ScanResult.model_validate_json(r[3]),
            )
            for r in rows
        ]

    def remove_from_watchlist(self, item_id: str) -> bool:
        db = get_db()
        existing = db.execute(
            "SELECT id FROM watchlist WHERE id = ?", [item_id],
        ).fetchone()
        if not existing:
            return False
        db.execute("DELETE FROM watchlist WHERE id = ?", [item_id])
        db.commit()
        logger.info("[Store] Removed watchlist item %s", item_id)
        return True

    def clear_watchlist(self) -> None:
        db = get_db()
        db.execute("DELETE FROM watchlist")
        db.commit()
        logger.info("[Store] Watchlist cleared")

    # ── History ───────────────────────────────────────────────────

    def record_history(
        self,
        mode: str,
        data_mode: str,
        filters_summary: str,
        result_count: int,
    ) -> ScanHistoryEntry:
        entry = ScanHistoryEntry(
            id=_new_id(),
            run_at=datetime.now(),
            mode=mode,  # type: ignore[arg-type]
            data_mode=data_mode,  # type: ignore[arg-type]
            filters_summary=filters_summary,
            result_count=result_count,
        )
        db = get_db()
        db.execute(
            """
            INSERT INTO scan_history
                (id, run_at, mode, data_mode, filters_summary, result_count)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                entry.id, entry.run_at, entry.mode, entry.data_mode,
                entry.filters_summary, entry.result_count,
            ],
        )
        db.commit()
        return entry

    def list_history(self, limit: int = 50) -> list[ScanHistoryEntry]:
        """Most recent scans first."""
        rows = get_db().execute(
            f"""
            SELECT id, run_at, mode, data_mode, filters_summary, result_count
            FROM scan_history
            ORDER BY run_at DESC
            LIMIT {int(limit)}
            """
        ).fetchall()
        return [
            ScanHistoryEntry(
                id=r[0],
                run_at=r[1],
                mode=r[2],
                data_mode=r[3],
                filters_summary=r[4] or "",
                result_count=r[5] or 0,
            )
            for r in rows
        ]

    def clear_history(self) -> None:
        db = get_db()
        db.execute("DELETE FROM scan_history")
        db.commit()
        logger.info("[Store] Scan history cleared")
