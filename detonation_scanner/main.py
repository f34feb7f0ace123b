"""FastAPI entry point — scan, universe, profiles, watchlist, history, export."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from detonation_scanner.collectors.registry import build_registry
from detonation_scanner.config import settings
from detonation_scanner.engine.filters import build_filters_summary, normalize_filters
from detonation_scanner.engine.universe import SECTORS, TICKER_UNIVERSE
from detonation_scanner.models.scan import (
    SCAN_MODE_DESCRIPTIONS,
    SCAN_MODE_LABELS,
    DataMode,
    ScanConfig,
    ScanFilters,
    ScanMode,
    ScanRequest,
    ScanResult,
)
from detonation_scanner.services.export import (
    export_results_to_csv,
    generate_timestamped_filename,
)
from detonation_scanner.services.scan_service import ScanError, ScanService
from detonation_scanner.services.scan_store import ScanStore
from detonation_scanner.utils.logger import enable_file_logging, logger

app = FastAPI(
    title="Detonation Scanner",
    description="Market scanner ranking tickers by explosive potential",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

SCAN_FAILED_MESSAGE = "Scan failed. Check that market data providers are configured."
NO_RESULTS_MESSAGE = "No candidates matched. Try widening your filters."


# ── Models ──────────────────────────────────────────────────────────
class ProfileCreateRequest(BaseModel):
    name: str
    description: str | None = None
    mode: ScanMode = "unified"
    filters: ScanFilters = Field(default_factory=ScanFilters)
    notes: str | None = None


class WatchlistAddRequest(BaseModel):
    result: ScanResult
    from_scan_mode: ScanMode | None = None


# ── Singleton services ──────────────────────────────────────────────
_store = ScanStore()


@app.on_event("startup")
async def _start_file_logging() -> None:
    """Write per-run log files once the server boots."""
    if settings.LOG_TO_FILE:
        run_log = enable_file_logging(settings.LOGS_DIR)
        logger.info("[Boot] Logging to %s", run_log)


# ══════════════════════════════════════════════════════════════════════
# HEALTH
# ══════════════════════════════════════════════════════════════════════


@app.get("/api/health")
async def health() -> dict:
    """API status plus which vendor credentials are present."""
    config = ScanConfig.from_settings()
    return {
        "api": "ok",
        "providers": settings.get_provider_status(),
        "registry": build_registry(config).describe(),
    }


# ══════════════════════════════════════════════════════════════════════
# SCAN
# ══════════════════════════════════════════════════════════════════════


@app.post("/api/scan")
async def run_scan(
    req: ScanRequest,
    data_mode: DataMode | None = Query(None, description="Override DATA_MODE"),
) -> dict:
    """Run one scan and record it in history."""
    config = ScanConfig.from_settings(data_mode)
    filters = normalize_filters(req.filters)
    summary = build_filters_summary(filters)
    logger.info("API: scan mode=%s data_mode=%s [%s]", req.mode, config.data_mode, summary)

    try:
        results = await ScanService().run_scan(req, config)
    except ScanError as e:
        logger.error("Scan failed: %s", e)
        raise HTTPException(status_code=503, detail=SCAN_FAILED_MESSAGE) from e

    _store.record_history(
        mode=req.mode,
        data_mode=config.data_mode,
        filters_summary=summary,
        result_count=len(results),
    )
    return {
        "results": [r.model_dump() for r in results],
        "count": len(results),
        "message": None if results else NO_RESULTS_MESSAGE,
        "filters_summary": summary,
        "data_mode": config.data_mode,
    }


@app.get("/api/universe")
async def get_universe() -> dict:
    """The static ticker registry and the sectors it covers."""
    return {
        "tickers": [m.model_dump() for m in TICKER_UNIVERSE],
        "count": len(TICKER_UNIVERSE),
        "sectors": list(SECTORS),
    }


@app.get("/api/modes")
async def get_modes() -> dict:
    return {
        "modes": [
            {
                "id": mode,
                "label": label,
                "description": SCAN_MODE_DESCRIPTIONS.get(mode, ""),
            }
            for mode, label in SCAN_MODE_LABELS.items()
        ]
    }


# ══════════════════════════════════════════════════════════════════════
# SAVED PROFILES
# ══════════════════════════════════════════════════════════════════════


@app.get("/api/profiles")
async def list_profiles() -> dict:
    return {"profiles": [p.model_dump(mode="json") for p in _store.list_profiles()]}


@app.post("/api/profiles")
async def create_profile(req: ProfileCreateRequest) -> dict:
    name = req.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Profile name is required")
    profile = _store.save_profile(
        name=name,
        mode=req.mode,
        filters=normalize_filters(req.filters),
        description=req.description,
        notes=req.notes,
    )
    return profile.model_dump(mode="json")


@app.delete("/api/profiles/{profile_id}")
async def delete_profile(profile_id: str) -> dict:
    if not _store.delete_profile(profile_id):
        raise HTTPException(status_code=404, detail=f"No profile {profile_id}")
    return {"status": "deleted", "id": profile_id}


# ══════════════════════════════════════════════════════════════════════
# WATCHLIST
# ══════════════════════════════════════════════════════════════════════


@app.get("/api/watchlist")
async def get_watchlist() -> dict:
    items = _store.list_watchlist()
    return {"items": [i.model_dump(mode="json") for i in items], "count": len(items)}


@app.post("/api/watchlist")
async def add_to_watchlist(req: WatchlistAddRequest) -> dict:
    item = _store.add_to_watchlist(req.result, req.from_scan_mode)
    if item is None:
        return {"status": "already_exists", "ticker": req.result.ticker}
    return {"status": "added", "item": item.model_dump(mode="json")}


@app.delete("/api/watchlist/{item_id}")
async def remove_from_watchlist(item_id: str) -> dict:
    if not _store.remove_from_watchlist(item_id):
        raise HTTPException(status_code=404, detail=f"No watchlist item {item_id}")
    return {"status": "removed", "id": item_id}


@app.delete("/api/watchlist")
async def clear_watchlist() -> dict:
    _store.clear_watchlist()
    return {"status": "cleared"}


# ══════════════════════════════════════════════════════════════════════
# HISTORY
# ══════════════════════════════════════════════════════════════════════


@app.get("/api/history")
async def get_history(limit: int = Query(50, ge=1, le=500)) -> dict:
    entries = _store.list_history(limit=limit)
    return {"history": [e.model_dump(mode="json") for e in entries]}


@app.delete("/api/history")
async def clear_history() -> dict:
    _store.clear_history()
    return {"status": "cleared"}


# ══════════════════════════════════════════════════════════════════════
# EXPORT
# ══════════════════════════════════════════════════════════════════════


@app.post("/api/export/csv")
async def export_csv(results: list[ScanResult]) -> Response:
    """Download results as CSV."""
    filename = generate_timestamped_filename("detonation-scan", "csv")
    return Response(
        content=export_results_to_csv(results),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
