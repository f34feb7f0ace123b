"""Scan models — request, filters, scored results, and the records the UI keeps.

ScanRequest / ScanFilters — user input for one scan.
ScanConfig               — explicit runtime configuration for one scan.
ScanResult               — one surviving ticker, immutable once assembled.
SavedScanProfile, WatchlistItem, ScanHistoryEntry — persisted copies.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from detonation_scanner.config import settings

CapBucket = Literal["micro", "small", "mid", "large"]
MarketCapRange = Literal["micro", "small", "mid", "large", "any"]
ScanMode = Literal[
    "unified", "daily-volatility", "momentum", "cmbm-style", "catalyst-hunter",
]
DataMode = Literal["mock", "live"]
MomentumGrade = Literal["A", "B", "C", "D"]
Sentiment = Literal["Long", "Short", "Neutral"]
RiskLevel = Literal["Low", "Medium", "High"]

SCAN_MODE_LABELS: dict[str, str] = {
    "unified": "Unified Scan",
    "daily-volatility": "Daily Volatility",
    "momentum": "Momentum",
    "cmbm-style": "CMBM-Style Squeeze",
    "catalyst-hunter": "Catalyst Hunter",
}

SCAN_MODE_DESCRIPTIONS: dict[str, str] = {
    "unified": "Comprehensive market scan driven by your custom filters",
    "daily-volatility": "Full universe ranked by today's volatility",
    "momentum": "Tech, crypto and leveraged ETFs with strong directional moves",
    "cmbm-style": "Micro and small caps with squeeze potential",
    "catalyst-hunter": "News-driven names, large-cap ETFs excluded",
}


class TickerMeta(BaseModel):
    """Static registry entry: symbol, sector and cap bucket."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    sector: str
    cap_bucket: CapBucket


class ScanFilters(BaseModel):
    """User-selected filters.  Run through ``normalize_filters`` before use."""

    market_cap: MarketCapRange = "any"
    min_price: float | None = None
    max_price: float | None = None
    min_volume: float | None = None
    sectors: list[str] = Field(default_factory=list)


class ScanRequest(BaseModel):
    """What the user asked for."""

    mode: ScanMode = "unified"
    filters: ScanFilters = Field(default_factory=ScanFilters)
    notes: str | None = None


class ScanConfig(BaseModel):
    """Runtime configuration handed to the scan pipeline on every call."""

    model_config = ConfigDict(frozen=True)

    data_mode: DataMode = "mock"
    movers_top_n: int = Field(default=10, ge=0)
    universe_cap: int = Field(default=40, ge=0)
    http_timeout: float = Field(default=10.0, gt=0)
    concurrency: int = Field(default=8, ge=1)

    @classmethod
    def from_settings(cls, data_mode: str | None = None) -> ScanConfig:
        """Build a config from environment settings, optionally overriding the mode."""
        return cls(
            data_mode=(data_mode or settings.DATA_MODE),  # type: ignore[arg-type]
            movers_top_n=settings.MOVERS_TOP_N,
            universe_cap=settings.UNIVERSE_CAP,
            http_timeout=settings.HTTP_TIMEOUT_SECONDS,
            concurrency=settings.PROVIDER_CONCURRENCY,
        )


class ScoreBreakdown(BaseModel):
    """The four 0–100 sub-scores behind explosive potential."""

    model_config = ConfigDict(frozen=True)

    catalysts: int = Field(ge=0, le=100)
    momentum: int = Field(ge=0, le=100)
    structure: int = Field(ge=0, le=100)
    sentiment: int = Field(ge=0, le=100)


class ScanResult(BaseModel):
    """One ranked candidate.  Never mutated after assembly."""

    model_config = ConfigDict(frozen=True)

    ticker: str
    company_name: str
    sector: str
    scan_mode: ScanMode = "unified"

    # Market data
    price: float
    change_percent: float
    volume: float
    market_cap: float
    float_shares: float

    # Derived labels
    momentum_grade: MomentumGrade
    sentiment: Sentiment
    risk_level: RiskLevel
    explosive_potential: int = Field(ge=0, le=100)
    score_breakdown: ScoreBreakdown

    # Narrative
    catalyst_summary: str
    risk_notes: str = ""
    why_it_might_move: str = ""
    tags: list[str] = Field(default_factory=list)

    # Primary news (live mode only)
    primary_news_headline: str | None = None
    primary_news_url: str | None = None
    primary_news_datetime: str | None = None


class SavedScanProfile(BaseModel):
    """A named scan configuration for quick reuse."""

    id: str
    name: str
    description: str | None = None
    mode: ScanMode = "unified"
    filters: ScanFilters = Field(default_factory=ScanFilters)
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)


class WatchlistItem(BaseModel):
    """A snapshot copy of a scan result the user chose to track."""

    id: str
    from_scan_mode: ScanMode = "unified"
    added_at: datetime = Field(default_factory=datetime.now)
    result: ScanResult


class ScanHistoryEntry(BaseModel):
    """Log line for one completed scan."""

    id: str
    run_at: datetime = Field(default_factory=datetime.now)
    mode: ScanMode = "unified"
    data_mode: DataMode = "mock"
    filters_summary: str = ""
    result_count: int = 0
