"""Application configuration — environment variables and defaults.

All vendor credentials and scan tuning knobs live HERE.
The scan pipeline never reads these directly: callers build a
``ScanConfig`` (see ``detonation_scanner.models.scan``) and pass it in.
"""

import os
from pathlib import Path
from typing import Any


class Settings:
    """Central configuration pulled from environment with safe defaults."""

    # Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    DATA_DIR: Path = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))
    LOGS_DIR: Path = Path(os.getenv("LOGS_DIR", str(BASE_DIR / "logs")))

    # Database (saved scans, watchlist, history)
    DB_PATH: Path = DATA_DIR / "detonation_scanner.duckdb"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Which provider registry to use: "mock" | "live"
    DATA_MODE: str = os.getenv("DATA_MODE", "mock").lower()

    # Logging: console level, and whether the server writes per-run log files
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_TO_FILE: bool = os.getenv("LOG_TO_FILE", "true").lower() in ("1", "true", "yes")

    # ── Vendor credentials ─────────────────────────────────────────
    FINNHUB_API_KEY: str = os.getenv("FINNHUB_API_KEY", "")
    BENZINGA_API_KEY: str = os.getenv("BENZINGA_API_KEY", "")
    MASSIVE_API_KEY: str = os.getenv("MASSIVE_API_KEY", "")
    MASSIVE_API_BASE_URL: str = os.getenv("MASSIVE_API_BASE_URL", "")

    # ── Scan tuning ────────────────────────────────────────────────
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
    PROVIDER_CONCURRENCY: int = int(os.getenv("PROVIDER_CONCURRENCY", "8"))
    MOVERS_TOP_N: int = int(os.getenv("MOVERS_TOP_N", "10"))
    UNIVERSE_CAP: int = int(os.getenv("UNIVERSE_CAP", "40"))

    def __init__(self) -> None:
        """Ensure the data directory exists.  LOGS_DIR is created when file logging starts."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)

    @property
    def MASSIVE_BASE_URL(self) -> str:
        """Computed: Massive base URL without a trailing slash."""
        return self.MASSIVE_API_BASE_URL.rstrip("/")

    def get_provider_status(self) -> dict[str, Any]:
        """Return which vendor credentials are present (never the values)."""
        return {
            "data_mode": self.DATA_MODE,
            "finnhub": bool(self.FINNHUB_API_KEY),
            "benzinga": bool(self.BENZINGA_API_KEY),
            "massive": bool(self.MASSIVE_API_KEY and self.MASSIVE_API_BASE_URL),
        }


settings = Settings()
