import pytest

from detonation_scanner.config import settings
from detonation_scanner.database import close_db, get_db
from detonation_scanner.models.scan import ScanResult, ScoreBreakdown


@pytest.fixture(autouse=True, scope="session")
def use_test_db(tmp_path_factory):
    # Route all database operations in tests to a temporary DuckDB file
    # This prevents 'database is locked' errors when the live server is running
    temp_dir = tmp_path_factory.mktemp("test_db")
    test_db_path = temp_dir / "test_detonation_scanner.duckdb"

    # Overwrite the global settings DB_PATH
    close_db()
    settings.DB_PATH = test_db_path

    # Keep any log files out of the repo's logs/ directory
    settings.LOGS_DIR = temp_dir / "logs"
    settings.LOG_TO_FILE = False

    # Let tests run
    yield

    close_db()


@pytest.fixture
def clean_db():
    """Empty every scanner table before the test."""
    db = get_db()
    for table in ("saved_scans", "watchlist", "scan_history"):
        db.execute(f"DELETE FROM {table}")
    db.commit()
    return db


def _make_result(
    ticker: str = "TEST",
    price: float = 10.0,
    change_percent: float = 5.0,
    volume: float = 2_000_000,
    market_cap: float = 1_000_000_000,
    sector: str = "Technology",
    explosive_potential: int = 50,
    company_name: str | None = None,
    scan_mode: str = "unified",
) -> ScanResult:
    return ScanResult(
        ticker=ticker,
        company_name=company_name or ticker,
        sector=sector,
        scan_mode=scan_mode,
        price=price,
        change_percent=change_percent,
        volume=volume,
        market_cap=market_cap,
        float_shares=market_cap / 100,
        momentum_grade="C",
        sentiment="Long" if change_percent >= 0 else "Short",
        risk_level="Low",
        explosive_potential=explosive_potential,
        score_breakdown=ScoreBreakdown(
            catalysts=20, momentum=25, structure=30, sentiment=65,
        ),
        catalyst_summary="Latest news: test headline (2025-02-20 12:30 UTC)",
        tags=["Tech"],
    )


@pytest.fixture
def make_result():
    """Factory for ScanResult records with sensible defaults."""
    return _make_result
