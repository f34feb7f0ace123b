"""CSV export of scan results."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from detonation_scanner.models.scan import ScanResult

CSV_COLUMNS = [
    "Ticker", "Company", "Sector", "Price", "ChangePercent", "Volume",
    "MarketCap", "Float", "ExplosivePotential", "MomentumGrade", "Sentiment",
    "RiskLevel", "CatalystScore", "MomentumScore", "StructureScore",
    "SentimentScore",
]


def results_to_frame(results: list[ScanResult]) -> pd.DataFrame:
    """One row per result, columns in export order."""
    rows = [
        {
            "Ticker": r.ticker,
            "Company": r.company_name,
            "Sector": r.sector,
            "Price": f"{r.price:.2f}",
            "ChangePercent": f"{r.change_percent:.2f}",
            "Volume": int(r.volume),
            "MarketCap": int(r.market_cap),
            "Float": int(r.float_shares),
            "ExplosivePotential": r.explosive_potential,
            "MomentumGrade": r.momentum_grade,
            "Sentiment": r.sentiment,
            "RiskLevel": r.risk_level,
            "CatalystScore": r.score_breakdown.catalysts,
            "MomentumScore": r.score_breakdown.momentum,
            "StructureScore": r.score_breakdown.structure,
            "SentimentScore": r.score_breakdown.sentiment,
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_results_to_csv(results: list[ScanResult]) -> str:
    """CSV text with a header row; text fields are quoted as needed."""
    return results_to_frame(results).to_csv(index=False)


def generate_timestamped_filename(prefix: str, ext: str) -> str:
    """``{prefix}-YYYY-MM-DD-HH-MM-SS.{ext}``"""
    return f"{prefix}-{datetime.now().strftime('%Y-%m-%d-%H-%M-%S')}.{ext}"
