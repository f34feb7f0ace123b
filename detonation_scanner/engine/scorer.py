"""Scorer — explosive-potential heuristic from price change and volume.

Pure functions, deterministic given their inputs.  This is an illustrative
heuristic, not a validated trading signal; no technical indicators are
computed.

Composite weighting (canonical):
    momentum 0.4 · structure 0.3 · catalysts 0.2 · sentiment 0.1
computed on the rounded sub-scores, +10 for cmbm-style scans,
clamped to [0, 100].
"""

from __future__ import annotations

import math

from detonation_scanner.models.scan import (
    CapBucket,
    MomentumGrade,
    RiskLevel,
    ScoreBreakdown,
    Sentiment,
)

WEIGHTS = {
    "momentum": 0.4,
    "structure": 0.3,
    "catalysts": 0.2,
    "sentiment": 0.1,
}

HIGH_VOLUME_THRESHOLD = 1_000_000
LOW_VOLUME_FACTOR = 0.7

# Mode-specific adjustments
MOMENTUM_STRUCTURE_BONUS = 5
SQUEEZE_STRUCTURE_BONUS = 10
CATALYST_BONUS = 15
SQUEEZE_POTENTIAL_BONUS = 10

SQUEEZE_MODE = "cmbm-style"
MOMENTUM_MODE = "momentum"
CATALYST_MODE = "catalyst-hunter"


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side (2.5 → 3), like a spreadsheet."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def score(
    change_percent: float,
    volume: float | None,
    mode: str | None = None,
) -> ScoreBreakdown:
    """Derive the four sub-scores for one ticker."""
    abs_change = abs(change_percent)
    volume_factor = 1.0 if volume is not None and volume > HIGH_VOLUME_THRESHOLD else LOW_VOLUME_FACTOR

    momentum = clamp(abs_change * 5 * volume_factor, 0, 100)

    structure_bonus = MOMENTUM_STRUCTURE_BONUS if mode == MOMENTUM_MODE else 0
    structure = clamp(momentum + structure_bonus, 30, 95)
    if mode == SQUEEZE_MODE:
        structure = min(100, structure + SQUEEZE_STRUCTURE_BONUS)

    catalysts = clamp(momentum - 5, 10, 90)
    if mode == CATALYST_MODE:
        catalysts = min(100, catalysts + CATALYST_BONUS)

    raw_sentiment = 60 + abs_change if change_percent >= 0 else 40 - abs_change

    return ScoreBreakdown(
        catalysts=round_half_up(catalysts),
        momentum=round_half_up(momentum),
        structure=round_half_up(structure),
        sentiment=int(clamp(round_half_up(raw_sentiment), 0, 100)),
    )


def explosive_potential(breakdown: ScoreBreakdown, mode: str | None = None) -> int:
    """Weighted composite of the sub-scores, always within [0, 100]."""
    total = (
        breakdown.momentum * WEIGHTS["momentum"]
        + breakdown.structure * WEIGHTS["structure"]
        + breakdown.catalysts * WEIGHTS["catalysts"]
        + breakdown.sentiment * WEIGHTS["sentiment"]
    )
    if mode == SQUEEZE_MODE:
        total += SQUEEZE_POTENTIAL_BONUS
    return int(clamp(round_half_up(total), 0, 100))


def momentum_grade(change_percent: float) -> MomentumGrade:
    abs_change = abs(change_percent)
    if abs_change > 15:
        return "A"
    if abs_change > 8:
        return "B"
    if abs_change > 3:
        return "C"
    return "D"


def sentiment_label(change_percent: float) -> Sentiment:
    return "Long" if change_percent >= 0 else "Short"


def risk_level(change_percent: float, mode: str | None = None) -> RiskLevel:
    """High above 12%, Medium above 5%; squeeze scans never report Low."""
    abs_change = abs(change_percent)
    if abs_change > 12:
        level: RiskLevel = "High"
    elif abs_change > 5:
        level = "Medium"
    else:
        level = "Low"

    if mode == SQUEEZE_MODE and level == "Low":
        level = "Medium"
    return level


def derive_tags(
    change_percent: float,
    volume: float | None,
    sector: str,
    cap_bucket: CapBucket,
    mode: str | None = None,
) -> list[str]:
    """Market/mode tags for a result, deduplicated in insertion order."""
    abs_change = abs(change_percent)
    tags: list[str] = []

    if cap_bucket in ("micro", "small"):
        tags.append("Microcap")
    if sector == "Crypto":
        tags.append("Crypto-linked")
    if sector == "Technology":
        tags.append("Tech")
    if abs_change > 10:
        tags.append("High Volatility")
    if abs_change > 20:
        tags.append("Parabolic Risk")
    if volume and volume > 5_000_000:
        tags.append("High Volume")

    if mode == SQUEEZE_MODE:
        tags.append("CMBM-Style Candidate")
    elif mode == MOMENTUM_MODE:
        tags.append("Momentum Scan")
    elif mode == CATALYST_MODE:
        tags.append("Catalyst Focus")

    return list(dict.fromkeys(tags))
