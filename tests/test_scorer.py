"""Tests for the explosive-potential scorer and label thresholds.

Run: python -m pytest tests/test_scorer.py -v -s
"""

from __future__ import annotations

import logging

import pytest

from detonation_scanner.engine import scorer

logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s | %(levelname)-7s | %(message)s",
)
log = logging.getLogger(__name__)

MODES = [None, "unified", "daily-volatility", "momentum", "cmbm-style", "catalyst-hunter"]


# ══════════════════════════════════════════════════════════════════
# 1. SUB-SCORES
# ══════════════════════════════════════════════════════════════════


class TestScore:
    """Sub-score formulas, clamps and mode bonuses."""

    def test_flat_move_sentiment_is_60(self) -> None:
        for mode in MODES:
            assert scorer.score(0, 2_000_000, mode).sentiment == 60

    def test_flat_move_floors(self) -> None:
        b = scorer.score(0, 2_000_000)
        log.info("Flat breakdown: %s", b)
        assert b.momentum == 0
        assert b.structure == 30
        assert b.catalysts == 10

    def test_ten_percent_high_volume(self) -> None:
        b = scorer.score(10, 2_000_000)
        assert (b.momentum, b.structure, b.catalysts, b.sentiment) == (50, 50, 45, 70)

    def test_low_volume_dampens_momentum(self) -> None:
        assert scorer.score(10, 500_000).momentum == 35
        assert scorer.score(10, None).momentum == 35

    def test_volume_threshold_is_exclusive(self) -> None:
        assert scorer.score(10, 1_000_000).momentum == 35

    def test_negative_move(self) -> None:
        b = scorer.score(-8, 2_000_000)
        assert b.momentum == 40
        assert b.sentiment == 32

    def test_momentum_mode_structure_bonus(self) -> None:
        assert scorer.score(10, 2_000_000, "momentum").structure == 55

    def test_squeeze_mode_structure_bonus(self) -> None:
        assert scorer.score(2, 2_000_000, "cmbm-style").structure == 40
        assert scorer.score(50, 2_000_000, "cmbm-style").structure == 100

    def test_catalyst_mode_bonus(self) -> None:
        assert scorer.score(10, 2_000_000, "catalyst-hunter").catalysts == 60
        assert scorer.score(50, 2_000_000, "catalyst-hunter").catalysts == 100

    def test_clamps_at_extremes(self) -> None:
        b = scorer.score(80, 5_000_000)
        assert b.momentum == 100
        assert b.structure == 95
        assert b.catalysts == 90
        assert b.sentiment == 100
        assert scorer.score(-80, 5_000_000).sentiment == 0

    def test_momentum_monotonic_in_abs_change(self) -> None:
        previous = -1
        for tenths in range(0, 300):
            m = scorer.score(tenths / 10, 2_000_000).momentum
            assert m >= previous
            previous = m
        assert previous == 100


# ══════════════════════════════════════════════════════════════════
# 2. COMPOSITE
# ══════════════════════════════════════════════════════════════════


class TestExplosivePotential:
    def test_flat_composite(self) -> None:
        assert scorer.explosive_potential(scorer.score(0, 2_000_000)) == 17

    def test_ten_percent_composite(self) -> None:
        assert scorer.explosive_potential(scorer.score(10, 2_000_000)) == 51

    def test_squeeze_bonus(self) -> None:
        b = scorer.score(2, 2_000_000, "cmbm-style")
        assert scorer.explosive_potential(b, "cmbm-style") == 34

    def test_squeeze_bonus_clamped(self) -> None:
        b = scorer.score(50, 2_000_000, "cmbm-style")
        assert scorer.explosive_potential(b, "cmbm-style") == 100

    @pytest.mark.parametrize("mode", MODES)
    def test_always_within_bounds(self, mode) -> None:
        for change in (-500, -40, -12.5, -3, 0, 0.5, 7.25, 19.99, 60, 1_000):
            for volume in (None, 0, 999_999, 50_000_000):
                p = scorer.explosive_potential(scorer.score(change, volume, mode), mode)
                assert 0 <= p <= 100


class TestRounding:
    def test_half_up(self) -> None:
        assert scorer.round_half_up(2.5) == 3
        assert scorer.round_half_up(37.5) == 38
        assert scorer.round_half_up(2.4999) == 2
        assert scorer.round_half_up(0) == 0


# ══════════════════════════════════════════════════════════════════
# 3. LABELS + TAGS
# ══════════════════════════════════════════════════════════════════


class TestLabels:
    def test_momentum_grade_thresholds(self) -> None:
        assert scorer.momentum_grade(15.1) == "A"
        assert scorer.momentum_grade(15) == "B"
        assert scorer.momentum_grade(-9) == "B"
        assert scorer.momentum_grade(8) == "C"
        assert scorer.momentum_grade(3.01) == "C"
        assert scorer.momentum_grade(3) == "D"

    def test_sentiment_by_sign(self) -> None:
        assert scorer.sentiment_label(0) == "Long"
        assert scorer.sentiment_label(4.2) == "Long"
        assert scorer.sentiment_label(-0.1) == "Short"

    def test_risk_levels(self) -> None:
        assert scorer.risk_level(12.5) == "High"
        assert scorer.risk_level(-13) == "High"
        assert scorer.risk_level(12) == "Medium"
        assert scorer.risk_level(5.5) == "Medium"
        assert scorer.risk_level(5) == "Low"

    def test_squeeze_risk_floor(self) -> None:
        assert scorer.risk_level(1, "cmbm-style") == "Medium"
        assert scorer.risk_level(20, "cmbm-style") == "High"


class TestDeriveTags:
    def test_all_market_tags(self) -> None:
        tags = scorer.derive_tags(25, 6_000_000, "Crypto", "small", "cmbm-style")
        log.info("Tags: %s", tags)
        assert tags == [
            "Microcap", "Crypto-linked", "High Volatility", "Parabolic Risk",
            "High Volume", "CMBM-Style Candidate",
        ]

    def test_quiet_large_cap(self) -> None:
        assert scorer.derive_tags(1, 500_000, "Consumer", "large") == []

    def test_mode_tags(self) -> None:
        assert scorer.derive_tags(1, None, "Technology", "large", "momentum") == [
            "Tech", "Momentum Scan",
        ]
        assert scorer.derive_tags(1, None, "Biotech", "mid", "catalyst-hunter") == [
            "Catalyst Focus",
        ]
