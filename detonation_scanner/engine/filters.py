"""Filter utilities — normalize user filters and apply them to scan results."""

from __future__ import annotations

from detonation_scanner.models.scan import CapBucket, ScanFilters, ScanResult

MICRO_CAP_MAX = 300_000_000
SMALL_CAP_MAX = 2_000_000_000
MID_CAP_MAX = 10_000_000_000


def normalize_filters(filters: ScanFilters | None) -> ScanFilters:
    """Fill defaults and swap an inverted price range.

    Guarantees ``min_price <= max_price`` whenever both are present.
    """
    if filters is None:
        return ScanFilters()

    min_price, max_price = filters.min_price, filters.max_price
    if min_price is not None and max_price is not None and min_price > max_price:
        min_price, max_price = max_price, min_price

    return ScanFilters(
        market_cap=filters.market_cap or "any",
        min_price=min_price,
        max_price=max_price,
        min_volume=filters.min_volume,
        sectors=list(filters.sectors or []),
    )


def market_cap_bucket(market_cap: float) -> CapBucket:
    if market_cap < MICRO_CAP_MAX:
        return "micro"
    if market_cap < SMALL_CAP_MAX:
        return "small"
    if market_cap < MID_CAP_MAX:
        return "mid"
    return "large"


def result_passes_filters(result: ScanResult, filters: ScanFilters) -> bool:
    """Cap bucket, price range (inclusive), min volume, then sector."""
    f = normalize_filters(filters)

    if f.market_cap != "any" and market_cap_bucket(result.market_cap) != f.market_cap:
        return False
    if f.min_price is not None and result.price < f.min_price:
        return False
    if f.max_price is not None and result.price > f.max_price:
        return False
    if f.min_volume is not None and result.volume < f.min_volume:
        return False
    if f.sectors and result.sector not in f.sectors:
        return False
    return True


def apply_filters(results: list[ScanResult], filters: ScanFilters) -> list[ScanResult]:
    """Keep the results that pass every active filter, order preserved."""
    return [r for r in results if result_passes_filters(r, filters)]


def build_filters_summary(filters: ScanFilters) -> str:
    """Human-readable one-liner for history entries and logs."""
    f = normalize_filters(filters)

    cap_label = "Any" if f.market_cap == "any" else f.market_cap.capitalize()

    if f.min_price is None and f.max_price is None:
        price_label = "Any"
    elif f.min_price is not None and f.max_price is not None:
        price_label = f"${_fmt_num(f.min_price)}–${_fmt_num(f.max_price)}"
    elif f.min_price is not None:
        price_label = f"≥${_fmt_num(f.min_price)}"
    else:
        price_label = f"≤${_fmt_num(f.max_price)}"  # type: ignore[arg-type]

    if f.min_volume is None:
        vol_label = "Any"
    elif f.min_volume >= 1_000_000:
        vol_label = f"{f.min_volume / 1_000_000:.1f}M+"
    else:
        vol_label = f"{_fmt_num(f.min_volume)}+"

    sectors_label = ", ".join(f.sectors) if f.sectors else "All"

    return (
        f"Cap: {cap_label} | Price: {price_label} | "
        f"Vol: {vol_label} | Sectors: {sectors_label}"
    )


def _fmt_num(value: float) -> str:
    """50.0 → '50', 12.5 → '12.5'."""
    return str(int(value)) if float(value).is_integer() else str(value)
