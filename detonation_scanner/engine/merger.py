"""Merger — collapses several provider records for one ticker into one.

Quotes:        most recent complete quote wins; missing volume is
               borrowed from the next most recent complete quote.
Fundamentals:  first non-null value wins, field by field, in input order.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from detonation_scanner.models.market_data import (
    FundamentalSnapshot,
    RawNewsItem,
    RawQuote,
)

T = TypeVar("T", RawQuote, RawNewsItem, FundamentalSnapshot)

_FUNDAMENTAL_FIELDS = ("market_cap", "float_shares", "sector")


def merge_quotes(quotes: list[RawQuote]) -> RawQuote | None:
    """Merge every quote for a single ticker.

    Returns None only for empty input.  When no quote is complete the
    first raw quote comes back as-is; callers must treat a null price or
    previous close as "insufficient data" and skip the ticker.
    """
    if not quotes:
        return None

    complete = [q for q in quotes if q.is_complete]
    if not complete:
        return quotes[0]

    # Stable sort: equal timestamps keep provider registration order
    ordered = sorted(complete, key=lambda q: q.timestamp or 0, reverse=True)
    primary = ordered[0]

    if primary.volume is not None:
        return primary

    for q in ordered:
        if q.volume is not None:
            return primary.model_copy(update={"volume": q.volume})
    return primary


def merge_fundamentals(
    snapshots: list[FundamentalSnapshot],
) -> FundamentalSnapshot | None:
    """Fill each still-null field from later snapshots; never overwrite."""
    if not snapshots:
        return None

    merged = snapshots[0].model_copy()
    for snap in snapshots[1:]:
        for field in _FUNDAMENTAL_FIELDS:
            if getattr(merged, field) is None and getattr(snap, field) is not None:
                setattr(merged, field, getattr(snap, field))
    return merged


def group_by_ticker(records: Iterable[T]) -> dict[str, list[T]]:
    """Bucket records by ticker, preserving arrival order within each bucket."""
    grouped: dict[str, list[T]] = {}
    for rec in records:
        grouped.setdefault(rec.ticker, []).append(rec)
    return grouped


def merge_all_quotes(quotes: Iterable[RawQuote]) -> dict[str, RawQuote]:
    """Group then merge: ticker → merged quote."""
    merged: dict[str, RawQuote] = {}
    for ticker, bucket in group_by_ticker(quotes).items():
        quote = merge_quotes(bucket)
        if quote is not None:
            merged[ticker] = quote
    return merged


def merge_all_fundamentals(
    snapshots: Iterable[FundamentalSnapshot],
) -> dict[str, FundamentalSnapshot]:
    """Group then merge: ticker → merged fundamentals."""
    merged: dict[str, FundamentalSnapshot] = {}
    for ticker, bucket in group_by_ticker(snapshots).items():
        snap = merge_fundamentals(bucket)
        if snap is not None:
            merged[ticker] = snap
    return merged
