"""Catalyst extractor — headline summary and heuristic tags from recent news.

Only the most recent article (the "primary") is inspected.  Tags come
from a fixed keyword table matched case-insensitively as substrings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from detonation_scanner.models.market_data import RawNewsItem

NO_NEWS_SUMMARY = "No recent company-specific news detected in the last few days."

# Tag → keywords (lowercase)
CATALYST_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Earnings": ("earnings", "q1", "q2", "q3", "q4"),
    "Guidance": ("guidance",),
    "Analyst Action": ("upgrade", "downgrade"),
    "M&A": ("merger", "acquisition"),
    "Contract": ("contract", "deal"),
    "Biotech Catalyst": ("fda", "trial", "phase"),
}


@dataclass(frozen=True)
class Catalyst:
    """What the news says about one ticker."""

    catalyst_summary: str
    primary: RawNewsItem | None = None
    catalyst_tags: frozenset[str] = field(default_factory=frozenset)

    def ordered_tags(self) -> list[str]:
        """Tags in keyword-table order, for stable output."""
        return [t for t in CATALYST_KEYWORDS if t in self.catalyst_tags]


def format_news_datetime(value: str) -> str:
    """Render an ISO timestamp as ``YYYY-MM-DD HH:MM UTC``; pass through if unparseable."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def tags_for_headline(headline: str) -> frozenset[str]:
    lowered = headline.lower()
    return frozenset(
        tag
        for tag, keywords in CATALYST_KEYWORDS.items()
        if any(k in lowered for k in keywords)
    )


def extract(news_items: list[RawNewsItem]) -> Catalyst:
    """Pick the newest article and derive summary + tags from it."""
    if not news_items:
        return Catalyst(catalyst_summary=NO_NEWS_SUMMARY)

    # ISO strings in a fixed format sort chronologically
    primary = sorted(news_items, key=lambda n: n.datetime, reverse=True)[0]

    summary = (
        f"Latest news: {primary.headline} "
        f"({format_news_datetime(primary.datetime)})"
    )
    return Catalyst(
        catalyst_summary=summary,
        primary=primary,
        catalyst_tags=tags_for_headline(primary.headline),
    )
