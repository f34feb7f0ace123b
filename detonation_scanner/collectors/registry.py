"""Provider registry — the ordered provider lists for one scan.

Order matters: quotes with equal timestamps and fundamentals fields
resolve in favour of the provider registered first.
"""

from __future__ import annotations

from dataclasses import dataclass

from detonation_scanner.collectors.base import (
    FundamentalsDataProvider,
    NewsDataProvider,
    PriceDataProvider,
)
from detonation_scanner.collectors.benzinga_collector import BenzingaNewsProvider
from detonation_scanner.collectors.finnhub_collector import (
    FinnhubFundamentalsProvider,
    FinnhubNewsProvider,
    FinnhubPriceProvider,
)
from detonation_scanner.collectors.massive_collector import MassivePriceProvider
from detonation_scanner.collectors.mock_collector import (
    MockFundamentalsProvider,
    MockNewsProvider,
    MockPriceProvider,
)
from detonation_scanner.collectors.yfinance_collector import (
    YFinanceFundamentalsProvider,
)
from detonation_scanner.models.scan import ScanConfig


@dataclass(frozen=True)
class ProviderRegistry:
    price: tuple[PriceDataProvider, ...] = ()
    news: tuple[NewsDataProvider, ...] = ()
    fundamentals: tuple[FundamentalsDataProvider, ...] = ()

    def has_price_source(self) -> bool:
        """True when at least one price provider has its credentials."""
        return any(p.is_configured() for p in self.price)

    def describe(self) -> dict[str, list[dict[str, object]]]:
        return {
            category: [
                {"name": p.name, "configured": p.is_configured()}
                for p in getattr(self, category)
            ]
            for category in ("price", "news", "fundamentals")
        }


def build_registry(config: ScanConfig) -> ProviderRegistry:
    """Providers for the configured data mode."""
    opts = {"timeout": config.http_timeout, "concurrency": config.concurrency}

    if config.data_mode == "mock":
        return ProviderRegistry(
            price=(MockPriceProvider(**opts),),
            news=(MockNewsProvider(**opts),),
            fundamentals=(MockFundamentalsProvider(**opts),),
        )

    massive = MassivePriceProvider(**opts)
    return ProviderRegistry(
        price=(
            FinnhubPriceProvider(volume_fallback=massive, **opts),
            massive,
        ),
        news=(
            FinnhubNewsProvider(**opts),
            BenzingaNewsProvider(**opts),
        ),
        fundamentals=(
            FinnhubFundamentalsProvider(**opts),
            YFinanceFundamentalsProvider(**opts),
        ),
    )
