"""Price feed services package."""

from cashflow.services.prices.price_feed import (
    PriceFeedError,
    PriceFeedService,
    parse_bitcoin,
    parse_gold,
    parse_usd_thb,
)

__all__ = [
    "PriceFeedError",
    "PriceFeedService",
    "parse_bitcoin",
    "parse_gold",
    "parse_usd_thb",
]
