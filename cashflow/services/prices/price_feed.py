"""
Spot Price Feeds

DESIGN DECISION: Prices come from three free, unauthenticated JSON APIs:
1. CoinGecko for BTC quoted directly in THB
2. gold-api for XAU in USD per troy ounce
3. exchangerate-api for the USD -> THB rate used to localize gold

The three requests run concurrently. There is no retry and no backoff:
a feed that fails keeps whatever value it had before (zero on first
load) and the failure is logged. Prices are a display concern, never
persisted.
"""

import asyncio
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

import requests
import structlog

from cashflow.aggregates.assets import gold_price_per_baht
from cashflow.config import get_settings
from cashflow.config.settings import PriceFeedSettings
from cashflow.models.views import SpotPrices

logger = structlog.get_logger("cashflow.prices")


class PriceFeedError(Exception):
    """A price feed could not be fetched or parsed."""

    def __init__(self, feed: str, message: str):
        self.feed = feed
        super().__init__(f"{feed}: {message}")


def _to_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"not a number: {value!r}")


def parse_bitcoin(data: dict) -> Decimal:
    """CoinGecko simple/price response: {"bitcoin": {"thb": ...}}"""
    return _to_decimal(data["bitcoin"]["thb"])


def parse_gold(data: dict) -> Decimal:
    """gold-api response: {"price": <USD per troy ounce>, ...}"""
    return _to_decimal(data["price"])


def parse_usd_thb(data: dict) -> Optional[Decimal]:
    """exchangerate-api response. None when the THB rate is absent."""
    rates = data.get("rates") or {}
    if not isinstance(rates, dict):
        raise TypeError(f"rates is not an object: {rates!r}")
    rate = rates.get("THB")
    return _to_decimal(rate) if rate else None


class PriceFeedService:
    """
    Fetches live BTC, gold and USD/THB prices.

    After each fetch_prices call, `failures` holds (feed, message) for every
    feed that failed during that call.
    """

    def __init__(
        self,
        settings: Optional[PriceFeedSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings or get_settings().price_feed
        self._http = session or requests
        self.failures: list[tuple[str, str]] = []

    def _get_json(self, feed: str, url: str) -> dict:
        try:
            response = self._http.get(url, timeout=self._settings.request_timeout_seconds)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise PriceFeedError(feed, str(e))

    async def _fetch(
        self,
        feed: str,
        url: str,
        parse: Callable[[dict], Optional[Decimal]],
    ) -> Optional[Decimal]:
        """Fetch and parse one feed. Returns None (and records why) on failure."""
        try:
            data = await asyncio.to_thread(self._get_json, feed, url)
            return parse(data)
        except PriceFeedError as e:
            message = str(e)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            message = str(PriceFeedError(feed, f"unexpected response: {e}"))

        logger.warning("price_feed_failed", feed=feed, error=message)
        self.failures.append((feed, message))
        return None

    async def fetch_prices(self, previous: Optional[SpotPrices] = None) -> SpotPrices:
        """
        Fetch all feeds concurrently.

        Args:
            previous: Last known prices, kept for any feed that fails

        Returns:
            New SpotPrices. Gold is THB per baht-weight.
        """
        previous = previous or SpotPrices()
        self.failures = []
        s = self._settings

        bitcoin, xau_usd, usd_thb = await asyncio.gather(
            self._fetch("bitcoin", s.bitcoin_url, parse_bitcoin),
            self._fetch("gold", s.gold_url, parse_gold),
            self._fetch("exchange_rate", s.exchange_rate_url, parse_usd_thb),
        )

        if usd_thb is None:
            usd_thb = previous.usd_thb or Decimal(str(s.usd_thb_fallback))

        gold = previous.gold_per_baht
        if xau_usd is not None:
            gold = gold_price_per_baht(xau_usd, usd_thb)

        prices = SpotPrices(
            bitcoin=bitcoin if bitcoin is not None else previous.bitcoin,
            gold_per_baht=gold,
            usd_thb=usd_thb,
            fetched_at=datetime.utcnow(),
        )
        logger.info(
            "prices_fetched",
            bitcoin=str(prices.bitcoin),
            gold_per_baht=str(prices.gold_per_baht),
            usd_thb=str(prices.usd_thb),
            failed=[feed for feed, _ in self.failures],
        )
        return prices
