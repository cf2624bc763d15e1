"""
Asset Valuation

Bitcoin and gold are valued at live spot prices; every other holding is
valued at its purchase price (zero when that is unset).

Gold is quoted per baht-weight (15.24 g). Holdings may be recorded in
baht, salung (1/4 baht), satang (1/100 baht) or grams, named in English
or Thai. The unit only selects the price; changing an asset's unit never
converts its quantity.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Sequence

from cashflow.models.records import Asset, AssetType
from cashflow.models.views import AssetValuation, SpotPrices

ZERO = Decimal("0")

GRAMS_PER_BAHT = Decimal("15.24")
GRAMS_PER_TROY_OUNCE = Decimal("31.1035")

# How many of each unit make up one baht-weight
GOLD_UNITS_PER_BAHT: dict[str, Decimal] = {
    "baht": Decimal("1"),
    "บาท": Decimal("1"),
    "salung": Decimal("4"),
    "สลึง": Decimal("4"),
    "satang": Decimal("100"),
    "สตางค์": Decimal("100"),
    "gram": GRAMS_PER_BAHT,
    "กรัม": GRAMS_PER_BAHT,
}


def gold_price_per_baht(xau_usd: Decimal, usd_thb: Decimal) -> Decimal:
    """Convert a USD/troy-ounce gold quote into THB per baht-weight."""
    return xau_usd * usd_thb / GRAMS_PER_TROY_OUNCE * GRAMS_PER_BAHT


def gold_unit_price(price_per_baht: Decimal, unit: str) -> Decimal:
    """Price of one `unit` of gold. Unknown units are priced as baht."""
    divisor = GOLD_UNITS_PER_BAHT.get(unit.strip().lower(), Decimal("1"))
    return price_per_baht / divisor


def unit_price(asset: Asset, prices: SpotPrices) -> Decimal:
    if asset.type == AssetType.BITCOIN:
        return prices.bitcoin
    if asset.type == AssetType.GOLD:
        return gold_unit_price(prices.gold_per_baht, asset.unit)
    return asset.purchase_price or ZERO


def value_asset(asset: Asset, prices: SpotPrices) -> AssetValuation:
    price = unit_price(asset, prices)
    value = asset.quantity * price
    pnl = None
    if asset.purchase_price is not None:
        pnl = value - asset.quantity * asset.purchase_price
    return AssetValuation(
        asset_id=asset.id,
        asset_type=asset.type,
        unit_price=price,
        value=value,
        unrealized_pnl=pnl,
    )


def total_asset_value(assets: Sequence[Asset], prices: SpotPrices) -> Decimal:
    return sum((value_asset(a, prices).value for a in assets), ZERO)


def asset_summary_by_type(
    assets: Sequence[Asset],
    prices: SpotPrices,
) -> list[tuple[AssetType, Decimal]]:
    """Total value per asset type, largest first."""
    totals: dict[AssetType, Decimal] = defaultdict(lambda: ZERO)
    for a in assets:
        totals[a.type] += value_asset(a, prices).value
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)
