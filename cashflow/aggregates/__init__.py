"""
Aggregation Functions

Pure, read-time computations over the record collections.
"""

from cashflow.aggregates.assets import (
    GOLD_UNITS_PER_BAHT,
    GRAMS_PER_BAHT,
    GRAMS_PER_TROY_OUNCE,
    asset_summary_by_type,
    gold_price_per_baht,
    gold_unit_price,
    total_asset_value,
    unit_price,
    value_asset,
)
from cashflow.aggregates.obligations import (
    obligation_overview,
    obligation_progress,
    payoff_schedule,
)
from cashflow.aggregates.totals import (
    all_budget_progress,
    budget_progress,
    calendar_running_balance,
    cash_flow_history,
    daily_activity,
    month_totals,
    net_cash_balance,
    previous_balance,
    range_totals,
    spending_by_category,
    year_running_balance,
    year_totals,
)

__all__ = [
    # Assets
    "GOLD_UNITS_PER_BAHT",
    "GRAMS_PER_BAHT",
    "GRAMS_PER_TROY_OUNCE",
    "asset_summary_by_type",
    "gold_price_per_baht",
    "gold_unit_price",
    "total_asset_value",
    "unit_price",
    "value_asset",
    # Obligations
    "obligation_overview",
    "obligation_progress",
    "payoff_schedule",
    # Cash flow and budgets
    "all_budget_progress",
    "budget_progress",
    "calendar_running_balance",
    "cash_flow_history",
    "daily_activity",
    "month_totals",
    "net_cash_balance",
    "previous_balance",
    "range_totals",
    "spending_by_category",
    "year_running_balance",
    "year_totals",
]
