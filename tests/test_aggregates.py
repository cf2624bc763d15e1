"""Tests for cash-flow, budget, obligation and asset aggregates."""

import pytest
from datetime import date
from decimal import Decimal

from cashflow.aggregates import (
    all_budget_progress,
    asset_summary_by_type,
    budget_progress,
    calendar_running_balance,
    cash_flow_history,
    daily_activity,
    gold_price_per_baht,
    gold_unit_price,
    month_totals,
    net_cash_balance,
    obligation_overview,
    obligation_progress,
    payoff_schedule,
    previous_balance,
    range_totals,
    spending_by_category,
    total_asset_value,
    value_asset,
    year_running_balance,
    year_totals,
)
from cashflow.models.records import (
    Asset,
    AssetType,
    Budget,
    BudgetPeriod,
    Income,
    Obligation,
    ObligationType,
    Spending,
)
from cashflow.models.views import SpotPrices


def income(amount, day, category="Salary"):
    return Income(name="Income", amount=Decimal(amount), category=category, date=day)


def spend(amount, day, category="Food"):
    return Spending(name="Spend", amount=Decimal(amount), category=category, date=day)


@pytest.fixture
def records():
    incomes = [
        income("1000", date(2025, 12, 28)),
        income("65000", date(2026, 1, 28)),
        income("65000", date(2026, 2, 28)),
    ]
    spendings = [
        spend("300", date(2025, 12, 31)),
        spend("15000", date(2026, 1, 1), "Housing"),
        spend("2000", date(2026, 1, 15)),
        spend("15000", date(2026, 2, 1), "Housing"),
        spend("6200", date(2026, 2, 10)),
    ]
    return incomes, spendings


@pytest.fixture
def prices():
    return SpotPrices(bitcoin=Decimal("2000000"), gold_per_baht=Decimal("45000"))


class TestPeriodTotals:
    """Tests for month, year and range totals."""

    def test_month_totals(self, records):
        """Test a single month's income, expense and net."""
        totals = month_totals(*records, 2026, 1)
        assert totals.income == Decimal("65000")
        assert totals.expense == Decimal("17000")
        assert totals.net == Decimal("48000")
        assert totals.label == "Jan 2026"

    def test_year_totals(self, records):
        """Test that a year only counts its own records."""
        totals = year_totals(*records, 2026)
        assert totals.income == Decimal("130000")
        assert totals.expense == Decimal("38200")

    def test_adjacent_ranges_add_up(self, records):
        """Test that half-open ranges partition the whole."""
        start, middle, end = date(2025, 12, 1), date(2026, 1, 20), date(2026, 3, 1)
        left = range_totals(*records, start, middle)
        right = range_totals(*records, middle, end)
        whole = range_totals(*records, start, end)
        assert left.net + right.net == whole.net

    def test_net_cash_balance_and_carry_over(self, records):
        """Test all-time net and the carry-over before a date."""
        assert net_cash_balance(*records) == Decimal("92500")
        assert previous_balance(*records, date(2026, 1, 1)) == Decimal("700")

    def test_cash_flow_history_covers_six_months(self, records):
        """Test that history ends with the current month."""
        history = cash_flow_history(*records, date(2026, 2, 15))
        assert len(history) == 6
        assert history[0].label == "Sep"
        assert history[-1].label == "Feb"
        assert history[-1].income == Decimal("65000")

    def test_spending_by_category_sorted(self, records):
        """Test that the largest category comes first."""
        _, spendings = records
        totals = spending_by_category(spendings, 2026, 2)
        assert [t.category for t in totals] == ["Housing", "Food"]

    def test_daily_activity(self, records):
        """Test the per-day view and its totals."""
        activity = daily_activity(*records, date(2026, 1, 28))
        assert len(activity.incomes) == 1
        assert activity.spendings == []
        assert activity.totals.net == Decimal("65000")


class TestBudgets:
    """Tests for budget consumption."""

    def test_over_budget(self, records):
        """Test the 5000 monthly food budget against 6200 spent."""
        _, spendings = records
        progress = budget_progress(
            Budget(category="Food", amount=Decimal("5000")), spendings, date(2026, 2, 20)
        )
        assert progress.spent == Decimal("6200")
        assert progress.progress == Decimal("124")
        assert progress.remaining == Decimal("0")
        assert progress.is_over is True

    def test_category_match_is_case_sensitive(self, records):
        """Test that 'food' doesn't match 'Food'."""
        _, spendings = records
        progress = budget_progress(
            Budget(category="food", amount=Decimal("5000")), spendings, date(2026, 2, 20)
        )
        assert progress.spent == Decimal("0")
        assert progress.is_over is False

    def test_yearly_budget_counts_whole_year(self, records):
        """Test that a yearly budget sums every month of the current year only."""
        _, spendings = records
        progress = budget_progress(
            Budget(category="Food", amount=Decimal("10000"), period=BudgetPeriod.YEARLY),
            spendings,
            date(2026, 6, 1),
        )
        assert progress.spent == Decimal("8200")
        assert progress.remaining == Decimal("1800")

    def test_all_budget_progress(self, records):
        """Test one result per budget."""
        _, spendings = records
        budgets = [
            Budget(category="Food", amount=Decimal("5000")),
            Budget(category="Housing", amount=Decimal("20000")),
        ]
        assert len(all_budget_progress(budgets, spendings, date(2026, 2, 1))) == 2


class TestRunningBalances:
    """Tests for calendar and year running balances."""

    def test_calendar_starts_from_carry_over(self, records):
        """Test that day 1 includes everything before the month."""
        points = calendar_running_balance(*records, 2026, 1)
        assert len(points) == 31
        assert points[0].balance == Decimal("700") - Decimal("15000")
        assert points[-1].balance == Decimal("700") + Decimal("48000")

    def test_year_balance_has_twelve_points(self, records):
        """Test month-by-month balance for a year."""
        points = year_running_balance(*records, 2026)
        assert len(points) == 12
        assert points[0].balance == Decimal("48700")
        assert points[1].balance == Decimal("92500")
        assert points[-1].balance == Decimal("92500")


class TestObligations:
    """Tests for obligation summaries."""

    def test_overview(self, iphone, car_loan):
        """Test monthly commitment and debt split."""
        overview = obligation_overview([iphone, car_loan])
        assert overview.total_monthly_payment == Decimal("18700")
        assert overview.installment_balance == Decimal("33600")
        assert overview.other_debt_balance == Decimal("850000")
        assert overview.total_debt == Decimal("883600")

    def test_installment_progress(self, iphone):
        """Test installment percent and remaining months."""
        progress = obligation_progress(iphone)
        assert progress.percent_paid == Decimal("20")
        assert progress.remaining_months == 8
        assert progress.available_credit is None

    def test_credit_card_progress(self):
        """Test credit utilization."""
        card = Obligation(
            name="Card", type=ObligationType.CREDIT_CARD, amount=Decimal("500"),
            balance=Decimal("2500"), credit_limit=Decimal("10000"),
        )
        progress = obligation_progress(card)
        assert progress.available_credit == Decimal("7500")
        assert progress.credit_utilization == Decimal("25")
        assert progress.percent_paid is None

    def test_installment_schedule_stops_at_remaining_months(self, iphone):
        """Test that an installment projects exactly its remaining months."""
        schedule = payoff_schedule(iphone, date(2026, 3, 5))
        assert len(schedule) == 8
        assert schedule[0].due_date == date(2026, 4, 1)
        assert schedule[-1].remaining_balance == Decimal("0")

    def test_schedule_last_payment_is_remainder(self):
        """Test that the final payment is whatever is left."""
        loan = Obligation(
            name="Loan", type=ObligationType.PERSONAL_LOAN,
            amount=Decimal("1000"), balance=Decimal("2500"),
        )
        schedule = payoff_schedule(loan, date(2026, 1, 31))
        assert [p.payment for p in schedule] == [Decimal("1000"), Decimal("1000"), Decimal("500")]

    def test_no_schedule_without_balance(self):
        """Test that an obligation without a balance has nothing to project."""
        card = Obligation(name="Card", type=ObligationType.CREDIT_CARD, amount=Decimal("500"))
        assert payoff_schedule(card, date(2026, 1, 1)) == []


class TestAssets:
    """Tests for asset valuation."""

    def test_salung_is_quarter_baht(self, prices):
        """Test that 4 salung are worth 1 baht of gold."""
        salung = Asset(name="Gold", type=AssetType.GOLD, quantity=Decimal("4"), unit="salung")
        baht = Asset(name="Gold", type=AssetType.GOLD, quantity=Decimal("1"), unit="baht")
        assert value_asset(salung, prices).value == value_asset(baht, prices).value

    def test_gold_in_baht(self, prices):
        """Test 2 baht at 45000 per baht."""
        gold = Asset(name="Gold", type=AssetType.GOLD, quantity=Decimal("2"), unit="บาท")
        assert value_asset(gold, prices).value == Decimal("90000")

    def test_gold_in_grams(self, prices):
        """Test 2 grams priced from the per-baht quote."""
        gold = Asset(name="Gold", type=AssetType.GOLD, quantity=Decimal("2"), unit="gram")
        assert round(value_asset(gold, prices).value) == 5906

    def test_unknown_unit_priced_as_baht(self):
        """Test that an unknown unit falls back to the baht price."""
        assert gold_unit_price(Decimal("45000"), "ounce") == Decimal("45000")

    def test_gold_per_baht_conversion(self):
        """Test the USD/oz to THB/baht conversion."""
        per_baht = gold_price_per_baht(Decimal("2000"), Decimal("35"))
        assert round(per_baht) == 34298

    def test_bitcoin_pnl(self, prices):
        """Test that P&L compares value with the purchase cost."""
        btc = Asset(
            name="BTC", type=AssetType.BITCOIN,
            quantity=Decimal("0.5"), purchase_price=Decimal("1500000"),
        )
        valuation = value_asset(btc, prices)
        assert valuation.value == Decimal("1000000")
        assert valuation.unrealized_pnl == Decimal("250000")

    def test_no_pnl_without_purchase_price(self, prices):
        """Test that P&L is absent when the purchase price is unknown."""
        btc = Asset(name="BTC", type=AssetType.BITCOIN, quantity=Decimal("1"))
        assert value_asset(btc, prices).unrealized_pnl is None

    def test_other_assets_use_purchase_price(self, prices):
        """Test that non-feed assets are valued at purchase price or zero."""
        stock = Asset(
            name="SET50", type=AssetType.STOCK,
            quantity=Decimal("10"), purchase_price=Decimal("100"),
        )
        land = Asset(name="Land", type=AssetType.REAL_ESTATE, quantity=Decimal("1"))
        assert value_asset(stock, prices).value == Decimal("1000")
        assert value_asset(land, prices).value == Decimal("0")
        assert total_asset_value([stock, land], prices) == Decimal("1000")

    def test_summary_by_type_sorted(self, prices):
        """Test that the largest asset type comes first."""
        assets = [
            Asset(name="Gold", type=AssetType.GOLD, quantity=Decimal("1"), unit="baht"),
            Asset(name="BTC", type=AssetType.BITCOIN, quantity=Decimal("1")),
        ]
        summary = asset_summary_by_type(assets, prices)
        assert [t for t, _ in summary] == [AssetType.BITCOIN, AssetType.GOLD]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
