"""
Derived View Models

Everything here is computed from records on read (see cashflow.aggregates)
and is never persisted. Spot prices are fetched live and likewise never
stored.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from cashflow.models.records import AssetType, Budget, Income, Spending


class PeriodTotals(BaseModel):
    """Income, expense and net for a period."""

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    label: Optional[str] = None

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


class BudgetProgress(BaseModel):
    """How much of a budget has been consumed."""

    budget: Budget
    spent: Decimal
    progress: Decimal = Field(description="spent / amount * 100")
    remaining: Decimal = Field(ge=0)
    is_over: bool


class BalancePoint(BaseModel):
    """
    One point on a running-balance chart.

    balance is cumulative and includes all history before the chart window.
    """

    date: dt.date
    income: Decimal
    expense: Decimal
    balance: Decimal


class CategoryTotal(BaseModel):
    category: str
    amount: Decimal


class DailyActivity(BaseModel):
    """Everything recorded on one calendar day."""

    date: dt.date
    incomes: list[Income] = Field(default_factory=list)
    spendings: list[Spending] = Field(default_factory=list)

    @property
    def totals(self) -> PeriodTotals:
        return PeriodTotals(
            income=sum((i.amount for i in self.incomes), Decimal("0")),
            expense=sum((s.amount for s in self.spendings), Decimal("0")),
        )


class ObligationOverview(BaseModel):
    total_monthly_payment: Decimal
    total_debt: Decimal
    installment_balance: Decimal
    other_debt_balance: Decimal


class ObligationProgress(BaseModel):
    """
    Payoff progress for one obligation.

    Installment fields are None unless the obligation is an installment
    with total_months; credit fields are None unless it is a credit card
    with a credit limit and balance.
    """

    obligation_id: UUID
    paid_months: Optional[int] = None
    total_months: Optional[int] = None
    percent_paid: Optional[Decimal] = None
    remaining_months: Optional[int] = None
    available_credit: Optional[Decimal] = None
    credit_utilization: Optional[Decimal] = None


class ScheduledPayment(BaseModel):
    """A projected future payment on an obligation."""

    due_date: dt.date
    payment: Decimal
    remaining_balance: Decimal


class SpotPrices(BaseModel):
    """
    Live prices in local currency (THB).

    gold_per_baht is the price of one baht-weight of gold.
    Zero means the feed has not produced a value yet.
    """

    bitcoin: Decimal = Decimal("0")
    gold_per_baht: Decimal = Decimal("0")
    usd_thb: Optional[Decimal] = None
    fetched_at: Optional[dt.datetime] = None


class AssetValuation(BaseModel):
    asset_id: UUID
    asset_type: AssetType
    unit_price: Decimal
    value: Decimal
    unrealized_pnl: Optional[Decimal] = Field(
        default=None,
        description="value - quantity * purchase_price; None without a purchase price"
    )
