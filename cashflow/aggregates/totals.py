"""
Cash Flow Aggregates

Pure functions over income and spending records. Nothing here is cached
or stored: every view is recomputed from the records on each read.

Dates are compared as calendar dates; a record's time of day never matters.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from cashflow.models.records import Budget, BudgetPeriod, Income, Spending
from cashflow.models.views import (
    BalancePoint,
    BudgetProgress,
    CategoryTotal,
    DailyActivity,
    PeriodTotals,
)
from cashflow.utils.dates import add_months, month_days, month_start, same_month

ZERO = Decimal("0")


def _sum(records: Iterable) -> Decimal:
    return sum((r.amount for r in records), ZERO)


# =============================================================================
# PERIOD TOTALS
# =============================================================================

def month_totals(
    incomes: Sequence[Income],
    spendings: Sequence[Spending],
    year: int,
    month: int,
) -> PeriodTotals:
    """Income, expense and net for one calendar month."""
    return PeriodTotals(
        income=_sum(i for i in incomes if same_month(i.date, year, month)),
        expense=_sum(s for s in spendings if same_month(s.date, year, month)),
        label=date(year, month, 1).strftime("%b %Y"),
    )


def year_totals(
    incomes: Sequence[Income],
    spendings: Sequence[Spending],
    year: int,
) -> PeriodTotals:
    """Income, expense and net for one calendar year."""
    return PeriodTotals(
        income=_sum(i for i in incomes if i.date.year == year),
        expense=_sum(s for s in spendings if s.date.year == year),
        label=str(year),
    )


def range_totals(
    incomes: Sequence[Income],
    spendings: Sequence[Spending],
    start: date,
    end: date,
) -> PeriodTotals:
    """
    Totals over the half-open range [start, end).

    Half-open ranges partition cleanly: the nets of adjacent ranges add
    up to the net of their union.
    """
    return PeriodTotals(
        income=_sum(i for i in incomes if start <= i.date < end),
        expense=_sum(s for s in spendings if start <= s.date < end),
    )


def net_cash_balance(incomes: Sequence[Income], spendings: Sequence[Spending]) -> Decimal:
    """All-time income minus all-time spending."""
    return _sum(incomes) - _sum(spendings)


def previous_balance(
    incomes: Sequence[Income],
    spendings: Sequence[Spending],
    before: date,
) -> Decimal:
    """Carry-over: net of everything dated strictly before `before`."""
    return (
        _sum(i for i in incomes if i.date < before)
        - _sum(s for s in spendings if s.date < before)
    )


def cash_flow_history(
    incomes: Sequence[Income],
    spendings: Sequence[Spending],
    today: date,
    months: int = 6,
) -> list[PeriodTotals]:
    """Monthly totals for the last `months` months, ending with today's month."""
    first = add_months(month_start(today), -(months - 1))
    history = []
    for offset in range(months):
        current = add_months(first, offset)
        totals = month_totals(incomes, spendings, current.year, current.month)
        history.append(totals.model_copy(update={"label": current.strftime("%b")}))
    return history


def spending_by_category(
    spendings: Sequence[Spending],
    year: int,
    month: int,
) -> list[CategoryTotal]:
    """Spending per category for one month, largest first."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for s in spendings:
        if same_month(s.date, year, month):
            totals[s.category] += s.amount
    return sorted(
        (CategoryTotal(category=c, amount=amt) for c, amt in totals.items()),
        key=lambda ct: ct.amount,
        reverse=True,
    )


def daily_activity(
    incomes: Sequence[Income],
    spendings: Sequence[Spending],
    day: date,
) -> DailyActivity:
    return DailyActivity(
        date=day,
        incomes=[i for i in incomes if i.date == day],
        spendings=[s for s in spendings if s.date == day],
    )


# =============================================================================
# BUDGETS
# =============================================================================

def budget_progress(
    budget: Budget,
    spendings: Sequence[Spending],
    today: date,
) -> BudgetProgress:
    """
    How much of `budget` has been spent as of `today`.

    Category match is exact and case-sensitive. Monthly budgets count the
    current calendar month; yearly budgets the current calendar year.
    """
    def counts(s: Spending) -> bool:
        if s.category != budget.category or s.date.year != today.year:
            return False
        if budget.period == BudgetPeriod.MONTHLY:
            return s.date.month == today.month
        return True

    spent = _sum(s for s in spendings if counts(s))
    return BudgetProgress(
        budget=budget,
        spent=spent,
        progress=spent / budget.amount * 100,
        remaining=max(ZERO, budget.amount - spent),
        is_over=spent > budget.amount,
    )


def all_budget_progress(
    budgets: Sequence[Budget],
    spendings: Sequence[Spending],
    today: date,
) -> list[BudgetProgress]:
    return [budget_progress(b, spendings, today) for b in budgets]


# =============================================================================
# RUNNING BALANCES
# =============================================================================

def calendar_running_balance(
    incomes: Sequence[Income],
    spendings: Sequence[Spending],
    year: int,
    month: int,
) -> list[BalancePoint]:
    """
    Day-by-day cumulative balance for one month.

    The first day starts from the carry-over of everything before the month.
    """
    daily_income: dict[date, Decimal] = defaultdict(lambda: ZERO)
    daily_expense: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for i in incomes:
        if same_month(i.date, year, month):
            daily_income[i.date] += i.amount
    for s in spendings:
        if same_month(s.date, year, month):
            daily_expense[s.date] += s.amount

    running = previous_balance(incomes, spendings, date(year, month, 1))
    points = []
    for day in month_days(year, month):
        inc, exp = daily_income[day], daily_expense[day]
        running += inc - exp
        points.append(BalancePoint(date=day, income=inc, expense=exp, balance=running))
    return points


def year_running_balance(
    incomes: Sequence[Income],
    spendings: Sequence[Spending],
    year: int,
) -> list[BalancePoint]:
    """
    Month-by-month cumulative balance for one year, one point per month
    dated the 1st. Starts from the carry-over of everything before the year.
    """
    running = previous_balance(incomes, spendings, date(year, 1, 1))
    points = []
    for month in range(1, 13):
        totals = month_totals(incomes, spendings, year, month)
        running += totals.net
        points.append(BalancePoint(
            date=date(year, month, 1),
            income=totals.income,
            expense=totals.expense,
            balance=running,
        ))
    return points
