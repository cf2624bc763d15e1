"""
Demo data: a believable year of salary, bills, debt payments and
day-to-day spending, for trying the app without typing anything in.

Obligation payments are created already linked; their effect is baked
into the obligations' starting balances, so loading demo data replaces
records wholesale rather than replaying each payment.
"""

import random
from datetime import date
from decimal import Decimal
from typing import Optional

from cashflow.models.records import (
    OBLIGATION_PAYMENT_CATEGORY,
    Frequency,
    Income,
    Obligation,
    ObligationType,
    Spending,
    SpendingKind,
)
from cashflow.state.actions import ReplaceRecords

# (name, amount, day of month, category)
RECURRING_EXPENSES = [
    ("Rent", 15000, 1, "Housing"),
    ("Internet & Utility", 3500, 5, "Utilities"),
    ("Gym", 1800, 2, "Health"),
    ("Netflix / Spotify", 590, 3, "Entertainment"),
]

MEALS_PER_MONTH = 20


def generate_demo_data(year: Optional[int] = None, seed: Optional[int] = None) -> ReplaceRecords:
    """
    Build a full calendar year of sample records.

    Args:
        year: Year to fill (defaults to the current year)
        seed: Seed for the variable food and shopping amounts

    Returns:
        A ReplaceRecords action covering incomes, spendings and obligations.
        Assets and budgets are left alone.
    """
    year = year or date.today().year
    rng = random.Random(seed)

    iphone = Obligation(
        name="iPhone 16 Pro",
        type=ObligationType.INSTALLMENT,
        amount=Decimal("4200"),
        total_months=10,
        paid_months=2,
        balance=Decimal("4200") * 8,
        start_date=date(year, 1, 15),
    )
    car_loan = Obligation(
        name="Tesla Model 3",
        type=ObligationType.CAR_LOAN,
        amount=Decimal("14500"),
        balance=Decimal("850000"),
        interest_rate=Decimal("2.5"),
        start_date=date(year - 1, 6, 1),
    )

    incomes: list[Income] = []
    spendings: list[Spending] = []

    def expense(name: str, amount: int, day: date, category: str = "Food") -> None:
        spendings.append(Spending(
            name=name, amount=Decimal(amount), category=category, date=day,
        ))

    def payment(name: str, obligation: Obligation, day: date) -> None:
        spendings.append(Spending(
            name=name,
            amount=obligation.amount,
            category=OBLIGATION_PAYMENT_CATEGORY,
            kind=SpendingKind.OBLIGATION_PAYMENT,
            linked_obligation_id=obligation.id,
            date=day,
        ))

    for month in range(1, 13):
        incomes.append(Income(
            name="Monthly Salary",
            amount=Decimal("65000"),
            category="Salary",
            frequency=Frequency.MONTHLY,
            date=date(year, month, 28),
        ))
        if (month - 1) % 3 == 0:
            incomes.append(Income(
                name="Freelance Project",
                amount=Decimal("12000"),
                category="Freelance",
                frequency=Frequency.MONTHLY,
                date=date(year, month, 15),
            ))

        for name, amount, day, category in RECURRING_EXPENSES:
            expense(name, amount, date(year, month, day), category)

        if month <= iphone.total_months:
            payment("Pay iPhone", iphone, date(year, month, 5))
        payment("Car Loan Payment", car_loan, date(year, month, 10))

        for _ in range(MEALS_PER_MONTH):
            day = date(year, month, rng.randint(1, 27))
            expense("Lunch / Dinner", rng.randint(100, 599), day)

        expense("Shopping", rng.randint(500, 3499), date(year, month, 20), "Shopping")

    return ReplaceRecords(
        incomes=incomes,
        spendings=spendings,
        obligations=[iphone, car_loan],
    )
