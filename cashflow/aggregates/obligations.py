"""Obligation summaries: overview totals, payoff progress and projected schedules."""

from datetime import date
from decimal import Decimal
from typing import Sequence

from cashflow.models.records import Obligation, ObligationType
from cashflow.models.views import ObligationOverview, ObligationProgress, ScheduledPayment
from cashflow.utils.dates import add_months, month_start

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Upper bound on projected payments for open-ended debts
MAX_SCHEDULE_MONTHS = 600


def obligation_overview(obligations: Sequence[Obligation]) -> ObligationOverview:
    """Monthly commitment and outstanding debt, split installment vs other."""
    installment = sum(
        (o.balance for o in obligations
         if o.type == ObligationType.INSTALLMENT and o.balance is not None),
        ZERO,
    )
    other = sum(
        (o.balance for o in obligations
         if o.type != ObligationType.INSTALLMENT and o.balance is not None),
        ZERO,
    )
    return ObligationOverview(
        total_monthly_payment=sum((o.amount for o in obligations), ZERO),
        total_debt=installment + other,
        installment_balance=installment,
        other_debt_balance=other,
    )


def obligation_progress(obligation: Obligation) -> ObligationProgress:
    progress = ObligationProgress(obligation_id=obligation.id)

    if obligation.type == ObligationType.INSTALLMENT and obligation.total_months:
        paid = obligation.paid_months or 0
        total = obligation.total_months
        progress.paid_months = paid
        progress.total_months = total
        progress.percent_paid = min(HUNDRED, Decimal(paid) / Decimal(total) * HUNDRED)
        progress.remaining_months = max(0, total - paid)

    if (
        obligation.type == ObligationType.CREDIT_CARD
        and obligation.credit_limit
        and obligation.balance is not None
    ):
        progress.available_credit = obligation.credit_limit - obligation.balance
        progress.credit_utilization = min(
            HUNDRED, obligation.balance / obligation.credit_limit * HUNDRED
        )

    return progress


def payoff_schedule(obligation: Obligation, reference: date) -> list[ScheduledPayment]:
    """
    Project the remaining monthly payments, starting the month after `reference`.

    Each payment is the obligation's monthly amount, or whatever is left if
    less. Installments with total_months stop after their remaining months
    even if a balance is still outstanding. Interest is not modelled.
    """
    if obligation.amount <= 0 or obligation.balance is None or obligation.balance <= 0:
        return []

    max_payments = MAX_SCHEDULE_MONTHS
    if obligation.type == ObligationType.INSTALLMENT and obligation.total_months:
        max_payments = max(0, obligation.total_months - (obligation.paid_months or 0))

    schedule = []
    remaining = obligation.balance
    first = month_start(reference)
    for n in range(1, max_payments + 1):
        if remaining <= 0:
            break
        payment = min(obligation.amount, remaining)
        remaining -= payment
        schedule.append(ScheduledPayment(
            due_date=add_months(first, n),
            payment=payment,
            remaining_balance=remaining,
        ))
    return schedule
