"""
Obligation-Payment Linkage

Keeps an obligation's balance and paid-month count consistent with the
spendings that pay it down.

- Applying a payment lowers balance by the amount (when balance is set)
  and, for installments with paid_months set, adds one paid month.
- Reversing a payment raises balance by the amount (no ceiling) and takes
  one paid month away, never going below zero.
- Missing obligations are ignored: the spending still stands with a
  dangling link and the obligations are returned unchanged.

All functions are pure: they return new lists and never touch their inputs.
"""

from decimal import Decimal
from enum import Enum
from typing import Sequence

from cashflow.models.records import Obligation, ObligationType, Spending


class LinkOutcome(str, Enum):
    """What a spending's link resolves to against the current obligations."""
    NOT_LINKED = "not_linked"
    APPLIED = "applied"
    DANGLING = "dangling"


def link_outcome(obligations: Sequence[Obligation], spending: Spending) -> LinkOutcome:
    if not spending.is_obligation_payment:
        return LinkOutcome.NOT_LINKED
    if any(o.id == spending.linked_obligation_id for o in obligations):
        return LinkOutcome.APPLIED
    return LinkOutcome.DANGLING


def _adjusted(obligation: Obligation, amount: Decimal, months: int) -> Obligation:
    changes = {}
    if obligation.balance is not None:
        changes["balance"] = obligation.balance - amount
    if obligation.type == ObligationType.INSTALLMENT and obligation.paid_months is not None:
        changes["paid_months"] = max(0, obligation.paid_months + months)
    return obligation.model_copy(update=changes)


def _adjust_linked(
    obligations: Sequence[Obligation],
    spending: Spending,
    amount: Decimal,
    months: int,
) -> list[Obligation]:
    if not spending.is_obligation_payment:
        return list(obligations)
    return [
        _adjusted(o, amount, months) if o.id == spending.linked_obligation_id else o
        for o in obligations
    ]


def apply_payment(obligations: Sequence[Obligation], spending: Spending) -> list[Obligation]:
    """Obligations after `spending` is recorded."""
    return _adjust_linked(obligations, spending, spending.amount, 1)


def reverse_payment(obligations: Sequence[Obligation], spending: Spending) -> list[Obligation]:
    """Obligations after `spending` is removed."""
    return _adjust_linked(obligations, spending, -spending.amount, -1)
