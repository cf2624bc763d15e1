"""
Core Record Models for Cash Flow Tracker

These models define the strict schemas for every record the user keeps.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Be serializable for the local state blob and the remote store

DESIGN DECISION: Money is Decimal, never float. Derived numbers
(budget consumption, valuations) are computed in cashflow.aggregates
and never stored on these records.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, TypeVar
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Frequency(str, Enum):
    """How often an income recurs."""
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ONE_TIME = "one-time"
    IRREGULAR = "irregular"


class SpendingKind(str, Enum):
    """
    Spending kind.

    OBLIGATION_PAYMENT spendings carry a link to the obligation they pay down.
    """
    NORMAL = "normal"
    OBLIGATION_PAYMENT = "obligation-payment"


class ObligationType(str, Enum):
    """Supported obligation types."""
    INSTALLMENT = "installment"
    CREDIT_CARD = "credit-card"
    PERSONAL_LOAN = "personal-loan"
    CAR_LOAN = "car-loan"
    HOME_LOAN = "home-loan"
    OTHER = "other"


class ObligationStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class AssetType(str, Enum):
    """
    Supported holding types.

    Only GOLD and BITCOIN have a live price feed. Everything else is
    valued at its purchase price.
    """
    GOLD = "gold"
    BITCOIN = "bitcoin"
    STOCK = "stock"
    FUND = "fund"
    REAL_ESTATE = "real-estate"
    OTHER = "other"


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


# =============================================================================
# CATEGORY CATALOGUE
# =============================================================================

# Categories on records are free text; these only seed UI choices and colours.
INCOME_CATEGORIES: dict[str, str] = {
    "Salary": "#10b981",
    "Freelance": "#3b82f6",
    "Business": "#8b5cf6",
    "Investment": "#f59e0b",
    "Bonus": "#d946ef",
    "Dividend": "#14b8a6",
    "Interest": "#0ea5e9",
    "Gift": "#ec4899",
    "Other": "#64748b",
}

SPENDING_CATEGORIES: dict[str, str] = {
    "Food": "#ef4444",
    "Transport": "#f97316",
    "Housing": "#6366f1",
    "Entertainment": "#ec4899",
    "Health": "#06b6d4",
    "Shopping": "#8b5cf6",
    "Education": "#6366f1",
    "Subscription": "#ec4899",
    "Insurance": "#10b981",
    "Personal Care": "#f43f5e",
    "Pets": "#f59e0b",
    "Utilities": "#eab308",
    "Obligation Payment": "#64748b",
    "Other": "#94a3b8",
}

OBLIGATION_PAYMENT_CATEGORY = "Obligation Payment"


def _strip_time(value: Any) -> Any:
    """Accept ISO datetime strings for date fields by dropping the time part."""
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if isinstance(value, dt.datetime):
        return value.date()
    return value


# =============================================================================
# RECORDS
# =============================================================================

class Income(BaseModel):
    """A single income entry."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0, description="Amount received")
    category: str = Field(..., min_length=1, max_length=100)
    frequency: Frequency = Field(default=Frequency.MONTHLY)
    date: dt.date
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return _strip_time(v)


class Spending(BaseModel):
    """
    A single spending entry.

    When kind is OBLIGATION_PAYMENT, linked_obligation_id names the
    obligation it pays down. The link is not checked against existing
    obligations here: a dangling link is an accepted state (see
    cashflow.state.linkage).
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0, description="Amount spent")
    category: str = Field(..., min_length=1, max_length=100)
    date: dt.date
    kind: SpendingKind = Field(default=SpendingKind.NORMAL)
    linked_obligation_id: Optional[UUID] = None
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return _strip_time(v)

    @model_validator(mode='after')
    def validate_link(self) -> 'Spending':
        """Obligation payments must say which obligation they pay."""
        if self.kind == SpendingKind.OBLIGATION_PAYMENT and self.linked_obligation_id is None:
            raise ValueError("Obligation payment requires linked_obligation_id")
        return self

    @property
    def is_obligation_payment(self) -> bool:
        return (
            self.kind == SpendingKind.OBLIGATION_PAYMENT
            and self.linked_obligation_id is not None
        )


class Obligation(BaseModel):
    """
    A recurring debt or installment commitment.

    balance and paid_months are side-effected by linked spendings.
    paid_months never goes below zero but may exceed total_months.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    type: ObligationType
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Monthly payment, or minimum payment for credit cards"
    )
    balance: Optional[Decimal] = Field(
        default=None,
        description="Remaining balance"
    )
    credit_limit: Optional[Decimal] = Field(default=None, ge=0)
    interest_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="APR in percent"
    )
    total_months: Optional[int] = Field(default=None, ge=0)
    paid_months: Optional[int] = Field(default=None, ge=0)
    start_date: Optional[dt.date] = None
    status: ObligationStatus = Field(default=ObligationStatus.ACTIVE)
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)

    @field_validator("start_date", mode="before")
    @classmethod
    def normalize_start_date(cls, v: Any) -> Any:
        return _strip_time(v)


class Asset(BaseModel):
    """A holding. Its value is always recomputed, never stored."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    type: AssetType
    quantity: Decimal = Field(..., ge=0)
    unit: str = Field(default="", max_length=20)
    purchase_price: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Price per unit at purchase"
    )
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)


class Budget(BaseModel):
    """Spending limit for one category over a month or a year."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    category: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0)
    period: BudgetPeriod = Field(default=BudgetPeriod.MONTHLY)


class Profile(BaseModel):
    """
    Remote identity record.

    pin_hash holds whatever the configured PinVerifier encodes;
    with PlainTextPinVerifier that is the PIN itself.
    """

    id: UUID = Field(default_factory=uuid4)
    user_id_text: str = Field(..., min_length=1)
    pin_hash: str
    language: Optional[str] = None
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)


RecordT = TypeVar("RecordT", bound=BaseModel)


def apply_changes(record: RecordT, changes: dict[str, Any]) -> RecordT:
    """
    Return a validated copy of record with changes merged in.

    The id can't be changed this way.
    """
    data = record.model_dump()
    data.update({k: v for k, v in changes.items() if k != "id"})
    return type(record).model_validate(data)
