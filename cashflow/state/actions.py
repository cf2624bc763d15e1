"""
State Actions

Every change to AppState is described by one of these objects and applied
by cashflow.state.reducer.reduce. Actions carry data only; they never
perform I/O.

Record actions share three shapes (add / update / delete) and name the
AppState collection they touch through the `collection` class variable.
"""

from datetime import datetime
from typing import Any, ClassVar, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from cashflow.models.records import (
    Asset,
    Budget,
    Income,
    Obligation,
    Profile,
    Spending,
)


class Action(BaseModel):
    """Base class for all actions."""
    model_config = ConfigDict(frozen=True)


# =============================================================================
# RECORD ACTIONS
# =============================================================================

class AddRecord(Action):
    collection: ClassVar[str]


class UpdateRecord(Action):
    collection: ClassVar[str]

    record_id: UUID
    changes: dict[str, Any]


class DeleteRecord(Action):
    collection: ClassVar[str]

    record_id: UUID


class AddIncome(AddRecord):
    collection: ClassVar[str] = "incomes"
    record: Income


class UpdateIncome(UpdateRecord):
    collection: ClassVar[str] = "incomes"


class DeleteIncome(DeleteRecord):
    collection: ClassVar[str] = "incomes"


class AddSpending(AddRecord):
    collection: ClassVar[str] = "spendings"
    record: Spending


class UpdateSpending(UpdateRecord):
    collection: ClassVar[str] = "spendings"


class DeleteSpending(DeleteRecord):
    collection: ClassVar[str] = "spendings"


class AddObligation(AddRecord):
    collection: ClassVar[str] = "obligations"
    record: Obligation


class UpdateObligation(UpdateRecord):
    collection: ClassVar[str] = "obligations"


class DeleteObligation(DeleteRecord):
    """Deleting an obligation leaves linked spendings dangling (no cascade)."""
    collection: ClassVar[str] = "obligations"


class AddAsset(AddRecord):
    collection: ClassVar[str] = "assets"
    record: Asset


class UpdateAsset(UpdateRecord):
    collection: ClassVar[str] = "assets"


class DeleteAsset(DeleteRecord):
    collection: ClassVar[str] = "assets"


class AddBudget(AddRecord):
    collection: ClassVar[str] = "budgets"
    record: Budget


class UpdateBudget(UpdateRecord):
    collection: ClassVar[str] = "budgets"


class DeleteBudget(DeleteRecord):
    collection: ClassVar[str] = "budgets"


class ReplaceRecords(Action):
    """
    Replace whole collections, e.g. after a remote fetch or demo load.

    A collection left as None is kept as it is.
    """

    incomes: Optional[list[Income]] = None
    spendings: Optional[list[Spending]] = None
    obligations: Optional[list[Obligation]] = None
    assets: Optional[list[Asset]] = None
    budgets: Optional[list[Budget]] = None


class ResetData(Action):
    """Clear every record collection and leave the app unlocked."""


# =============================================================================
# SESSION ACTIONS
# =============================================================================

class SetPin(Action):
    pin: Optional[str] = None


class Unlock(Action):
    """Mark the app unlocked. The PIN check happens before dispatch."""


class Lock(Action):
    pass


class LoggedIn(Action):
    profile: Profile
    incomes: list[Income] = Field(default_factory=list)
    spendings: list[Spending] = Field(default_factory=list)
    obligations: list[Obligation] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)


class LoggedOut(Action):
    pass


class SetLoading(Action):
    value: bool


class SetSyncing(Action):
    value: bool


class SyncSucceeded(Action):
    at: datetime


class SetError(Action):
    message: Optional[str] = None


# =============================================================================
# PREFERENCE ACTIONS
# =============================================================================

class SetLanguage(Action):
    language: str


class SetCurrency(Action):
    currency: str = Field(..., min_length=3, max_length=3)


class SetAmountHidden(Action):
    hidden: bool


class SetCategoryColor(Action):
    category: str
    color: str


class AddUserCustomColor(Action):
    color: str
