"""
Application State

The single source of truth for a session. One AppState instance is owned
by the FinanceController; it is only ever replaced, never mutated, by
cashflow.state.reducer.reduce.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from cashflow.models.records import (
    Asset,
    Budget,
    Income,
    Obligation,
    Profile,
    Spending,
)


# Transient flags that are never written to the local state file
TRANSIENT_FIELDS = {"is_loading", "is_syncing", "error"}

# Collections mirrored to the remote store (budgets stay local)
SYNCED_COLLECTIONS = ("incomes", "spendings", "obligations", "assets")


class AppState(BaseModel):
    """Everything the client holds: records, lock, profile and preferences."""

    # Records
    incomes: list[Income] = Field(default_factory=list)
    spendings: list[Spending] = Field(default_factory=list)
    obligations: list[Obligation] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)

    # Lock and identity
    pin: Optional[str] = None
    is_locked: bool = True
    profile: Optional[Profile] = None

    # Session flags
    is_loading: bool = False
    is_syncing: bool = False
    last_synced_at: Optional[datetime] = None
    error: Optional[str] = None

    # UI preferences
    currency: str = "THB"
    language: str = "en"
    is_amount_hidden: bool = False
    category_colors: dict[str, str] = Field(default_factory=dict)
    user_custom_colors: list[str] = Field(default_factory=list)

    def find_obligation(self, obligation_id) -> Optional[Obligation]:
        return next((o for o in self.obligations if o.id == obligation_id), None)

    def find_spending(self, spending_id) -> Optional[Spending]:
        return next((s for s in self.spendings if s.id == spending_id), None)

    def record_counts(self) -> dict[str, int]:
        return {
            "incomes": len(self.incomes),
            "spendings": len(self.spendings),
            "obligations": len(self.obligations),
            "assets": len(self.assets),
            "budgets": len(self.budgets),
        }

    def to_persisted_json(self) -> str:
        """Serialize everything except transient session flags."""
        return self.model_dump_json(exclude=TRANSIENT_FIELDS, indent=2)
