"""Application state, actions and the pure reducer."""

from cashflow.state import actions
from cashflow.state.app_state import SYNCED_COLLECTIONS, TRANSIENT_FIELDS, AppState
from cashflow.state.linkage import (
    LinkOutcome,
    apply_payment,
    link_outcome,
    reverse_payment,
)
from cashflow.state.reducer import UnknownActionError, reduce

__all__ = [
    "actions",
    "AppState",
    "LinkOutcome",
    "SYNCED_COLLECTIONS",
    "TRANSIENT_FIELDS",
    "UnknownActionError",
    "apply_payment",
    "link_outcome",
    "reduce",
    "reverse_payment",
]
