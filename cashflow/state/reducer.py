"""
State Reducer

reduce(state, action) -> new state. This is the only place AppState changes.

DESIGN DECISION: The reducer is pure and synchronous. Network I/O
(sync, login, prices) happens in the orchestrator, which dispatches the
resulting actions here. Each call is one atomic transition: callers see
either the old state or the complete new one.

Spending add/delete also adjusts the linked obligation (see
cashflow.state.linkage). Spending updates re-apply that adjustment only
when relink_updates is True; with False the obligation is left as it was,
which can leave its balance out of step with its payments.
"""

from typing import Callable

from cashflow.models.records import apply_changes
from cashflow.state import actions as a
from cashflow.state.app_state import AppState
from cashflow.state.linkage import apply_payment, reverse_payment


class UnknownActionError(Exception):
    """The reducer has no handler for this action type."""
    pass


def _find_index(records: list, record_id) -> int:
    for idx, record in enumerate(records):
        if record.id == record_id:
            return idx
    return -1


# =============================================================================
# GENERIC RECORD HANDLERS
# =============================================================================

def _add_record(state: AppState, action: a.AddRecord) -> AppState:
    records = getattr(state, action.collection)
    return state.model_copy(update={action.collection: [*records, action.record]})


def _update_record(state: AppState, action: a.UpdateRecord) -> AppState:
    records = list(getattr(state, action.collection))
    idx = _find_index(records, action.record_id)
    if idx < 0:
        return state
    records[idx] = apply_changes(records[idx], action.changes)
    return state.model_copy(update={action.collection: records})


def _delete_record(state: AppState, action: a.DeleteRecord) -> AppState:
    records = getattr(state, action.collection)
    kept = [r for r in records if r.id != action.record_id]
    if len(kept) == len(records):
        return state
    return state.model_copy(update={action.collection: kept})


# =============================================================================
# SPENDING HANDLERS (obligation linkage)
# =============================================================================

def _add_spending(state: AppState, action: a.AddSpending) -> AppState:
    return state.model_copy(update={
        "spendings": [*state.spendings, action.record],
        "obligations": apply_payment(state.obligations, action.record),
    })


def _delete_spending(state: AppState, action: a.DeleteSpending) -> AppState:
    spending = state.find_spending(action.record_id)
    if spending is None:
        return state
    return state.model_copy(update={
        "spendings": [s for s in state.spendings if s.id != spending.id],
        "obligations": reverse_payment(state.obligations, spending),
    })


def _update_spending(state: AppState, action: a.UpdateSpending, relink: bool) -> AppState:
    spendings = list(state.spendings)
    idx = _find_index(spendings, action.record_id)
    if idx < 0:
        return state
    old = spendings[idx]
    new = apply_changes(old, action.changes)
    spendings[idx] = new

    obligations = state.obligations
    if relink:
        obligations = apply_payment(reverse_payment(obligations, old), new)
    return state.model_copy(update={"spendings": spendings, "obligations": obligations})


# =============================================================================
# BULK / SESSION / PREFERENCE HANDLERS
# =============================================================================

def _replace_records(state: AppState, action: a.ReplaceRecords) -> AppState:
    update = {
        name: list(records)
        for name, records in action
        if records is not None
    }
    return state.model_copy(update=update)


def _reset_data(state: AppState, action: a.ResetData) -> AppState:
    return state.model_copy(update={
        "incomes": [],
        "spendings": [],
        "obligations": [],
        "assets": [],
        "budgets": [],
        "is_locked": False,
    })


def _logged_in(state: AppState, action: a.LoggedIn) -> AppState:
    return state.model_copy(update={
        "profile": action.profile,
        "is_loading": False,
        "is_locked": False,
        "error": None,
        "incomes": list(action.incomes),
        "spendings": list(action.spendings),
        "obligations": list(action.obligations),
        "assets": list(action.assets),
    })


def _logged_out(state: AppState, action: a.LoggedOut) -> AppState:
    return state.model_copy(update={
        "profile": None,
        "is_locked": True,
        "incomes": [],
        "spendings": [],
        "obligations": [],
        "assets": [],
    })


def _add_custom_color(state: AppState, action: a.AddUserCustomColor) -> AppState:
    if action.color in state.user_custom_colors:
        return state
    return state.model_copy(
        update={"user_custom_colors": [*state.user_custom_colors, action.color]}
    )


def _set_category_color(state: AppState, action: a.SetCategoryColor) -> AppState:
    colors = {**state.category_colors, action.category: action.color}
    return state.model_copy(update={"category_colors": colors})


_SIMPLE_HANDLERS: dict[type, Callable[[AppState, a.Action], AppState]] = {
    a.ReplaceRecords: _replace_records,
    a.ResetData: _reset_data,
    a.LoggedIn: _logged_in,
    a.LoggedOut: _logged_out,
    a.SetPin: lambda s, act: s.model_copy(update={"pin": act.pin, "is_locked": True}),
    a.Unlock: lambda s, act: s.model_copy(update={"is_locked": False}),
    a.Lock: lambda s, act: s.model_copy(update={"is_locked": True}),
    a.SetLoading: lambda s, act: s.model_copy(update={"is_loading": act.value}),
    a.SetSyncing: lambda s, act: s.model_copy(update={"is_syncing": act.value}),
    a.SyncSucceeded: lambda s, act: s.model_copy(
        update={"last_synced_at": act.at, "error": None}
    ),
    a.SetError: lambda s, act: s.model_copy(update={"error": act.message}),
    a.SetLanguage: lambda s, act: s.model_copy(update={"language": act.language}),
    a.SetCurrency: lambda s, act: s.model_copy(update={"currency": act.currency}),
    a.SetAmountHidden: lambda s, act: s.model_copy(update={"is_amount_hidden": act.hidden}),
    a.SetCategoryColor: _set_category_color,
    a.AddUserCustomColor: _add_custom_color,
}


def reduce(state: AppState, action: a.Action, relink_updates: bool = True) -> AppState:
    """
    Apply one action and return the resulting state.

    Args:
        state: Current state (left untouched)
        action: The action to apply
        relink_updates: Re-run obligation adjustments when an obligation
            payment is edited

    Raises:
        UnknownActionError: No handler exists for the action type
        pydantic.ValidationError: An update produced an invalid record
    """
    # Spending actions first: they have obligation side effects
    if isinstance(action, a.AddSpending):
        return _add_spending(state, action)
    if isinstance(action, a.DeleteSpending):
        return _delete_spending(state, action)
    if isinstance(action, a.UpdateSpending):
        return _update_spending(state, action, relink_updates)

    if isinstance(action, a.AddRecord):
        return _add_record(state, action)
    if isinstance(action, a.UpdateRecord):
        return _update_record(state, action)
    if isinstance(action, a.DeleteRecord):
        return _delete_record(state, action)

    handler = _SIMPLE_HANDLERS.get(type(action))
    if handler is None:
        raise UnknownActionError(f"No reducer for action: {type(action).__name__}")
    return handler(state, action)
