"""
Main Orchestrator for the Cash Flow Tracker

FinanceController owns the one AppState of a session and is the only
thing that talks to the network. Every user operation follows the same
shape:
1. Dispatch an action through the pure reducer (local state changes at once)
2. Audit what happened
3. Mirror the affected collection(s) to remote storage, if logged in

DESIGN DECISION: Local state is authoritative. A failed sync records the
error on the state and is audited, but the local change is never rolled
back. The next successful sync of that collection catches the remote
copy up, since every sync sends the whole collection.
"""

import asyncio
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Sequence, Union
from uuid import UUID

from cashflow.aggregates import (
    month_totals,
    net_cash_balance,
    obligation_overview,
    total_asset_value,
)
from cashflow.audit import AuditLogger, create_correlation_id
from cashflow.config import get_settings
from cashflow.config.settings import AppSettings
from cashflow.demo import generate_demo_data
from cashflow.models.records import Asset, Budget, Income, Obligation, Spending
from cashflow.models.views import SpotPrices
from cashflow.services.auth import (
    AuthService,
    LoginResult,
    PinVerifier,
    PlainTextPinVerifier,
    is_valid_pin,
    normalize_user_id,
)
from cashflow.services.export import (
    ExportData,
    default_export_filename,
    export_excel,
    export_pdf,
)
from cashflow.services.prices import PriceFeedService
from cashflow.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsProfileStorage,
    GoogleSheetsRecordStorage,
    InMemoryProfileStorage,
    InMemoryRecordStorage,
    LocalStateFile,
    ProfileStorageInterface,
    RecordStorageInterface,
    StorageError,
)
from cashflow.state import actions as a
from cashflow.state.app_state import SYNCED_COLLECTIONS, AppState
from cashflow.state.linkage import LinkOutcome, link_outcome
from cashflow.state.reducer import reduce
from cashflow.utils.currency import format_currency

# Actions that only touch flags which are never persisted
_TRANSIENT_ACTIONS = (a.SetLoading, a.SetSyncing, a.SetError)

# Remote collections each record collection's changes must be mirrored to
_SYNC_TARGETS: dict[str, tuple[str, ...]] = {
    "incomes": ("incomes",),
    "spendings": ("spendings", "obligations"),
    "obligations": ("obligations",),
    "assets": ("assets",),
    "budgets": (),
}

_ENTITY_NAMES = {
    "incomes": "income",
    "spendings": "spending",
    "obligations": "obligation",
    "assets": "asset",
    "budgets": "budget",
}


class FinanceController:
    """
    Application facade used by the UI.

    Storage, auth, prices and the local state file are all optional and
    injected, so the controller runs fully offline with none of them.
    """

    def __init__(
        self,
        record_storage: Optional[RecordStorageInterface] = None,
        profile_storage: Optional[ProfileStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        price_service: Optional[PriceFeedService] = None,
        state_file: Optional[LocalStateFile] = None,
        verifier: Optional[PinVerifier] = None,
        settings: Optional[AppSettings] = None,
        state: Optional[AppState] = None,
    ):
        self._settings = settings or get_settings().app
        self._records = record_storage
        self._verifier = verifier or PlainTextPinVerifier()
        self._auth = (
            AuthService(profile_storage, self._verifier) if profile_storage else None
        )
        self._audit = audit_logger or AuditLogger()
        self._prices = price_service
        self._state_file = state_file
        self.state = state or AppState(currency=self._settings.default_currency)
        self.prices = SpotPrices()

    @property
    def audit(self) -> AuditLogger:
        return self._audit

    @property
    def has_remote(self) -> bool:
        return self._records is not None and self._auth is not None

    # =========================================================================
    # STATE
    # =========================================================================

    def dispatch(self, action: a.Action) -> AppState:
        """Apply an action; persist the result if a state file is configured."""
        self.state = reduce(
            self.state,
            action,
            relink_updates=self._settings.relink_spending_updates,
        )
        if self._state_file is not None and not isinstance(action, _TRANSIENT_ACTIONS):
            self._state_file.save(self.state)
        return self.state

    def load(self) -> AppState:
        """
        Replace the in-memory state with the saved one, if there is one.

        Raises:
            StorageError: If the state file exists but can't be read
        """
        if self._state_file is not None:
            saved = self._state_file.load()
            if saved is not None:
                self.state = saved
        return self.state

    def save(self) -> None:
        if self._state_file is not None:
            self._state_file.save(self.state)

    # =========================================================================
    # SYNC
    # =========================================================================

    async def _sync(
        self,
        collections: Sequence[str],
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Mirror collections concurrently. No-op when logged out or offline.

        Returns True if every collection synced.
        """
        profile = self.state.profile
        if not collections or profile is None or self._records is None:
            return True

        self.dispatch(a.SetSyncing(value=True))
        try:
            results = await asyncio.gather(
                *(
                    self._records.sync_collection(
                        profile.id, name, getattr(self.state, name)
                    )
                    for name in collections
                ),
                return_exceptions=True,
            )
        finally:
            self.dispatch(a.SetSyncing(value=False))

        ok = True
        for name, result in zip(collections, results):
            if isinstance(result, StorageError):
                ok = False
                self.dispatch(a.SetError(message=str(result)))
                await self._audit.log_sync_failed(name, str(result), correlation_id)
            elif isinstance(result, BaseException):
                raise result
            else:
                await self._audit.log_sync_completed(
                    name, len(getattr(self.state, name)), correlation_id
                )

        if ok:
            self.dispatch(a.SyncSucceeded(at=datetime.utcnow()))
        return ok

    async def sync_to_cloud(self, collection: Optional[str] = None) -> bool:
        """Push one collection (or all of them) to remote storage."""
        if collection is not None and collection not in SYNCED_COLLECTIONS:
            raise ValueError(f"Not a synced collection: {collection}")
        targets = (collection,) if collection else SYNCED_COLLECTIONS
        return await self._sync(targets, create_correlation_id())

    # =========================================================================
    # SESSION
    # =========================================================================

    async def login(self, user_id: str, pin: str) -> LoginResult:
        """
        Log in (or register) and replace local records with the remote ones.

        Failures are returned in the result and set on state.error.
        """
        if self._auth is None:
            result = LoginResult(error="Remote storage is not configured")
            self.dispatch(a.SetError(message=result.error))
            return result

        correlation_id = create_correlation_id()
        self.dispatch(a.SetLoading(value=True))
        self.dispatch(a.SetError(message=None))

        result = await self._auth.login(user_id, pin)
        if not result.ok:
            self.dispatch(a.SetError(message=result.error))
            self.dispatch(a.SetLoading(value=False))
            await self._audit.log_login_failed(
                normalize_user_id(user_id), result.error, correlation_id
            )
            return result

        profile = result.profile
        try:
            snapshot = await self._records.fetch_all(profile.id)
        except StorageError as e:
            self.dispatch(a.SetError(message=str(e)))
            self.dispatch(a.SetLoading(value=False))
            await self._audit.log_login_failed(profile.user_id_text, str(e), correlation_id)
            return LoginResult(error=str(e))

        self.dispatch(a.LoggedIn(profile=profile, **dict(snapshot)))
        if profile.language:
            self.dispatch(a.SetLanguage(language=profile.language))
        await self._audit.log_login_succeeded(
            profile.id, profile.user_id_text, result.created, correlation_id
        )
        await self._audit.log_fetch_completed(profile.id, snapshot.counts(), correlation_id)
        return result

    def logout(self) -> None:
        self.dispatch(a.LoggedOut())

    async def initialize(self) -> bool:
        """Refetch every synced collection for the logged-in profile."""
        profile = self.state.profile
        if profile is None or self._records is None:
            return False

        correlation_id = create_correlation_id()
        self.dispatch(a.SetLoading(value=True))
        self.dispatch(a.SetError(message=None))
        try:
            snapshot = await self._records.fetch_all(profile.id)
        except StorageError as e:
            self.dispatch(a.SetError(message=f"Failed to load cloud data: {e}"))
            await self._audit.log_external_service_error("record_storage", str(e), correlation_id)
            return False
        finally:
            self.dispatch(a.SetLoading(value=False))

        self.dispatch(a.ReplaceRecords(**dict(snapshot)))
        await self._audit.log_data_replaced("remote", snapshot.counts(), correlation_id)
        return True

    # =========================================================================
    # LOCK
    # =========================================================================

    async def set_pin(self, pin: str) -> None:
        """
        Set the local PIN (and the profile's, when logged in), then lock.

        Raises:
            ValueError: If the PIN isn't 6 digits
        """
        if not is_valid_pin(pin):
            raise ValueError("PIN must be 6 digits")
        self.dispatch(a.SetPin(pin=self._verifier.encode(pin)))

        profile = self.state.profile
        if profile is not None and self._auth is not None:
            try:
                await self._auth.update_pin(profile.id, pin)
            except StorageError as e:
                self.dispatch(a.SetError(message=str(e)))
                await self._audit.log_external_service_error("profile_storage", str(e))
                return
        await self._audit.log_pin_changed(profile.id if profile else None)

    async def unlock(self, entered_pin: str) -> bool:
        """Unlock if no PIN is set or the entered PIN matches."""
        stored = self.state.pin
        if stored is None or self._verifier.verify(entered_pin, stored):
            self.dispatch(a.Unlock())
            return True
        await self._audit.log_unlock_failed()
        return False

    def lock(self) -> None:
        self.dispatch(a.Lock())

    # =========================================================================
    # RECORDS
    # =========================================================================

    async def _add(self, action: a.AddRecord) -> None:
        correlation_id = create_correlation_id()
        record = action.record
        self.dispatch(action)
        await self._audit.log_record_added(
            _ENTITY_NAMES[action.collection],
            record.id,
            getattr(record, "name", None) or getattr(record, "category", ""),
            correlation_id,
        )
        await self._sync(_SYNC_TARGETS[action.collection], correlation_id)

    async def _update(self, action: a.UpdateRecord) -> None:
        correlation_id = create_correlation_id()
        self.dispatch(action)
        await self._audit.log_record_updated(
            _ENTITY_NAMES[action.collection],
            action.record_id,
            list(action.changes),
            correlation_id,
        )
        await self._sync(_SYNC_TARGETS[action.collection], correlation_id)

    async def _delete(self, action: a.DeleteRecord) -> None:
        correlation_id = create_correlation_id()
        self.dispatch(action)
        await self._audit.log_record_deleted(
            _ENTITY_NAMES[action.collection], action.record_id, correlation_id
        )
        await self._sync(_SYNC_TARGETS[action.collection], correlation_id)

    async def _audit_link(self, spending: Spending, reversed_: bool) -> None:
        outcome = link_outcome(self.state.obligations, spending)
        if outcome == LinkOutcome.APPLIED:
            await self._audit.log_obligation_payment(
                spending.linked_obligation_id,
                spending.id,
                str(spending.amount),
                reversed_=reversed_,
            )
        elif outcome == LinkOutcome.DANGLING:
            await self._audit.log_link_dangling(spending.id, spending.linked_obligation_id)

    async def add_income(self, income: Income) -> Income:
        await self._add(a.AddIncome(record=income))
        return income

    async def update_income(self, income_id: UUID, changes: dict) -> None:
        await self._update(a.UpdateIncome(record_id=income_id, changes=changes))

    async def delete_income(self, income_id: UUID) -> None:
        await self._delete(a.DeleteIncome(record_id=income_id))

    async def add_spending(self, spending: Spending) -> Spending:
        await self._audit_link(spending, reversed_=False)
        await self._add(a.AddSpending(record=spending))
        return spending

    async def update_spending(self, spending_id: UUID, changes: dict) -> None:
        old = self.state.find_spending(spending_id)
        await self._update(a.UpdateSpending(record_id=spending_id, changes=changes))
        new = self.state.find_spending(spending_id)
        if old is not None and new is not None and self._settings.relink_spending_updates:
            await self._audit_link(old, reversed_=True)
            await self._audit_link(new, reversed_=False)

    async def delete_spending(self, spending_id: UUID) -> None:
        spending = self.state.find_spending(spending_id)
        if spending is None:
            return
        await self._audit_link(spending, reversed_=True)
        await self._delete(a.DeleteSpending(record_id=spending_id))

    async def add_obligation(self, obligation: Obligation) -> Obligation:
        await self._add(a.AddObligation(record=obligation))
        return obligation

    async def update_obligation(self, obligation_id: UUID, changes: dict) -> None:
        await self._update(a.UpdateObligation(record_id=obligation_id, changes=changes))

    async def delete_obligation(self, obligation_id: UUID) -> None:
        await self._delete(a.DeleteObligation(record_id=obligation_id))

    async def add_asset(self, asset: Asset) -> Asset:
        await self._add(a.AddAsset(record=asset))
        return asset

    async def update_asset(self, asset_id: UUID, changes: dict) -> None:
        await self._update(a.UpdateAsset(record_id=asset_id, changes=changes))

    async def delete_asset(self, asset_id: UUID) -> None:
        await self._delete(a.DeleteAsset(record_id=asset_id))

    async def add_budget(self, budget: Budget) -> Budget:
        await self._add(a.AddBudget(record=budget))
        return budget

    async def update_budget(self, budget_id: UUID, changes: dict) -> None:
        await self._update(a.UpdateBudget(record_id=budget_id, changes=changes))

    async def delete_budget(self, budget_id: UUID) -> None:
        await self._delete(a.DeleteBudget(record_id=budget_id))

    async def reset_data(self) -> bool:
        """Clear every local record and empty the remote tables."""
        correlation_id = create_correlation_id()
        self.dispatch(a.ResetData())
        await self._audit.log_data_reset(correlation_id)
        return await self._sync(SYNCED_COLLECTIONS, correlation_id)

    async def load_demo_data(self, year: Optional[int] = None, seed: Optional[int] = None) -> None:
        """Replace incomes, spendings and obligations with a generated year. Not synced."""
        action = generate_demo_data(year, seed)
        self.dispatch(action)
        await self._audit.log_data_replaced("demo", self.state.record_counts())

    # =========================================================================
    # PREFERENCES
    # =========================================================================

    async def set_language(self, language: str) -> None:
        self.dispatch(a.SetLanguage(language=language))
        profile = self.state.profile
        if profile is not None and self._auth is not None:
            try:
                await self._auth.update_language(profile.id, language)
            except StorageError as e:
                self.dispatch(a.SetError(message=str(e)))
                await self._audit.log_external_service_error("profile_storage", str(e))

    def set_currency(self, currency: str) -> None:
        self.dispatch(a.SetCurrency(currency=currency))

    def set_amount_hidden(self, hidden: bool) -> None:
        self.dispatch(a.SetAmountHidden(hidden=hidden))

    def set_category_color(self, category: str, color: str) -> None:
        self.dispatch(a.SetCategoryColor(category=category, color=color))

    def add_custom_color(self, color: str) -> None:
        self.dispatch(a.AddUserCustomColor(color=color))

    def clear_error(self) -> None:
        self.dispatch(a.SetError(message=None))

    # =========================================================================
    # PRICES & EXPORT
    # =========================================================================

    async def refresh_prices(self) -> SpotPrices:
        """Fetch live prices. Failed feeds keep their last value."""
        if self._prices is None:
            self._prices = PriceFeedService()
        self.prices = await self._prices.fetch_prices(self.prices)
        for feed, message in self._prices.failures:
            await self._audit.log_price_feed_failed(feed, message)
        return self.prices

    def export_summary(self, today: Optional[date] = None) -> dict[str, str]:
        """Headline figures for the PDF report."""
        today = today or date.today()
        s = self.state
        month = month_totals(s.incomes, s.spendings, today.year, today.month)

        def fmt(value) -> str:
            return format_currency(value, s.currency)

        return {
            "Net cash balance": fmt(net_cash_balance(s.incomes, s.spendings)),
            f"{month.label} income": fmt(month.income),
            f"{month.label} expense": fmt(month.expense),
            "Total debt": fmt(obligation_overview(s.obligations).total_debt),
            "Asset value": fmt(total_asset_value(s.assets, self.prices)),
        }

    def _export_path(self, kind: str, path: Optional[Union[str, Path]], today: Optional[date]) -> Path:
        if path is not None:
            return Path(path)
        return self._settings.export_path / default_export_filename(kind, today)

    async def export_excel(
        self,
        path: Optional[Union[str, Path]] = None,
        today: Optional[date] = None,
    ) -> Path:
        """
        Raises:
            ExportError: If the workbook can't be written
        """
        target = export_excel(ExportData.from_state(self.state), self._export_path("excel", path, today))
        await self._audit.log_export_generated("excel", str(target))
        return target

    async def export_pdf(
        self,
        path: Optional[Union[str, Path]] = None,
        today: Optional[date] = None,
    ) -> Path:
        """
        Raises:
            ExportError: If the report can't be written
        """
        target = export_pdf(
            ExportData.from_state(self.state),
            self._export_path("pdf", path, today),
            summary=self.export_summary(today),
        )
        await self._audit.log_export_generated("pdf", str(target))
        return target


def create_app_components(
    use_storage: bool = True,
    state_file: Optional[LocalStateFile] = None,
) -> FinanceController:
    """
    Factory function to create the application controller.

    Args:
        use_storage: Whether to initialize Google Sheets storage.
                    Set to False to run offline.
        state_file: Where to keep local state (defaults to the STATE_FILE setting)

    Returns:
        A controller with its saved local state loaded
    """
    record_storage = None
    profile_storage = None
    audit_logger = None

    if use_storage:
        try:
            sheets_client = GoogleSheetsClient()
            record_storage = GoogleSheetsRecordStorage(sheets_client)
            profile_storage = GoogleSheetsProfileStorage(sheets_client)
            audit_logger = AuditLogger(GoogleSheetsAuditStorage(sheets_client))
        except Exception as e:
            # Storage not configured - keep records for this process only
            print(f"Warning: Storage not configured, using in-memory storage: {e}")
            record_storage = InMemoryRecordStorage()
            profile_storage = InMemoryProfileStorage()
            audit_logger = AuditLogger()
    else:
        audit_logger = AuditLogger()

    controller = FinanceController(
        record_storage=record_storage,
        profile_storage=profile_storage,
        audit_logger=audit_logger,
        state_file=state_file or LocalStateFile(),
    )
    try:
        controller.load()
    except StorageError as e:
        # Unreadable state file - start fresh, the next change overwrites it
        print(f"Warning: Could not load saved state, starting fresh: {e}")
    return controller
