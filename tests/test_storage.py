"""Tests for the storage backends and the local state file."""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from cashflow.audit import AuditLogger
from cashflow.models.audit import AuditEventBuilder, AuditEventType
from cashflow.models.records import Asset, AssetType, Income, Profile
from cashflow.services.storage import (
    DuplicateError,
    GoogleSheetsAuditStorage,
    GoogleSheetsProfileStorage,
    GoogleSheetsRecordStorage,
    InMemoryProfileStorage,
    InMemoryRecordStorage,
    LocalStateFile,
    NotFoundError,
    StorageError,
)
from cashflow.services.storage.rows import TABLE_COLUMNS, record_to_row, row_to_record
from cashflow.state.app_state import AppState


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the storage code."""

    def __init__(self, header):
        self.values = [list(header)]
        self.fail = False

    def get_all_values(self):
        if self.fail:
            raise RuntimeError("quota exceeded")
        return [list(row) for row in self.values]

    def update(self, range_name, values, value_input_option=None):
        idx = int(range_name[1:])
        self.values[idx - 1] = list(values[0])

    def delete_rows(self, idx):
        del self.values[idx - 1]

    def append_rows(self, rows, value_input_option=None):
        self.values.extend(list(r) for r in rows)

    def append_row(self, row, value_input_option=None):
        self.values.append(list(row))

    def update_cell(self, row, col, value):
        self.values[row - 1][col - 1] = value

    def data_rows(self):
        return self.values[1:]


class FakeClient:
    def __init__(self):
        self.sheets = {}

    def get_worksheet(self, table, columns):
        if table not in self.sheets:
            self.sheets[table] = FakeWorksheet(columns)
        return self.sheets[table]


def salary(amount="65000"):
    return Income(name="Salary", amount=Decimal(amount), category="Salary", date=date(2026, 1, 28))


class TestRowProjection:
    """Tests for the flat row form."""

    def test_row_round_trip(self, iphone):
        """Test that an obligation survives the string projection."""
        profile_id = uuid4()
        row = record_to_row(iphone, "obligations", profile_id)
        assert row["profile_id"] == str(profile_id)
        assert row["credit_limit"] == ""
        assert row_to_record("obligations", row) == iphone

    def test_profile_id_is_not_a_record_field(self, make_payment, iphone):
        """Test that the owner column is dropped on the way back."""
        payment = make_payment(iphone)
        row = record_to_row(payment, "spendings", uuid4())
        assert set(row) == set(TABLE_COLUMNS["spendings"])
        assert row_to_record("spendings", row).linked_obligation_id == iphone.id


class TestInMemoryRecordStorage:
    """Tests for the in-memory record tables."""

    @pytest.mark.asyncio
    async def test_sync_upserts_and_deletes(self):
        """Test that sync makes the table match the local list."""
        storage = InMemoryRecordStorage()
        profile_id = uuid4()
        first, second = salary(), salary("1000")
        await storage.sync_incomes(profile_id, [first, second])

        changed = first.model_copy(update={"amount": Decimal("70000")})
        await storage.sync_incomes(profile_id, [changed])

        rows = storage.rows_for("incomes", profile_id)
        assert len(rows) == 1
        assert rows[0]["amount"] == "70000"

    @pytest.mark.asyncio
    async def test_empty_sync_clears_only_that_profile(self):
        """Test that syncing an empty list leaves other profiles alone."""
        storage = InMemoryRecordStorage()
        mine, theirs = uuid4(), uuid4()
        await storage.sync_incomes(mine, [salary()])
        await storage.sync_incomes(theirs, [salary()])

        await storage.sync_incomes(mine, [])

        assert storage.rows_for("incomes", mine) == []
        assert len(storage.rows_for("incomes", theirs)) == 1

    @pytest.mark.asyncio
    async def test_fetch_all_returns_synced_records(self, iphone, make_payment):
        """Test that fetched records equal the synced ones."""
        storage = InMemoryRecordStorage()
        profile_id = uuid4()
        payment = make_payment(iphone)
        await storage.sync_obligations(profile_id, [iphone])
        await storage.sync_spendings(profile_id, [payment])

        snapshot = await storage.fetch_all(profile_id)
        assert snapshot.obligations == [iphone]
        assert snapshot.spendings == [payment]
        assert snapshot.counts()["incomes"] == 0

    @pytest.mark.asyncio
    async def test_unknown_table_rejected(self):
        """Test that budgets have no remote table."""
        with pytest.raises(StorageError):
            await InMemoryRecordStorage().sync_collection(uuid4(), "budgets", [])


class TestInMemoryProfileStorage:
    """Tests for the in-memory profiles table."""

    @pytest.mark.asyncio
    async def test_create_and_update(self):
        """Test create, duplicate and field updates."""
        storage = InMemoryProfileStorage()
        profile = await storage.create(Profile(user_id_text="alice", pin_hash="123456"))

        with pytest.raises(DuplicateError):
            await storage.create(Profile(user_id_text="alice", pin_hash="000000"))

        await storage.update_language(profile.id, "th")
        found = await storage.get_by_user_id("alice")
        assert found.language == "th"
        assert found.id == profile.id

    @pytest.mark.asyncio
    async def test_update_missing_profile(self):
        """Test that updating an unknown profile raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await InMemoryProfileStorage().update_pin(uuid4(), "111111")


class TestGoogleSheetsRecordStorage:
    """Tests for the Sheets record tables against a fake worksheet."""

    @pytest.mark.asyncio
    async def test_sync_updates_deletes_and_appends(self):
        """Test that one sync updates kept rows, drops stale ones and appends new ones."""
        client = FakeClient()
        storage = GoogleSheetsRecordStorage(client=client)
        profile_id = uuid4()
        kept, dropped = salary(), salary("1000")
        await storage.sync_incomes(profile_id, [kept, dropped])
        assert len(client.sheets["incomes"].data_rows()) == 2

        added = salary("500")
        changed = kept.model_copy(update={"amount": Decimal("70000")})
        await storage.sync_incomes(profile_id, [changed, added])

        snapshot = await storage.fetch_all(profile_id)
        assert {i.id for i in snapshot.incomes} == {kept.id, added.id}
        assert next(i for i in snapshot.incomes if i.id == kept.id).amount == Decimal("70000")
        assert len(client.sheets["incomes"].data_rows()) == 2

    @pytest.mark.asyncio
    async def test_collection_wrappers_write_their_tables(self, iphone, make_payment):
        """Test that each per-collection sync lands in its own worksheet."""
        client = FakeClient()
        storage = GoogleSheetsRecordStorage(client=client)
        profile_id = uuid4()
        gold = Asset(name="Gold bar", type=AssetType.GOLD, quantity=Decimal("1"), unit="baht")

        await storage.sync_incomes(profile_id, [salary()])
        await storage.sync_spendings(profile_id, [make_payment(iphone)])
        await storage.sync_obligations(profile_id, [iphone])
        await storage.sync_assets(profile_id, [gold])

        assert {t: len(ws.data_rows()) for t, ws in client.sheets.items()} == {
            "incomes": 1,
            "spendings": 1,
            "obligations": 1,
            "assets": 1,
        }
        snapshot = await storage.fetch_all(profile_id)
        assert snapshot.assets == [gold]
        assert snapshot.obligations == [iphone]

    @pytest.mark.asyncio
    async def test_other_profiles_rows_untouched(self):
        """Test that a profile's sync never deletes another profile's rows."""
        client = FakeClient()
        storage = GoogleSheetsRecordStorage(client=client)
        mine, theirs = uuid4(), uuid4()
        await storage.sync_incomes(theirs, [salary()])
        await storage.sync_incomes(mine, [salary()])

        await storage.sync_incomes(mine, [])

        rows = client.sheets["incomes"].data_rows()
        assert len(rows) == 1
        assert rows[0][1] == str(theirs)

    @pytest.mark.asyncio
    async def test_malformed_rows_are_skipped(self):
        """Test that a bad row doesn't break the fetch."""
        client = FakeClient()
        storage = GoogleSheetsRecordStorage(client=client)
        profile_id = uuid4()
        await storage.sync_incomes(profile_id, [salary()])
        client.sheets["incomes"].values.append(
            [str(uuid4()), str(profile_id), "Broken", "not-a-number", "Salary",
             "monthly", "2026-01-01", ""]
        )

        snapshot = await storage.fetch_all(profile_id)
        assert len(snapshot.incomes) == 1

    @pytest.mark.asyncio
    async def test_failures_become_storage_errors(self):
        """Test that backend exceptions surface as StorageError."""
        client = FakeClient()
        storage = GoogleSheetsRecordStorage(client=client)
        client.get_worksheet("spendings", TABLE_COLUMNS["spendings"]).fail = True

        with pytest.raises(StorageError, match="Failed to sync spendings"):
            await storage.sync_collection(uuid4(), "spendings", [])


class TestGoogleSheetsProfileAndAudit:
    """Tests for the Sheets profiles and audit tables."""

    @pytest.mark.asyncio
    async def test_profile_lifecycle(self):
        """Test create, lookup and PIN update."""
        storage = GoogleSheetsProfileStorage(client=FakeClient())
        profile = await storage.create(Profile(user_id_text="bob", pin_hash="123456"))
        await storage.update_pin(profile.id, "654321")

        found = await storage.get_by_user_id("bob")
        assert found.pin_hash == "654321"
        assert await storage.get_by_user_id("nobody") is None

        with pytest.raises(DuplicateError):
            await storage.create(Profile(user_id_text="bob", pin_hash="000000"))

    @pytest.mark.asyncio
    async def test_audit_round_trip(self):
        """Test that appended events read back newest first."""
        storage = GoogleSheetsAuditStorage(client=FakeClient())
        first = AuditEventBuilder.data_reset()
        second = AuditEventBuilder.sync_completed("incomes", 3)
        assert await storage.append_event(first)
        assert await storage.append_event(second)

        events = await storage.get_recent_events(limit=10)
        assert [e.event_id for e in events] == [second.event_id, first.event_id]
        assert events[0].details["record_count"] == 3

    @pytest.mark.asyncio
    async def test_logger_recent_events(self):
        """Test that the audit logger reads back its sink, newest first."""
        audit = AuditLogger(GoogleSheetsAuditStorage(client=FakeClient()))
        await audit.log_data_reset()
        await audit.log_sync_failed("incomes", "quota exceeded")

        events = await audit.recent_events(limit=5)
        assert [e.event_type for e in events] == [
            AuditEventType.SYNC_FAILED,
            AuditEventType.DATA_RESET,
        ]
        assert await AuditLogger().recent_events() == []

    @pytest.mark.asyncio
    async def test_audit_write_failure_returns_false(self):
        """Test that a broken sheet never raises from append_event."""
        client = FakeClient()
        client.get_worksheet("audit", []).append_row = None
        storage = GoogleSheetsAuditStorage(client=client)
        assert await storage.append_event(AuditEventBuilder.data_reset()) is False


class TestLocalStateFile:
    """Tests for the local JSON state file."""

    def test_missing_file_loads_nothing(self, tmp_path):
        """Test that a first run has no saved state."""
        assert LocalStateFile(tmp_path / "state.json").load() is None

    def test_save_and_load(self, tmp_path, iphone):
        """Test that records and preferences persist, transient flags don't."""
        store = LocalStateFile(tmp_path / "nested" / "state.json")
        store.save(AppState(
            obligations=[iphone],
            language="th",
            is_syncing=True,
            error="boom",
        ))

        loaded = store.load()
        assert loaded.obligations == [iphone]
        assert loaded.language == "th"
        assert loaded.is_syncing is False
        assert loaded.error is None
        assert "is_syncing" not in store.path.read_text(encoding="utf-8")

    def test_corrupt_file_raises(self, tmp_path):
        """Test that an unreadable file is a StorageError."""
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            LocalStateFile(path).load()

    def test_clear(self, tmp_path):
        """Test that clear removes the file and tolerates a missing one."""
        store = LocalStateFile(tmp_path / "state.json")
        store.save(AppState())
        store.clear()
        store.clear()
        assert not store.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
