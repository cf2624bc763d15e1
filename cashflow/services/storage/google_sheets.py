"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the remote mirror because:
1. Users can view and fix their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

Each remote table is one worksheet whose first row is the header. All
profiles share a worksheet; rows are filtered by the profile_id column.

TRADEOFFS:
- Not suitable for high-volume data (fine for one household)
- No transactions: a sync that fails midway leaves earlier writes in place
- Limited query capabilities (we filter in Python)

gspread is blocking, so every public coroutine hands the work to a
worker thread.
"""

import asyncio
from typing import Optional, Sequence
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from pydantic import BaseModel, ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from cashflow.config import get_settings
from cashflow.config.settings import GoogleSheetsSettings
from cashflow.models.audit import AUDIT_COLUMNS, AuditEvent
from cashflow.models.records import Profile
from cashflow.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    DuplicateError,
    NotFoundError,
    ProfileStorageInterface,
    RecordStorageInterface,
    RemoteSnapshot,
    StorageError,
)
from cashflow.services.storage.rows import (
    PROFILE_COLUMNS,
    TABLE_COLUMNS,
    ordered,
    profile_to_row,
    record_to_row,
    row_to_profile,
    row_to_record,
)

logger = structlog.get_logger("cashflow.storage")


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for the initial
    connection. Individual reads and writes are not retried.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_worksheet(self, table: str, columns: list[str]) -> gspread.Worksheet:
        """Get or create the worksheet for a table, writing the header on creation."""
        spreadsheet = self.get_spreadsheet()
        title = self._settings.sheet_name_for(table)
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet


def _rows_as_dicts(all_values: list[list[str]], columns: list[str]):
    """Yield (sheet_row_number, cells) for every data row below the header."""
    for idx, row in enumerate(all_values[1:], start=2):
        if row and any(row):
            yield idx, dict(zip(columns, row))


class GoogleSheetsRecordStorage(RecordStorageInterface):
    """
    Google Sheets implementation of the incomes/spendings/obligations/assets tables.

    One record per row. Sync updates rows whose id is still local, deletes
    rows that are not (bottom-up so row numbers stay valid), then appends
    the remaining local records in one call.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _read_table(self, table: str, profile_id: UUID) -> list[BaseModel]:
        columns = TABLE_COLUMNS[table]
        sheet = self._client.get_worksheet(table, columns)
        records = []
        for idx, cells in _rows_as_dicts(sheet.get_all_values(), columns):
            if cells.get("profile_id") != str(profile_id):
                continue
            try:
                records.append(row_to_record(table, cells))
            except ValidationError as e:
                logger.warning(
                    "skipping malformed row",
                    table=table,
                    row=idx,
                    error=str(e),
                )
        return records

    def _fetch_all(self, profile_id: UUID) -> RemoteSnapshot:
        return RemoteSnapshot(**{
            table: self._read_table(table, profile_id) for table in TABLE_COLUMNS
        })

    async def fetch_all(self, profile_id: UUID) -> RemoteSnapshot:
        try:
            return await asyncio.to_thread(self._fetch_all, profile_id)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to fetch records: {e}")

    def _sync_table(
        self,
        profile_id: UUID,
        table: str,
        records: Sequence[BaseModel],
    ) -> None:
        columns = TABLE_COLUMNS[table]
        sheet = self._client.get_worksheet(table, columns)

        wanted = {str(r.id): record_to_row(r, table, profile_id) for r in records}
        written: set[str] = set()
        stale: list[int] = []

        for idx, cells in _rows_as_dicts(sheet.get_all_values(), columns):
            if cells.get("profile_id") != str(profile_id):
                continue
            row_id = cells.get("id", "")
            if row_id in wanted and row_id not in written:
                sheet.update(
                    range_name=f"A{idx}",
                    values=[ordered(wanted[row_id], columns)],
                    value_input_option="RAW",
                )
                written.add(row_id)
            else:
                stale.append(idx)

        for idx in reversed(stale):
            sheet.delete_rows(idx)

        new_rows = [
            ordered(row, columns) for row_id, row in wanted.items()
            if row_id not in written
        ]
        if new_rows:
            sheet.append_rows(new_rows, value_input_option="RAW")

        logger.debug(
            "table synced",
            table=table,
            updated=len(written),
            deleted=len(stale),
            appended=len(new_rows),
        )

    async def sync_collection(
        self,
        profile_id: UUID,
        table: str,
        records: Sequence[BaseModel],
    ) -> None:
        if table not in TABLE_COLUMNS:
            raise StorageError(f"Unknown table: {table}")
        try:
            await asyncio.to_thread(self._sync_table, profile_id, table, records)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to sync {table}: {e}")


class GoogleSheetsProfileStorage(ProfileStorageInterface):
    """Google Sheets implementation of the profiles table."""

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _sheet(self) -> gspread.Worksheet:
        return self._client.get_worksheet("profiles", PROFILE_COLUMNS)

    def _find(self, key: str, value: str) -> Optional[tuple[int, dict[str, str]]]:
        for idx, cells in _rows_as_dicts(self._sheet().get_all_values(), PROFILE_COLUMNS):
            if cells.get(key) == value:
                return idx, cells
        return None

    def _get_by_user_id(self, user_id_text: str) -> Optional[Profile]:
        found = self._find("user_id_text", user_id_text)
        return row_to_profile(found[1]) if found else None

    async def get_by_user_id(self, user_id_text: str) -> Optional[Profile]:
        try:
            return await asyncio.to_thread(self._get_by_user_id, user_id_text)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to look up profile: {e}")

    def _create(self, profile: Profile) -> Profile:
        if self._find("user_id_text", profile.user_id_text):
            raise DuplicateError(f"User id already registered: {profile.user_id_text}")
        self._sheet().append_row(
            ordered(profile_to_row(profile), PROFILE_COLUMNS),
            value_input_option="RAW",
        )
        return profile

    async def create(self, profile: Profile) -> Profile:
        try:
            return await asyncio.to_thread(self._create, profile)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to create profile: {e}")

    def _update_field(self, profile_id: UUID, field: str, value: str) -> None:
        found = self._find("id", str(profile_id))
        if found is None:
            raise NotFoundError(f"Profile not found: {profile_id}")
        idx, _ = found
        self._sheet().update_cell(idx, PROFILE_COLUMNS.index(field) + 1, value)

    async def update_pin(self, profile_id: UUID, pin_hash: str) -> None:
        try:
            await asyncio.to_thread(self._update_field, profile_id, "pin_hash", pin_hash)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update PIN: {e}")

    async def update_language(self, profile_id: UUID, language: str) -> None:
        try:
            await asyncio.to_thread(self._update_field, profile_id, "language", language)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update language: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _append(self, event: AuditEvent) -> None:
        sheet = self._client.get_worksheet("audit", AUDIT_COLUMNS)
        sheet.append_row(event.to_sheets_row(), value_input_option="RAW")

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event. Failures are logged, never raised."""
        try:
            await asyncio.to_thread(self._append, event)
            return True
        except Exception as e:
            logger.warning("failed to write audit event", error=str(e))
            return False

    def _recent(self, limit: int) -> list[AuditEvent]:
        sheet = self._client.get_worksheet("audit", AUDIT_COLUMNS)
        rows = sheet.get_all_values()[1:]
        events = []
        for row in reversed(rows):
            if len(events) >= limit:
                break
            if not row or not row[0]:
                continue
            try:
                events.append(AuditEvent.from_sheets_row(row))
            except (ValueError, ValidationError):
                continue
        return events

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        try:
            return await asyncio.to_thread(self._recent, limit)
        except Exception as e:
            raise StorageError(f"Failed to get recent events: {e}")
