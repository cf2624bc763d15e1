"""
In-memory storage backends.

Used when Google Sheets isn't configured and by the test suite. Rows are
kept in the same flat string form the Sheets backend writes, so records
go through the same projection on the way in and out.
"""

from typing import Optional, Sequence
from uuid import UUID

from pydantic import BaseModel

from cashflow.models.audit import AuditEvent
from cashflow.models.records import Profile
from cashflow.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    ProfileStorageInterface,
    RecordStorageInterface,
    RemoteSnapshot,
    StorageError,
)
from cashflow.services.storage.rows import (
    TABLE_COLUMNS,
    profile_to_row,
    record_to_row,
    row_to_profile,
    row_to_record,
)


class InMemoryRecordStorage(RecordStorageInterface):
    def __init__(self):
        self.tables: dict[str, list[dict[str, str]]] = {t: [] for t in TABLE_COLUMNS}

    def rows_for(self, table: str, profile_id: UUID) -> list[dict[str, str]]:
        return [r for r in self.tables[table] if r["profile_id"] == str(profile_id)]

    async def fetch_all(self, profile_id: UUID) -> RemoteSnapshot:
        return RemoteSnapshot(**{
            table: [row_to_record(table, row) for row in self.rows_for(table, profile_id)]
            for table in TABLE_COLUMNS
        })

    async def sync_collection(
        self,
        profile_id: UUID,
        table: str,
        records: Sequence[BaseModel],
    ) -> None:
        if table not in TABLE_COLUMNS:
            raise StorageError(f"Unknown table: {table}")

        wanted = {str(r.id): record_to_row(r, table, profile_id) for r in records}
        kept = []
        for row in self.tables[table]:
            if row["profile_id"] != str(profile_id):
                kept.append(row)
            elif row["id"] in wanted:
                kept.append(wanted.pop(row["id"]))
        kept.extend(wanted.values())
        self.tables[table] = kept


class InMemoryProfileStorage(ProfileStorageInterface):
    def __init__(self):
        self.rows: list[dict[str, str]] = []

    def _find(self, key: str, value: str) -> Optional[dict[str, str]]:
        return next((r for r in self.rows if r[key] == value), None)

    async def get_by_user_id(self, user_id_text: str) -> Optional[Profile]:
        row = self._find("user_id_text", user_id_text)
        return row_to_profile(row) if row else None

    async def create(self, profile: Profile) -> Profile:
        if self._find("user_id_text", profile.user_id_text):
            raise DuplicateError(f"User id already registered: {profile.user_id_text}")
        self.rows.append(profile_to_row(profile))
        return profile

    def _update(self, profile_id: UUID, field: str, value: str) -> None:
        row = self._find("id", str(profile_id))
        if row is None:
            raise NotFoundError(f"Profile not found: {profile_id}")
        row[field] = value

    async def update_pin(self, profile_id: UUID, pin_hash: str) -> None:
        self._update(profile_id, "pin_hash", pin_hash)

    async def update_language(self, profile_id: UUID, language: str) -> None:
        self._update(profile_id, "language", language)


class InMemoryAuditStorage(AuditStorageInterface):
    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self.events))[:limit]
