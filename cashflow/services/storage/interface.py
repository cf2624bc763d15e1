"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap Google Sheets for a real database later
2. Use in-memory storage for testing and offline use
3. Keep the controller decoupled from storage implementation

The remote store is a mirror of the local state, not the source of truth.
Syncing a collection is full-replace: every local record is upserted by
id and every remote row for the profile that is no longer local is deleted.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from uuid import UUID

from pydantic import BaseModel, Field

from cashflow.models.audit import AuditEvent
from cashflow.models.records import Asset, Income, Obligation, Profile, Spending


class RemoteSnapshot(BaseModel):
    """Everything stored remotely for one profile."""

    incomes: list[Income] = Field(default_factory=list)
    spendings: list[Spending] = Field(default_factory=list)
    obligations: list[Obligation] = Field(default_factory=list)
    assets: list[Asset] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "incomes": len(self.incomes),
            "spendings": len(self.spendings),
            "obligations": len(self.obligations),
            "assets": len(self.assets),
        }


class RecordStorageInterface(ABC):
    """
    Abstract interface for the per-collection remote tables.

    Any storage implementation (Google Sheets, PostgreSQL, etc.)
    must implement fetch_all and sync_collection.
    """

    @abstractmethod
    async def fetch_all(self, profile_id: UUID) -> RemoteSnapshot:
        """
        Fetch every record stored for a profile.

        Raises:
            StorageError: If the fetch fails
        """
        pass

    @abstractmethod
    async def sync_collection(
        self,
        profile_id: UUID,
        table: str,
        records: Sequence[BaseModel],
    ) -> None:
        """
        Make the remote table match `records` for this profile.

        Args:
            profile_id: Owner of the rows
            table: One of incomes, spendings, obligations, assets
            records: The complete local collection (may be empty)

        Raises:
            StorageError: If any remote call fails. Rows already written
                stay written; there is no rollback.
        """
        pass

    async def sync_incomes(self, profile_id: UUID, incomes: Sequence[Income]) -> None:
        await self.sync_collection(profile_id, "incomes", incomes)

    async def sync_spendings(self, profile_id: UUID, spendings: Sequence[Spending]) -> None:
        await self.sync_collection(profile_id, "spendings", spendings)

    async def sync_obligations(self, profile_id: UUID, obligations: Sequence[Obligation]) -> None:
        await self.sync_collection(profile_id, "obligations", obligations)

    async def sync_assets(self, profile_id: UUID, assets: Sequence[Asset]) -> None:
        await self.sync_collection(profile_id, "assets", assets)


class ProfileStorageInterface(ABC):
    """Abstract interface for the remote profiles table."""

    @abstractmethod
    async def get_by_user_id(self, user_id_text: str) -> Optional[Profile]:
        """
        Look up a profile by its (already normalized) user id.

        Returns:
            The profile if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, profile: Profile) -> Profile:
        """
        Insert a new profile.

        Raises:
            DuplicateError: If the user id is already taken
        """
        pass

    @abstractmethod
    async def update_pin(self, profile_id: UUID, pin_hash: str) -> None:
        """
        Raises:
            NotFoundError: If the profile doesn't exist
        """
        pass

    @abstractmethod
    async def update_language(self, profile_id: UUID, language: str) -> None:
        """
        Raises:
            NotFoundError: If the profile doesn't exist
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
