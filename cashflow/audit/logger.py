"""
Audit Logger

DESIGN DECISION: Every change to the user's money data is logged.
This provides:
1. A trail of what was added, changed and removed
2. Visibility into sync and price-feed failures
3. Debugging capability

The audit logger:
- Is async so it can sit next to the network calls it describes
- Gracefully handles failures (a broken audit sink never breaks the app)
- Supports correlation IDs to trace one user action across syncs
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from cashflow.models.audit import AuditEvent, AuditEventBuilder
from cashflow.services.storage.interface import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log
    2. An audit sink (Google Sheets or in-memory), when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("cashflow.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Newest persisted events, or an empty list without a sink."""
        if self._storage is None:
            return []
        return await self._storage.get_recent_events(limit)

    async def log_record_added(
        self,
        entity_type: str,
        entity_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.record_added(
            entity_type, entity_id, name, correlation_id,
        ))

    async def log_record_updated(
        self,
        entity_type: str,
        entity_id: UUID,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.record_updated(
            entity_type, entity_id, fields, correlation_id,
        ))

    async def log_record_deleted(
        self,
        entity_type: str,
        entity_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.record_deleted(
            entity_type, entity_id, correlation_id,
        ))

    async def log_data_reset(self, correlation_id: Optional[UUID] = None) -> None:
        await self.log(AuditEventBuilder.data_reset(correlation_id))

    async def log_data_replaced(
        self,
        source: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.data_replaced(source, counts, correlation_id))

    async def log_obligation_payment(
        self,
        obligation_id: UUID,
        spending_id: UUID,
        amount: str,
        reversed_: bool = False,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a payment applied to (or taken back from) an obligation."""
        await self.log(AuditEventBuilder.obligation_payment(
            obligation_id=obligation_id,
            spending_id=spending_id,
            amount=amount,
            reversed_=reversed_,
            correlation_id=correlation_id,
        ))

    async def log_link_dangling(
        self,
        spending_id: UUID,
        obligation_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.obligation_link_dangling(
            spending_id, obligation_id, correlation_id,
        ))

    async def log_sync_completed(
        self,
        collection: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.sync_completed(
            collection, record_count, correlation_id,
        ))

    async def log_sync_failed(
        self,
        collection: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed sync. Local state is kept as-is."""
        await self.log(AuditEventBuilder.sync_failed(
            collection, error_message, correlation_id,
        ))

    async def log_fetch_completed(
        self,
        profile_id: UUID,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.fetch_completed(profile_id, counts, correlation_id))

    async def log_login_succeeded(
        self,
        profile_id: UUID,
        user_id_text: str,
        created: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.login_succeeded(
            profile_id, user_id_text, created, correlation_id,
        ))

    async def log_login_failed(
        self,
        user_id_text: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.login_failed(
            user_id_text, error_message, correlation_id,
        ))

    async def log_pin_changed(self, profile_id: Optional[UUID] = None) -> None:
        await self.log(AuditEventBuilder.pin_changed(profile_id))

    async def log_unlock_failed(self) -> None:
        await self.log(AuditEventBuilder.unlock_failed())

    async def log_price_feed_failed(
        self,
        feed: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.price_feed_failed(feed, error_message, correlation_id))

    async def log_export_generated(self, kind: str, path: str) -> None:
        await self.log(AuditEventBuilder.export_generated(kind, path))

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log external service error."""
        await self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g. adding a spending) and
    pass it to the syncs that action triggers.
    """
    return uuid4()
