"""
Audit Models for Cash Flow Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of record changes and their obligation side effects
2. Debugging information when sync or price feeds fail
3. Ability to reconstruct what happened in a session

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record changes
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    DATA_RESET = "data_reset"
    DATA_REPLACED = "data_replaced"

    # Obligation linkage
    OBLIGATION_PAYMENT_APPLIED = "obligation_payment_applied"
    OBLIGATION_PAYMENT_REVERSED = "obligation_payment_reversed"
    OBLIGATION_LINK_DANGLING = "obligation_link_dangling"

    # Sync
    SYNC_COMPLETED = "sync_completed"
    SYNC_FAILED = "sync_failed"
    FETCH_COMPLETED = "fetch_completed"

    # Authentication and lock
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    PROFILE_CREATED = "profile_created"
    PIN_CHANGED = "pin_changed"
    UNLOCK_FAILED = "unlock_failed"

    # Prices and export
    PRICE_FEED_FAILED = "price_feed_failed"
    EXPORT_GENERATED = "export_generated"

    # System events
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = Field(default=AuditSeverity.INFO)

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'spending', 'obligation', 'profile')"
    )
    entity_id: Optional[UUID] = None

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a change and its sync)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Columns follow AUDIT_COLUMNS.
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            str(self.entity_id) if self.entity_id else "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]

    @classmethod
    def from_sheets_row(cls, row: list) -> "AuditEvent":
        """Inverse of to_sheets_row. Missing trailing cells are treated as empty."""
        def safe_get(index: int) -> str:
            try:
                return row[index] or ""
            except IndexError:
                return ""

        return cls(
            event_id=UUID(safe_get(0)),
            timestamp=datetime.fromisoformat(safe_get(1)),
            event_type=AuditEventType(safe_get(2)),
            severity=AuditSeverity(safe_get(3)),
            entity_type=safe_get(4) or None,
            entity_id=UUID(safe_get(5)) if safe_get(5) else None,
            correlation_id=UUID(safe_get(6)) if safe_get(6) else None,
            description=safe_get(7),
            details=json.loads(safe_get(8)) if safe_get(8) else {},
            error_message=safe_get(9) or None,
            is_user_action=safe_get(10).lower() == "true",
        )


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_added("income", income_id, "Salary")
        event = AuditEventBuilder.sync_failed("spendings", "timeout", correlation_id)
    """

    @staticmethod
    def record_added(
        entity_type: str,
        entity_id: UUID,
        name: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} added: {name}",
            details={"name": name},
            is_user_action=True,
        )

    @staticmethod
    def record_updated(
        entity_type: str,
        entity_id: UUID,
        fields: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} updated",
            details={"fields": sorted(fields)},
            is_user_action=True,
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        entity_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def data_reset(correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_RESET,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="All local records cleared",
            is_user_action=True,
        )

    @staticmethod
    def data_replaced(
        source: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_REPLACED,
            correlation_id=correlation_id,
            description=f"Local records replaced from {source}",
            details={"source": source, "counts": counts},
        )

    @staticmethod
    def obligation_payment(
        obligation_id: UUID,
        spending_id: UUID,
        amount: str,
        reversed_: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.OBLIGATION_PAYMENT_REVERSED
            if reversed_
            else AuditEventType.OBLIGATION_PAYMENT_APPLIED
        )
        verb = "reversed" if reversed_ else "applied"
        return AuditEvent(
            event_type=event_type,
            entity_type="obligation",
            entity_id=obligation_id,
            correlation_id=correlation_id,
            description=f"Payment of {amount} {verb}",
            details={"spending_id": str(spending_id), "amount": amount},
        )

    @staticmethod
    def obligation_link_dangling(
        spending_id: UUID,
        obligation_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OBLIGATION_LINK_DANGLING,
            severity=AuditSeverity.WARNING,
            entity_type="spending",
            entity_id=spending_id,
            correlation_id=correlation_id,
            description="Spending links to an obligation that does not exist",
            details={"linked_obligation_id": str(obligation_id)},
        )

    @staticmethod
    def sync_completed(
        collection: str,
        record_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_COMPLETED,
            entity_type=collection,
            correlation_id=correlation_id,
            description=f"Synced {record_count} {collection}",
            details={"collection": collection, "record_count": record_count},
        )

    @staticmethod
    def sync_failed(
        collection: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=collection,
            correlation_id=correlation_id,
            description=f"Sync of {collection} failed",
            error_message=error_message,
            details={"collection": collection},
        )

    @staticmethod
    def fetch_completed(
        profile_id: UUID,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_COMPLETED,
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description="Fetched remote records",
            details={"counts": counts},
        )

    @staticmethod
    def login_succeeded(
        profile_id: UUID,
        user_id_text: str,
        created: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.PROFILE_CREATED if created
                else AuditEventType.LOGIN_SUCCEEDED
            ),
            entity_type="profile",
            entity_id=profile_id,
            correlation_id=correlation_id,
            description=(
                f"Profile created for {user_id_text}" if created
                else f"Logged in as {user_id_text}"
            ),
            details={"user_id_text": user_id_text},
            is_user_action=True,
        )

    @staticmethod
    def login_failed(
        user_id_text: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Login failed for {user_id_text}",
            error_message=error_message,
            details={"user_id_text": user_id_text},
            is_user_action=True,
        )

    @staticmethod
    def pin_changed(profile_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PIN_CHANGED,
            entity_type="profile",
            entity_id=profile_id,
            description="PIN changed",
            is_user_action=True,
        )

    @staticmethod
    def unlock_failed() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UNLOCK_FAILED,
            severity=AuditSeverity.WARNING,
            description="Wrong PIN entered on lock screen",
            is_user_action=True,
        )

    @staticmethod
    def price_feed_failed(
        feed: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PRICE_FEED_FAILED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Price feed failed: {feed}",
            error_message=error_message,
            details={"feed": feed},
        )

    @staticmethod
    def export_generated(kind: str, path: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            description=f"{kind.upper()} export written",
            details={"kind": kind, "path": path},
            is_user_action=True,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
