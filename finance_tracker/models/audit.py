"""
Audit Models for Finance Tracker

Every ledger mutation is described by an AuditEvent and written to the
structured log. This gives:
1. Traceability of balance changes while debugging
2. A record of silently ignored operations (unknown ids)
3. Visibility of persistence failures that never reach the caller

DESIGN DECISION: Events are logged, not persisted. The ledger keeps no
audit trail of its own beyond the current records.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every collection operation has its own event type.
    """
    # Accounts
    ACCOUNT_ADDED = "account_added"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_DELETED = "account_deleted"
    MAIN_ACCOUNT_CHANGED = "main_account_changed"
    BALANCE_ADJUSTED = "balance_adjusted"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Expenses, taxes, investments
    RECORD_ADDED = "record_added"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"
    PAYMENT_STATUS_UPDATED = "payment_status_updated"

    # Ignored operations and rejected input
    RECORD_NOT_FOUND = "record_not_found"
    VALIDATION_FAILED = "validation_failed"
    VALIDATION_WARNING = "validation_warning"

    # Persistence
    SNAPSHOT_SAVED = "snapshot_saved"
    SNAPSHOT_LOADED = "snapshot_loaded"
    SAVE_FAILED = "save_failed"
    LOAD_FAILED = "load_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the ledger's log output.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what collection and record is this about?
    collection: Optional[str] = Field(
        default=None,
        description="Collection name (e.g., 'accounts', 'transactions')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "collection": self.collection,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.balance_adjusted(account_id, delta, balance)
        event = AuditEventBuilder.record_not_found("transactions", tx_id, "update")
    """

    @staticmethod
    def record_added(
        collection: str,
        entity_id: UUID,
        summary: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        event_type = {
            "accounts": AuditEventType.ACCOUNT_ADDED,
            "transactions": AuditEventType.TRANSACTION_ADDED,
        }.get(collection, AuditEventType.RECORD_ADDED)
        return AuditEvent(
            event_type=event_type,
            collection=collection,
            entity_id=entity_id,
            description=f"Added to {collection}: {summary}",
            details=details or {},
        )

    @staticmethod
    def record_updated(
        collection: str,
        entity_id: UUID,
        changed_fields: list[str],
    ) -> AuditEvent:
        event_type = {
            "accounts": AuditEventType.ACCOUNT_UPDATED,
            "transactions": AuditEventType.TRANSACTION_UPDATED,
        }.get(collection, AuditEventType.RECORD_UPDATED)
        return AuditEvent(
            event_type=event_type,
            collection=collection,
            entity_id=entity_id,
            description=f"Updated {collection} record ({', '.join(changed_fields) or 'no changes'})",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def record_deleted(
        collection: str,
        entity_id: UUID,
    ) -> AuditEvent:
        event_type = {
            "accounts": AuditEventType.ACCOUNT_DELETED,
            "transactions": AuditEventType.TRANSACTION_DELETED,
        }.get(collection, AuditEventType.RECORD_DELETED)
        return AuditEvent(
            event_type=event_type,
            collection=collection,
            entity_id=entity_id,
            description=f"Deleted from {collection}",
        )

    @staticmethod
    def main_account_changed(
        account_id: UUID,
        previous_id: Optional[UUID],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MAIN_ACCOUNT_CHANGED,
            collection="accounts",
            entity_id=account_id,
            description="Main account changed",
            details={
                "previous_main_id": str(previous_id) if previous_id else None,
            },
        )

    @staticmethod
    def balance_adjusted(
        account_id: UUID,
        delta: Decimal,
        new_balance: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_ADJUSTED,
            collection="accounts",
            entity_id=account_id,
            description=f"Balance adjusted by {delta}",
            details={
                "delta": str(delta),
                "balance": str(new_balance),
            },
        )

    @staticmethod
    def payment_status_updated(
        collection: str,
        entity_id: UUID,
        paid: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_STATUS_UPDATED,
            collection=collection,
            entity_id=entity_id,
            description=f"Marked as {'paid' if paid else 'unpaid'}",
            details={"paid": paid},
        )

    @staticmethod
    def record_not_found(
        collection: str,
        entity_id: UUID,
        operation: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.DEBUG,
            collection=collection,
            entity_id=entity_id,
            description=f"Ignored {operation}: no such record in {collection}",
            details={"operation": operation},
        )

    @staticmethod
    def validation_failed(
        collection: str,
        issues: list[dict],
        entity_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            collection=collection,
            entity_id=entity_id,
            description=f"Rejected write to {collection} with {len(issues)} issues",
            details={"issues": issues},
        )

    @staticmethod
    def validation_warning(
        collection: str,
        issues: list[dict],
        entity_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_WARNING,
            severity=AuditSeverity.WARNING,
            collection=collection,
            entity_id=entity_id,
            description=f"Accepted write to {collection} with {len(issues)} warnings",
            details={"issues": issues},
        )

    @staticmethod
    def snapshot_saved(
        collection: str,
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_SAVED,
            severity=AuditSeverity.DEBUG,
            collection=collection,
            description=f"Saved {collection} snapshot",
            details={"record_count": record_count},
        )

    @staticmethod
    def snapshot_loaded(
        collection: str,
        record_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOADED,
            collection=collection,
            description=f"Loaded {record_count} records into {collection}",
            details={"record_count": record_count},
        )

    @staticmethod
    def save_failed(
        collection: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            collection=collection,
            description=f"Failed to save {collection} snapshot",
            error_message=error_message,
        )

    @staticmethod
    def load_failed(
        collection: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            collection=collection,
            description=f"Failed to load {collection} snapshot, starting empty",
            error_message=error_message,
        )
