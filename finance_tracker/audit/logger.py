"""
Audit Logger

DESIGN DECISION: Every ledger mutation is logged as a structured event.
This provides:
1. Traceability of balance changes
2. A trace of operations that were silently ignored
3. Visibility of persistence failures

The audit logger:
- Is synchronous, so it can run inside a ledger critical section
- Has no side effects on ledger state
- Writes only to the structured log; nothing is persisted
"""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


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


def configure_logging(debug: bool = False) -> None:
    """
    Route structlog output through stdlib logging at the chosen level.

    Not-found and snapshot-saved events are DEBUG and only appear in
    debug mode.
    """
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )


class AuditLogger:
    """
    Central audit logging service for the ledger collections.

    One instance is shared by every collection of a FinanceTracker.
    """

    def __init__(self, logger_name: str = "finance_tracker.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_added(
        self,
        collection: str,
        entity_id: UUID,
        summary: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log a new record."""
        self.log(AuditEventBuilder.record_added(
            collection=collection,
            entity_id=entity_id,
            summary=summary,
            details=details,
        ))

    def log_updated(
        self,
        collection: str,
        entity_id: UUID,
        changed_fields: list[str],
    ) -> None:
        """Log a merged patch."""
        self.log(AuditEventBuilder.record_updated(
            collection=collection,
            entity_id=entity_id,
            changed_fields=changed_fields,
        ))

    def log_deleted(self, collection: str, entity_id: UUID) -> None:
        """Log a removed record."""
        self.log(AuditEventBuilder.record_deleted(
            collection=collection,
            entity_id=entity_id,
        ))

    def log_main_account_changed(
        self,
        account_id: UUID,
        previous_id: Optional[UUID],
    ) -> None:
        self.log(AuditEventBuilder.main_account_changed(
            account_id=account_id,
            previous_id=previous_id,
        ))

    def log_balance_adjusted(
        self,
        account_id: UUID,
        delta: Decimal,
        new_balance: Decimal,
    ) -> None:
        self.log(AuditEventBuilder.balance_adjusted(
            account_id=account_id,
            delta=delta,
            new_balance=new_balance,
        ))

    def log_payment_status(
        self,
        collection: str,
        entity_id: UUID,
        paid: bool,
    ) -> None:
        self.log(AuditEventBuilder.payment_status_updated(
            collection=collection,
            entity_id=entity_id,
            paid=paid,
        ))

    def log_not_found(
        self,
        collection: str,
        entity_id: UUID,
        operation: str,
    ) -> None:
        """Log an operation ignored because the id is unknown."""
        self.log(AuditEventBuilder.record_not_found(
            collection=collection,
            entity_id=entity_id,
            operation=operation,
        ))

    def log_validation_failed(
        self,
        collection: str,
        issues: list[dict],
        entity_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_failed(
            collection=collection,
            issues=issues,
            entity_id=entity_id,
        ))

    def log_validation_warning(
        self,
        collection: str,
        issues: list[dict],
        entity_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.validation_warning(
            collection=collection,
            issues=issues,
            entity_id=entity_id,
        ))

    def log_snapshot_saved(self, collection: str, record_count: int) -> None:
        self.log(AuditEventBuilder.snapshot_saved(
            collection=collection,
            record_count=record_count,
        ))

    def log_snapshot_loaded(self, collection: str, record_count: int) -> None:
        self.log(AuditEventBuilder.snapshot_loaded(
            collection=collection,
            record_count=record_count,
        ))

    def log_save_failed(self, collection: str, error_message: str) -> None:
        """Log a persistence failure. The in-memory state is kept."""
        self.log(AuditEventBuilder.save_failed(
            collection=collection,
            error_message=error_message,
        ))

    def log_load_failed(self, collection: str, error_message: str) -> None:
        self.log(AuditEventBuilder.load_failed(
            collection=collection,
            error_message=error_message,
        ))
