"""
Finance Tracker Composition Root

This module wires the collections together and defines the two
session-level flows:
1. Load (read every collection snapshot into memory, once at startup)
2. Flush (wait for queued snapshot writes, before shutdown or in tests)

DESIGN DECISION: Each collection is owned by exactly one object, and
all of them share one SnapshotWriter and one AuditLogger. The
TransactionEngine is the only component that moves account balances
besides direct calls to AccountLedger.apply_balance_delta.
"""

import datetime as dt
from decimal import Decimal
from typing import Callable, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from finance_tracker.audit import AuditLogger, configure_logging
from finance_tracker.config import StorageBackend, TrackerSettings, get_settings
from finance_tracker.ledger import AccountLedger, RecordCollection, TransactionEngine
from finance_tracker.queries import DashboardQueries
from finance_tracker.services.storage import (
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStoreInterface,
    SnapshotWriter,
    StorageError,
)
from finance_tracker.validation import LedgerValidator
from finance_tracker.views import ExpenseView, InvestmentView, TaxView


logger = structlog.get_logger(__name__)


class FinanceTracker:
    """
    All five collections of one user, backed by one record store.

    Usage:
        tracker = create_finance_tracker()
        asyncio.run(tracker.load())
        account = tracker.accounts.add_account({"name": "Wallet"})
    """

    def __init__(
        self,
        store: RecordStoreInterface,
        settings: Optional[TrackerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Callable[[], dt.date] = dt.date.today,
    ):
        settings = settings or get_settings().tracker
        self._audit_logger = audit_logger or AuditLogger()
        self._store = store

        self.writer = SnapshotWriter(store, self._audit_logger)
        validator = LedgerValidator(Decimal(str(settings.max_reasonable_amount)))
        shared = {
            "writer": self.writer,
            "audit_logger": self._audit_logger,
            "validator": validator,
        }

        self.accounts = AccountLedger(**shared)
        self.transactions = TransactionEngine(self.accounts, **shared)
        self.expenses = ExpenseView(
            **shared,
            today=today,
            due_soon_days=settings.due_soon_days,
            upcoming_days=settings.upcoming_tax_days,
        )
        self.taxes = TaxView(
            **shared,
            today=today,
            due_soon_days=settings.due_soon_days,
            upcoming_days=settings.upcoming_tax_days,
        )
        self.investments = InvestmentView(**shared)

        self.dashboard = DashboardQueries(
            ledger=self.accounts,
            expenses=self.expenses,
            taxes=self.taxes,
            investments=self.investments,
        )

    @property
    def store(self) -> RecordStoreInterface:
        return self._store

    @property
    def collections(self) -> list[RecordCollection]:
        return [
            self.accounts,
            self.transactions,
            self.expenses,
            self.taxes,
            self.investments,
        ]

    async def load(self) -> dict[str, int]:
        """
        Populate every collection from the store.

        A collection whose snapshot cannot be read starts empty; the
        others still load.

        Returns:
            Records loaded per collection name
        """
        counts: dict[str, int] = {}
        for collection in self.collections:
            name = collection.collection_name
            try:
                snapshot = await self._store.load(name)
            except StorageError as e:
                self._audit_logger.log_load_failed(name, str(e))
                counts[name] = collection.restore(None)
                continue
            counts[name] = collection.restore(snapshot)
        return counts

    async def flush(self) -> None:
        """Wait until every queued snapshot has reached the store."""
        await self.writer.flush()


def create_store(settings: Optional[TrackerSettings] = None) -> RecordStoreInterface:
    """
    Build the record store selected by FINANCE_STORAGE_BACKEND.

    Falls back to an in-memory store when Google Sheets is selected but
    not configured.
    """
    settings = settings or get_settings().tracker

    if settings.storage_backend == StorageBackend.MEMORY:
        return InMemoryRecordStore()

    if settings.storage_backend == StorageBackend.GOOGLE_SHEETS:
        try:
            return GoogleSheetsRecordStore()
        except PydanticValidationError as e:
            logger.warning(
                "storage_not_configured",
                backend=settings.storage_backend.value,
                error=str(e),
            )
            return InMemoryRecordStore()

    return JsonFileRecordStore(settings.data_dir)


def create_finance_tracker(
    settings: Optional[TrackerSettings] = None,
    store: Optional[RecordStoreInterface] = None,
) -> FinanceTracker:
    """
    Factory function to create a tracker with its configured store.

    Args:
        settings: Tracker settings. Defaults to the environment.
        store: Explicit record store, mostly for tests.

    Returns:
        A FinanceTracker whose collections are still empty; call load().
    """
    settings = settings or get_settings().tracker
    configure_logging(debug=settings.debug_mode)
    return FinanceTracker(store or create_store(settings), settings=settings)
