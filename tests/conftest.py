"""
Shared fixtures.

Every collection under test is wired to an InMemoryRecordStore through a
real SnapshotWriter, and the clock is pinned so due-date tests are stable.
"""

from datetime import date
from decimal import Decimal

import pytest

from finance_tracker.audit import AuditLogger
from finance_tracker.config import TrackerSettings
from finance_tracker.ledger import AccountLedger, TransactionEngine
from finance_tracker.services.storage import InMemoryRecordStore, SnapshotWriter
from finance_tracker.validation import LedgerValidator
from finance_tracker.views import ExpenseView, InvestmentView, TaxView


TODAY = date(2024, 6, 15)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def validator():
    return LedgerValidator(max_reasonable_amount=Decimal("1000000"))


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def writer(store, audit_logger):
    return SnapshotWriter(store, audit_logger)


@pytest.fixture
def collection_kwargs(writer, audit_logger, validator):
    return {"writer": writer, "audit_logger": audit_logger, "validator": validator}


@pytest.fixture
def ledger(collection_kwargs):
    return AccountLedger(**collection_kwargs)


@pytest.fixture
def engine(ledger, collection_kwargs):
    return TransactionEngine(ledger, **collection_kwargs)


@pytest.fixture
def expenses(collection_kwargs):
    return ExpenseView(**collection_kwargs, today=lambda: TODAY)


@pytest.fixture
def taxes(collection_kwargs):
    return TaxView(**collection_kwargs, today=lambda: TODAY)


@pytest.fixture
def investments(collection_kwargs):
    return InvestmentView(**collection_kwargs)


@pytest.fixture
def tracker_settings(tmp_path):
    return TrackerSettings(
        storage_backend="memory",
        data_dir=tmp_path,
        upcoming_tax_days=30,
        due_soon_days=7,
        max_reasonable_amount=1000000.0,
    )
