"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All records flowing through the ledger must conform to these schemas.
"""

from finance_tracker.models.base import RecordPatch
from finance_tracker.models.ledger import (
    Account,
    AccountDraft,
    AccountPatch,
    BalanceDelta,
    Transaction,
    TransactionDraft,
    TransactionPatch,
    TransactionType,
)
from finance_tracker.models.schedule import (
    AlertKind,
    DueAlert,
    DueStatus,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExpensePatch,
    Investment,
    InvestmentCategory,
    InvestmentDraft,
    InvestmentPatch,
    Tax,
    TaxDraft,
    TaxPatch,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    "RecordPatch",
    # Ledger models
    "Account",
    "AccountDraft",
    "AccountPatch",
    "BalanceDelta",
    "Transaction",
    "TransactionDraft",
    "TransactionPatch",
    "TransactionType",
    # Schedule models
    "AlertKind",
    "DueAlert",
    "DueStatus",
    "Expense",
    "ExpenseCategory",
    "ExpenseDraft",
    "ExpensePatch",
    "Investment",
    "InvestmentCategory",
    "InvestmentDraft",
    "InvestmentPatch",
    "Tax",
    "TaxDraft",
    "TaxPatch",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
