"""
Tests for Finance Tracker

Test strategy:
1. Unit tests for individual components (models, validators, views)
2. Integration tests for the ledger flows against an in-memory store
3. No real Google API calls in tests (use fakes)
"""

import json

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import TypeAdapter

from finance_tracker.models import (
    Account,
    AccountDraft,
    AccountPatch,
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    BalanceDelta,
    Expense,
    ExpenseCategory,
    InvestmentCategory,
    Tax,
    Transaction,
    TransactionDraft,
    TransactionPatch,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


class TestLedgerModels:
    """Tests for account and transaction models."""

    def test_account_defaults(self):
        """Test a new account starts at zero and is not main."""
        account = Account(name="Wallet")
        assert account.balance == Decimal("0")
        assert account.is_main is False
        assert account.id is not None

    def test_account_strips_whitespace(self):
        """Test that whitespace is stripped from the account name."""
        account = AccountDraft(name="  Checking  ")
        assert account.name == "Checking"

    def test_account_allows_negative_balance(self):
        """Test that an overdrawn opening balance is accepted."""
        account = Account(name="Credit card", balance=Decimal("-250.00"))
        assert account.balance == Decimal("-250.00")

    def test_account_patch_has_no_balance(self):
        """Test that balance cannot be patched directly."""
        with pytest.raises(ValueError):
            AccountPatch(balance=Decimal("10"))

    def test_transaction_rejects_zero_amount(self):
        """Test that amounts must be positive."""
        with pytest.raises(ValueError):
            TransactionDraft(
                description="Nothing",
                amount=Decimal("0"),
                type=TransactionType.EXPENSE,
                date=date(2024, 1, 1),
                account_id=uuid4(),
            )

    def test_transaction_accepts_camel_case_keys(self):
        """Test loading a record written with camelCase keys."""
        account_id = uuid4()
        to_account_id = uuid4()
        tx = Transaction.model_validate({
            "id": str(uuid4()),
            "description": "Savings",
            "amount": 50,
            "type": "transfer",
            "date": "2024-03-01",
            "accountId": str(account_id),
            "toAccountId": str(to_account_id),
        })
        assert tx.account_id == account_id
        assert tx.to_account_id == to_account_id
        assert tx.type == TransactionType.TRANSFER

    def test_snapshot_uses_camel_case_keys(self):
        """Test that serialized records keep the stored key layout."""
        account = Account(name="Main", balance=Decimal("10.50"), is_main=True)
        data = json.loads(
            TypeAdapter(list[Account]).dump_json([account], by_alias=True)
        )
        assert data[0]["isMain"] is True
        assert data[0]["name"] == "Main"
        assert Decimal(data[0]["balance"]) == Decimal("10.50")

    def test_transaction_patch_changes_only_set_fields(self):
        """Test that a patch reports only explicitly set fields."""
        patch = TransactionPatch(amount=Decimal("80"))
        assert patch.changes() == {"amount": Decimal("80")}

    def test_transaction_patch_rejects_unknown_fields(self):
        """Test that a patch cannot smuggle in unknown fields."""
        with pytest.raises(ValueError):
            TransactionPatch.model_validate({"balance": 10})

    def test_balance_delta_negated(self):
        """Test negating a delta."""
        delta = BalanceDelta(account_id=uuid4(), amount=Decimal("25"))
        assert delta.negated().amount == Decimal("-25")
        assert delta.negated().account_id == delta.account_id


class TestScheduleModels:
    """Tests for expense, tax and investment models."""

    def test_expense_defaults(self):
        expense = Expense(description="Rent", amount=Decimal("900"), due_date=date(2024, 7, 1))
        assert expense.paid is False
        assert expense.paid_date is None
        assert expense.category == ExpenseCategory.OTHER
        assert expense.label == "Rent"

    def test_legacy_paid_date_format(self):
        """Test that dd/mm/yyyy paid dates from older snapshots load."""
        tax = Tax.model_validate({
            "id": str(uuid4()),
            "name": "Property tax",
            "amount": "300",
            "dueDate": "2024-04-30",
            "paid": True,
            "paidDate": "05/04/2024",
        })
        assert tax.paid_date == date(2024, 4, 5)
        assert tax.label == "Property tax"

    def test_iso_paid_date(self):
        expense = Expense.model_validate({
            "description": "Water",
            "amount": 40,
            "dueDate": "2024-05-10",
            "paid": True,
            "paidDate": "2024-05-09",
        })
        assert expense.paid_date == date(2024, 5, 9)

    def test_category_values(self):
        """Test category string values."""
        assert ExpenseCategory.HOUSING.value == "housing"
        assert InvestmentCategory.REAL_ESTATE.value == "real_estate"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.ACCOUNT_ADDED,
            description="Account added",
        )
        assert event.event_type == AuditEventType.ACCOUNT_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        entity_id = uuid4()
        event = AuditEventBuilder.balance_adjusted(
            account_id=entity_id,
            delta=Decimal("-50"),
            new_balance=Decimal("100"),
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "balance_adjusted"
        assert log_dict["entity_id"] == str(entity_id)
        assert log_dict["details"] == {"delta": "-50", "balance": "100"}

    def test_builder_picks_collection_event_type(self):
        """Test that account and transaction events get their own types."""
        entity_id = uuid4()
        assert AuditEventBuilder.record_added(
            "transactions", entity_id, "Salary"
        ).event_type == AuditEventType.TRANSACTION_ADDED
        assert AuditEventBuilder.record_deleted(
            "accounts", entity_id
        ).event_type == AuditEventType.ACCOUNT_DELETED
        assert AuditEventBuilder.record_updated(
            "expenses", entity_id, ["amount"]
        ).event_type == AuditEventType.RECORD_UPDATED

    def test_not_found_is_debug(self):
        event = AuditEventBuilder.record_not_found("taxes", uuid4(), "delete")
        assert event.severity == AuditSeverity.DEBUG
        assert event.details["operation"] == "delete"

    def test_save_failed_is_error(self):
        event = AuditEventBuilder.save_failed("accounts", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be a positive number",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="suspicious_value",
                    message="Amount seems unusually high",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert len(result.warnings) == 1

    def test_severity_must_be_known(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
