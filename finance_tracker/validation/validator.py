"""
Ledger Boundary Validation

DESIGN DECISION: Forms validate their input before calling the ledger,
but the ledger does not trust them. Every write is re-validated here:

STAGE 1 - SCHEMA (pydantic):
- Types, required fields, amount > 0
- Raised by the draft/patch models and converted into ValidationIssues

STAGE 2 - LEDGER RULES:
- A transfer needs a destination account
- A transfer cannot go to its own source account
- Suspiciously large amounts are flagged (warning only)

IMPORTANT: Validation never fixes data. Errors raise ValidationError
before any state changes; warnings are reported and the write proceeds.
"""

from decimal import Decimal
from typing import Any, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_snake

from finance_tracker.config import get_settings
from finance_tracker.models.ledger import TransactionDraft, TransactionType
from finance_tracker.models.validation import ValidationIssue, ValidationResult


ModelT = TypeVar("ModelT", bound=BaseModel)


class ValidationError(Exception):
    """
    A write was rejected at the ledger boundary.

    Carries field-level issues so a form can show each message next to
    its input.
    """

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = issues
        errors = [issue for issue in issues if issue.severity == "error"] or issues
        super().__init__("; ".join(f"{i.field}: {i.message}" for i in errors))

    @property
    def field_errors(self) -> dict[str, str]:
        """First error message per field."""
        result: dict[str, str] = {}
        for issue in self.issues:
            if issue.severity == "error":
                result.setdefault(issue.field, issue.message)
        return result


def issues_from_pydantic(exc: PydanticValidationError) -> list[ValidationIssue]:
    """
    Translate pydantic's error list into ValidationIssues.

    Field names are reported in snake_case even when the input used the
    camelCase storage keys.
    """
    issues = []
    for error in exc.errors():
        loc = ".".join(
            to_snake(part) if isinstance(part, str) else str(part)
            for part in error.get("loc", ())
        ) or "record"
        issues.append(ValidationIssue(
            field=loc,
            issue_type=error.get("type", "invalid_value"),
            message=error.get("msg", "Invalid value"),
            severity="error",
        ))
    return issues


def coerce_model(
    model_cls: type[ModelT],
    data: Union[ModelT, Mapping[str, Any]],
) -> ModelT:
    """
    Accept either a model instance or a plain mapping (form data).

    Raises:
        ValidationError: If the mapping does not fit the model
    """
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(issues_from_pydantic(e))


def coerce_value(value_type: Any, value: Any, field: str) -> Any:
    """
    Accept a single loose value, such as a checkbox flag or a date typed
    into a filter.

    Raises:
        ValidationError: Reported against the given field
    """
    try:
        return TypeAdapter(value_type).validate_python(value)
    except PydanticValidationError as e:
        raise ValidationError([
            issue.model_copy(update={"field": field}) for issue in issues_from_pydantic(e)
        ])


class LedgerValidator:
    """
    Re-validates records before they are written to a collection.
    """

    def __init__(self, max_reasonable_amount: Optional[Decimal] = None):
        """
        Initialize validator.

        Args:
            max_reasonable_amount: Amounts above this raise a warning.
                                  Defaults to the configured value.
        """
        if max_reasonable_amount is None:
            max_reasonable_amount = Decimal(
                str(get_settings().tracker.max_reasonable_amount)
            )
        self._max_amount = max_reasonable_amount

    def _check_amount(self, amount: Decimal, issues: list[ValidationIssue]) -> None:
        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a positive number",
                severity="error",
            ))
        elif amount > self._max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({amount:,.2f}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

    @staticmethod
    def _check_required_text(
        field: str,
        value: Optional[str],
        label: str,
        issues: list[ValidationIssue],
    ) -> None:
        if value is None or not value.strip():
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} is required",
                severity="error",
            ))

    def validate_transaction(self, transaction: TransactionDraft) -> ValidationResult:
        """
        Check a transaction (new, or merged with a patch).

        Foreign keys are not checked: whether the referenced accounts exist
        is the caller's concern.
        """
        issues: list[ValidationIssue] = []

        self._check_required_text(
            "description", transaction.description, "Description", issues
        )
        self._check_amount(transaction.amount, issues)

        if transaction.type == TransactionType.TRANSFER:
            if transaction.to_account_id is None:
                issues.append(ValidationIssue(
                    field="to_account_id",
                    issue_type="missing",
                    message="Transfer requires a destination account",
                    severity="error",
                ))
            elif transaction.to_account_id == transaction.account_id:
                issues.append(ValidationIssue(
                    field="to_account_id",
                    issue_type="invalid_value",
                    message="Please select a different destination account",
                    severity="error",
                ))

        return ValidationResult(issues=issues)

    def validate_account_name(self, name: Optional[str]) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._check_required_text("name", name, "Account name", issues)
        return ValidationResult(issues=issues)

    def validate_amount_record(
        self,
        amount: Decimal,
        label_field: str,
        label_value: Optional[str],
    ) -> ValidationResult:
        """Shared check for expenses, taxes and investments."""
        issues: list[ValidationIssue] = []
        self._check_required_text(
            label_field, label_value, label_field.capitalize(), issues
        )
        self._check_amount(amount, issues)
        return ValidationResult(issues=issues)
