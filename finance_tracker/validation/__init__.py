"""Boundary validation package."""

from finance_tracker.validation.validator import (
    LedgerValidator,
    ValidationError,
    coerce_model,
    coerce_value,
    issues_from_pydantic,
)

__all__ = [
    "LedgerValidator",
    "ValidationError",
    "coerce_model",
    "coerce_value",
    "issues_from_pydantic",
]
