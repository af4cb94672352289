"""
Record Collection Base

Every collection (accounts, transactions, expenses, taxes, investments)
shares the same lifecycle:
- records live in memory, in insertion order
- add / update / delete mutate memory synchronously, then persist the
  entire snapshot through the SnapshotWriter
- an unknown id is a silent no-op (logged, returns None)

Mutations are guarded by a re-entrant lock so a multi-threaded host
cannot interleave two of them.

Stored records are never mutated in place: a change replaces the record
in the list. Every record handed to a caller is a copy, so editing it
does not reach the collection.
"""

import threading
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Generic, Iterator, Optional, TypeVar, Union
from uuid import UUID

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from finance_tracker.audit import AuditLogger
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.services.storage.writer import SnapshotWriter
from finance_tracker.validation import LedgerValidator, ValidationError, issues_from_pydantic


RecordT = TypeVar("RecordT", bound=BaseModel)

RecordId = Union[UUID, str]


def as_uuid(record_id: RecordId) -> Optional[UUID]:
    """Coerce an id coming from the UI. Malformed ids match nothing."""
    if isinstance(record_id, UUID):
        return record_id
    try:
        return UUID(str(record_id))
    except ValueError:
        return None


def as_decimal(amount: Union[Decimal, int, float, str]) -> Decimal:
    """
    Coerce a money amount.

    Raises:
        ValidationError: If the amount is not a finite number
    """
    try:
        # str() first so 0.1 stays 0.1 rather than its binary expansion
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except InvalidOperation:
        value = None
    if value is None or not value.is_finite():
        raise ValidationError([ValidationIssue(
            field="amount",
            issue_type="invalid_value",
            message="Amount must be a finite number",
            severity="error",
        )])
    return value


class RecordCollection(Generic[RecordT]):
    """Base class for an independently owned and persisted collection."""

    collection_name: ClassVar[str]
    record_type: ClassVar[type[BaseModel]]

    def __init__(
        self,
        writer: Optional[SnapshotWriter] = None,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[LedgerValidator] = None,
    ):
        """
        Args:
            writer: Where snapshots go after each mutation.
                    If None, the collection is memory-only.
            audit_logger: Structured event log (shared per tracker)
            validator: Boundary validator
        """
        self._records: list[RecordT] = []
        self._lock = threading.RLock()
        self._writer = writer
        self._audit = audit_logger or AuditLogger()
        self._validator = validator or LedgerValidator()
        self._adapter = TypeAdapter(list[self.record_type])

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def records(self) -> list[RecordT]:
        """Copies of the records, in insertion order."""
        with self._lock:
            return [record.model_copy() for record in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self.records)

    def get(self, record_id: RecordId) -> Optional[RecordT]:
        with self._lock:
            idx = self._index_of(record_id)
            return self._records[idx].model_copy() if idx is not None else None

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def snapshot(self) -> str:
        """Serialize every record, camelCase keys, insertion order."""
        return self._adapter.dump_json(self._records, by_alias=True).decode("utf-8")

    def restore(self, snapshot: Optional[str]) -> int:
        """
        Replace the in-memory records with a loaded snapshot.

        A snapshot that cannot be parsed is logged and the collection
        starts empty. Nothing is persisted.

        Returns:
            Number of records loaded
        """
        with self._lock:
            if not snapshot:
                self._records = []
                return 0
            try:
                self._records = self._adapter.validate_json(snapshot)
            except (PydanticValidationError, ValueError) as e:
                self._audit.log_load_failed(self.collection_name, str(e))
                self._records = []
                return 0
            self._audit.log_snapshot_loaded(self.collection_name, len(self._records))
            return len(self._records)

    # -------------------------------------------------------------------------
    # Helpers for subclasses
    # -------------------------------------------------------------------------

    def _index_of(self, record_id: RecordId) -> Optional[int]:
        wanted = as_uuid(record_id)
        if wanted is None:
            return None
        for idx, record in enumerate(self._records):
            if record.id == wanted:
                return idx
        return None

    def _not_found(self, record_id: RecordId, operation: str) -> None:
        wanted = as_uuid(record_id)
        if wanted is not None:
            self._audit.log_not_found(self.collection_name, wanted, operation)

    def _persist(self) -> None:
        if self._writer is not None:
            self._writer.submit(
                self.collection_name,
                self.snapshot(),
                len(self._records),
            )

    def _merge(self, record: RecordT, changes: dict[str, Any]) -> RecordT:
        """
        Build a new record from an old one plus patch fields.

        The old record is left untouched.
        """
        try:
            return self.record_type.model_validate({**record.model_dump(), **changes})
        except PydanticValidationError as e:
            issues = issues_from_pydantic(e)
            self._audit.log_validation_failed(
                self.collection_name,
                [issue.model_dump() for issue in issues],
                entity_id=record.id,
            )
            raise ValidationError(issues)

    def _check(self, result: ValidationResult, entity_id: Optional[UUID] = None) -> None:
        """Raise on errors, log warnings, otherwise do nothing."""
        if result.has_errors:
            self._audit.log_validation_failed(
                self.collection_name,
                [issue.model_dump() for issue in result.issues],
                entity_id=entity_id,
            )
            raise ValidationError(result.issues)
        if result.warnings:
            self._audit.log_validation_warning(
                self.collection_name,
                [issue.model_dump() for issue in result.warnings],
                entity_id=entity_id,
            )
