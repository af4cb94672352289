"""
Storage Services Package

Provides the record store interface, its implementations, and the
fire-and-forget writer the ledger collections persist through.
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    RecordStoreInterface,
    StorageError,
)
from finance_tracker.services.storage.memory import InMemoryRecordStore
from finance_tracker.services.storage.json_file import JsonFileRecordStore
from finance_tracker.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    SnapshotTooLargeError,
)
from finance_tracker.services.storage.writer import SnapshotWriter

__all__ = [
    # Interface
    "RecordStoreInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "SnapshotTooLargeError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    # Writer
    "SnapshotWriter",
]
