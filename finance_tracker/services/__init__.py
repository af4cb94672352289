"""Services package."""

from finance_tracker.services.storage import (
    ConnectionError,
    GoogleSheetsClient,
    GoogleSheetsRecordStore,
    InMemoryRecordStore,
    JsonFileRecordStore,
    NotFoundError,
    RecordStoreInterface,
    SnapshotTooLargeError,
    SnapshotWriter,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "GoogleSheetsClient",
    "GoogleSheetsRecordStore",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "NotFoundError",
    "RecordStoreInterface",
    "SnapshotTooLargeError",
    "SnapshotWriter",
    "StorageError",
]
