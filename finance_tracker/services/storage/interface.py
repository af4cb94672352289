"""
Abstract Record Store Interface

DESIGN DECISION: The ledger treats persistence as an external key-value
store. Each collection name maps to one serialized snapshot (a JSON list
of records in insertion order). This allows us to:
1. Keep JSON files, a spreadsheet or anything else behind the same calls
2. Use in-memory storage for testing
3. Keep the ledger logic decoupled from storage mechanics

The interface is intentionally tiny: load once at startup, save the whole
snapshot after every mutation.
"""

from abc import ABC, abstractmethod
from typing import Optional


class RecordStoreInterface(ABC):
    """
    Abstract interface for collection snapshot storage.

    Any storage implementation (JSON files, Google Sheets, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def load(self, collection: str) -> Optional[str]:
        """
        Load the stored snapshot for a collection.

        Args:
            collection: Collection name (e.g., 'accounts')

        Returns:
            The serialized snapshot, or None if nothing was stored yet

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def save(self, collection: str, snapshot: str) -> bool:
        """
        Replace the stored snapshot for a collection.

        Args:
            collection: Collection name
            snapshot: Serialized JSON list of records

        Returns:
            True if saved successfully

        Raises:
            StorageError: If save fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
