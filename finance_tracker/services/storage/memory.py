"""In-memory record store, used for tests and throwaway sessions."""

from typing import Optional

from finance_tracker.services.storage.interface import RecordStoreInterface


class InMemoryRecordStore(RecordStoreInterface):
    """Keeps snapshots in a dict. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._snapshots: dict[str, str] = dict(initial or {})
        self.save_count = 0

    async def load(self, collection: str) -> Optional[str]:
        return self._snapshots.get(collection)

    async def save(self, collection: str, snapshot: str) -> bool:
        self._snapshots[collection] = snapshot
        self.save_count += 1
        return True

    def get_snapshot(self, collection: str) -> Optional[str]:
        """Synchronous peek for callers outside an event loop."""
        return self._snapshots.get(collection)
