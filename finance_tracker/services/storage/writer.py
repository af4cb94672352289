"""
Snapshot Writer

DESIGN DECISION: Persistence is fire-and-forget.
A collection mutates its in-memory records synchronously, serializes the
whole collection, and hands the snapshot here. The caller never waits for
the store and never sees a storage error:
- Inside a running event loop the write is scheduled as a task
- Without a running loop the write is performed immediately

Per collection, writes reach the store in submission order, and a snapshot
that has already been superseded by a newer one is skipped.
A failed write is logged; in-memory state stays the source of truth.
"""

import asyncio
from typing import Optional

from finance_tracker.audit import AuditLogger
from finance_tracker.services.storage.interface import RecordStoreInterface


class SnapshotWriter:
    """Queues collection snapshots for the record store."""

    def __init__(
        self,
        store: RecordStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._sequence: dict[str, int] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending: set[asyncio.Task] = set()

    @property
    def store(self) -> RecordStoreInterface:
        return self._store

    def submit(self, collection: str, snapshot: str, record_count: int = 0) -> None:
        """Queue a snapshot. Returns before the store is written."""
        seq = self._sequence.get(collection, 0) + 1
        self._sequence[collection] = seq

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._write(collection, snapshot, record_count))
            return

        task = loop.create_task(
            self._write_in_order(loop, collection, seq, snapshot, record_count)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait for every queued write to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def _lock_for(self, loop: asyncio.AbstractEventLoop, collection: str) -> asyncio.Lock:
        if loop is not self._loop:
            # Locks are bound to the loop they were first contended on
            self._loop = loop
            self._locks = {}
        if collection not in self._locks:
            self._locks[collection] = asyncio.Lock()
        return self._locks[collection]

    async def _write_in_order(
        self,
        loop: asyncio.AbstractEventLoop,
        collection: str,
        seq: int,
        snapshot: str,
        record_count: int,
    ) -> bool:
        async with self._lock_for(loop, collection):
            if seq < self._sequence.get(collection, 0):
                # A newer snapshot is queued behind us
                return True
            return await self._write(collection, snapshot, record_count)

    async def _write(self, collection: str, snapshot: str, record_count: int) -> bool:
        try:
            saved = await self._store.save(collection, snapshot)
        except Exception as e:
            self._audit_logger.log_save_failed(collection, str(e))
            return False

        if not saved:
            self._audit_logger.log_save_failed(collection, "store reported failure")
            return False

        self._audit_logger.log_snapshot_saved(collection, record_count)
        return True
