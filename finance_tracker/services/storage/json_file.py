"""
JSON File Record Store

One file per collection under a data directory: <data_dir>/<collection>.json.

Writes go to a temporary file first and are then moved over the old one,
so a crash mid-write leaves the previous snapshot intact.

Disk I/O and retry back-off run in a worker thread, off the event loop.
"""

import asyncio
import os
from pathlib import Path
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_tracker.services.storage.interface import RecordStoreInterface, StorageError


class JsonFileRecordStore(RecordStoreInterface):
    """Stores each collection snapshot as a JSON file on local disk."""

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)

    def path_for(self, collection: str) -> Path:
        return self._data_dir / f"{collection}.json"

    async def load(self, collection: str) -> Optional[str]:
        path = self.path_for(collection)
        if not path.exists():
            return None
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        reraise=True,
    )
    def _write(self, collection: str, snapshot: str) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(collection)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(snapshot, encoding="utf-8")
        os.replace(tmp_path, path)

    async def save(self, collection: str, snapshot: str) -> bool:
        try:
            await asyncio.to_thread(self._write, collection, snapshot)
            return True
        except OSError as e:
            raise StorageError(f"Failed to write {collection} snapshot: {e}")
