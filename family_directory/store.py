"""Document store interface and an in-memory implementation.

The directory talks to storage only through ``DocumentStore``: async CRUD
over named collections of JSON-compatible records. ``InMemoryDocumentStore``
keeps everything in dicts and can snapshot to a JSON file between runs.
"""

from __future__ import annotations

import copy
import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from .constants import MEMBERS_COLLECTION, RELATIONS_COLLECTION
from .errors import StoreError

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class DocumentStore(Protocol):
    """Async CRUD over named collections. Records carry their ``id``."""

    async def list_all(self, collection: str) -> list[Record]: ...

    async def get(self, collection: str, record_id: str) -> Record | None: ...

    async def create(self, collection: str, data: Record) -> str: ...

    async def update(self, collection: str, record_id: str, partial: Record) -> None: ...

    async def delete(self, collection: str, record_id: str) -> None: ...

    async def query_where(self, collection: str, field: str, value: Any) -> list[Record]: ...


class InMemoryDocumentStore:
    """Dict-backed store, optionally persisted to a JSON snapshot file."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._collections: dict[str, dict[str, Record]] = {
            MEMBERS_COLLECTION: {},
            RELATIONS_COLLECTION: {},
        }
        if path is not None and path.exists():
            self._load_snapshot()

    def _load_snapshot(self) -> None:
        try:
            with open(self.path) as f:  # type: ignore[arg-type]
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read store file {self.path}: {e}") from e

        for collection, records in data.items():
            target = self._collections.setdefault(collection, {})
            for record in records or []:
                record_id = str(record.get("id") or uuid.uuid4().hex)
                target[record_id] = {**record, "id": record_id}

        counts = {name: len(records) for name, records in self._collections.items()}
        logger.info(f"Loaded store snapshot from {self.path}: {counts}")

    def _save_snapshot(self) -> None:
        if self.path is None:
            return
        data = {name: list(records.values()) for name, records in self._collections.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StoreError(f"Failed to write store file {self.path}: {e}") from e

    def _collection(self, collection: str) -> dict[str, Record]:
        return self._collections.setdefault(collection, {})

    async def list_all(self, collection: str) -> list[Record]:
        return [copy.deepcopy(r) for r in self._collection(collection).values()]

    async def get(self, collection: str, record_id: str) -> Record | None:
        record = self._collection(collection).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def create(self, collection: str, data: Record) -> str:
        record_id = uuid.uuid4().hex
        record = copy.deepcopy(data)
        record["id"] = record_id
        record.setdefault("createdAt", datetime.now(timezone.utc).isoformat())
        self._collection(collection)[record_id] = record
        self._save_snapshot()
        return record_id

    async def update(self, collection: str, record_id: str, partial: Record) -> None:
        records = self._collection(collection)
        if record_id not in records:
            raise StoreError(f"No record {record_id} in {collection}")
        records[record_id].update(copy.deepcopy(partial))
        records[record_id]["id"] = record_id
        self._save_snapshot()

    async def delete(self, collection: str, record_id: str) -> None:
        records = self._collection(collection)
        if record_id not in records:
            raise StoreError(f"No record {record_id} in {collection}")
        del records[record_id]
        self._save_snapshot()

    async def query_where(self, collection: str, field: str, value: Any) -> list[Record]:
        return [
            copy.deepcopy(r) for r in self._collection(collection).values() if r.get(field) == value
        ]
