#!/usr/bin/env python3
"""
Shared repository base for the JSON-file collections.

Every entity lives in one JSON array. A repository wraps the storage
accessor with the handful of queries the blueprints need:
- integer ids assigned as max(existing) + 1
- lookups by id or by arbitrary field equality
- read-modify-write add / update / delete over the whole collection

Notes:
- Each mutating call reads the collection, changes it in memory and
  rewrites the file; there is no locking, the last writer wins.
- Records are plain dicts with camelCase keys, exactly as stored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import models

Record = Dict[str, Any]


def utcnow_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BaseRepository:
    """
    Base class for one collection.
    Subclasses only set `collection`; domain-specific queries go on top.
    """

    collection: str = ""

    def __init__(self, storage=None):
        # Fall back to the app-wide storage bound in create_app()
        self._storage = storage

    @property
    def storage(self):
        return self._storage or models.storage

    def all(self) -> List[Record]:
        return self.storage.read(self.collection)

    def save_all(self, records: List[Record]) -> None:
        self.storage.write(self.collection, records)

    def get(self, record_id: int) -> Optional[Record]:
        return self.first(id=record_id)

    def find(self, **criteria) -> List[Record]:
        return [r for r in self.all() if all(r.get(k) == v for k, v in criteria.items())]

    def first(self, **criteria) -> Optional[Record]:
        for record in self.all():
            if all(record.get(k) == v for k, v in criteria.items()):
                return record
        return None

    @staticmethod
    def _next_id(records: List[Record]) -> int:
        ids = [r["id"] for r in records if isinstance(r.get("id"), int)]
        return max(ids, default=0) + 1

    def next_id(self) -> int:
        return self._next_id(self.all())

    def add(self, record: Record) -> Record:
        """Append a record. A server-side id is assigned unless the caller already chose one."""
        records = self.all()
        if record.get("id") is None:
            record = {"id": self._next_id(records), **{k: v for k, v in record.items() if k != "id"}}
        records.append(record)
        self.save_all(records)
        return record

    def update(self, record_id: int, changes: Record) -> Optional[Record]:
        """Merge `changes` into the record; the id always stays the stored one."""
        records = self.all()
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                updated = {**record, **changes, "id": record_id}
                records[index] = updated
                self.save_all(records)
                return updated
        return None

    def delete(self, record_id: int) -> bool:
        records = self.all()
        kept = [r for r in records if r.get("id") != record_id]
        if len(kept) == len(records):
            return False
        self.save_all(kept)
        return True
