# Backoffice/src/backoffice/repositories/memory.py
"""
In-memory repository base for development and tests.

Records live in a dict keyed by id, in insertion order. A single reentrant lock
serializes every read-modify-write so conditional updates are atomic
within the process.
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Callable, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class MemoryRepository(Generic[T]):
    """Dict-backed store shared by the per-entity memory repositories."""

    def __init__(self):
        self._records: dict[str, T] = {}
        self._lock = threading.RLock()

    def _all(self, predicate: Optional[Callable[[T], bool]] = None) -> list[T]:
        """Matching records, newest first."""
        with self._lock:
            records = list(self._records.values())
        records.reverse()
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    def get_all(self) -> list[T]:
        return self._all()

    def get_by_id(self, record_id: str) -> Optional[T]:
        with self._lock:
            return self._records.get(record_id)

    def create(self, entity: T) -> T:
        stored = entity.model_copy(update={
            "id": str(uuid.uuid4()),
            "created_at": datetime.now(timezone.utc),
        })
        with self._lock:
            self._records[stored.id] = stored
        return stored

    def update(self, record_id: str, entity: T) -> Optional[T]:
        with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            stored = entity.model_copy(update={"id": record_id, "created_at": current.created_at})
            self._records[record_id] = stored
            return stored

    def delete(self, record_id: str) -> None:
        with self._lock:
            self._records.pop(record_id, None)

    def _conditional_update(
        self,
        record_id: str,
        condition: Callable[[T], bool],
        changes: Callable[[T], dict],
    ) -> Optional[T]:
        """Apply changes only if the record exists and satisfies condition, atomically."""
        with self._lock:
            current = self._records.get(record_id)
            if current is None or not condition(current):
                return None
            stored = current.model_copy(update=changes(current))
            self._records[record_id] = stored
            return stored
