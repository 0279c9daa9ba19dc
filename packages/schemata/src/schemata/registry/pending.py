"""Ordered queue of schemas accepted but not yet committed to the engine."""

from __future__ import annotations

from threading import RLock
from typing import Iterator

from ..nodes import SchemaProtocol


class PendingSchemas:
    """Thread-safe, insertion-ordered ``id -> schema`` queue."""

    def __init__(self) -> None:
        self._schemas: dict[str, SchemaProtocol] = {}
        self._lock = RLock()

    def enqueue(self, schema_id: str, schema: SchemaProtocol) -> None:
        with self._lock:
            self._schemas.setdefault(schema_id, schema)

    def get(self, schema_id: str) -> SchemaProtocol | None:
        with self._lock:
            return self._schemas.get(schema_id)

    def discard(self, schema_id: str) -> None:
        with self._lock:
            self._schemas.pop(schema_id, None)

    def snapshot(self) -> dict[str, SchemaProtocol]:
        with self._lock:
            return dict(self._schemas)

    def ids(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._schemas)

    def clear(self) -> None:
        with self._lock:
            self._schemas.clear()

    def __contains__(self, schema_id: object) -> bool:
        with self._lock:
            return schema_id in self._schemas

    def __len__(self) -> int:
        with self._lock:
            return len(self._schemas)

    def __iter__(self) -> Iterator[str]:
        return iter(self.ids())


__all__ = ["PendingSchemas"]
