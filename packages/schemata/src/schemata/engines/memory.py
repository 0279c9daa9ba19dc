# schemata/engines/memory.py
"""Dictionary-backed validation engine with strict reference checks."""

import logging
from threading import RLock
from typing import Sequence

from ..exceptions import EngineDuplicateError, EngineReferenceError
from ..nodes import SchemaNode
from ..registry.references import extract_references

logger = logging.getLogger(__name__)


class InMemoryEngine:
    """
    Holds committed schemas by id.

    Mirrors the behavior of engines that resolve references eagerly: a schema
    can only be added once every id it references is already present (or is
    part of the same :meth:`add_group` call).
    """

    def __init__(self, *, allow_redefinition: bool = False) -> None:
        self._schemas: dict[str, SchemaNode] = {}
        self._order: list[str] = []
        self._lock = RLock()
        self.allow_redefinition = allow_redefinition

    # --- queries ---

    def get_by_name(self, schema_id: str) -> SchemaNode | None:
        with self._lock:
            return self._schemas.get(schema_id)

    def names(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._order)

    @property
    def commit_order(self) -> tuple[str, ...]:
        """Ids in the order they were committed."""
        return self.names()

    def __contains__(self, schema_id: str) -> bool:
        with self._lock:
            return schema_id in self._schemas

    def __len__(self) -> int:
        with self._lock:
            return len(self._schemas)

    # --- commits ---

    def add(self, schema: SchemaNode) -> None:
        self.add_group([schema])

    def add_group(self, schemas: Sequence[SchemaNode]) -> None:
        with self._lock:
            batch = {self._require_id(s): s for s in schemas}
            for schema_id in batch:
                if schema_id in self._schemas and not self.allow_redefinition:
                    raise EngineDuplicateError(f"Schema with id {schema_id!r} already exists")

            for schema_id, schema in batch.items():
                for target in extract_references(schema):
                    if target not in self._schemas and target not in batch:
                        raise EngineReferenceError(
                            f"Schema {schema_id!r}: reference {target!r} not found"
                        )

            for schema_id, schema in batch.items():
                if schema_id not in self._schemas:
                    self._order.append(schema_id)
                self._schemas[schema_id] = schema
                logger.debug("engine.add %s", schema_id)

    def clear(self) -> None:
        with self._lock:
            self._schemas.clear()
            self._order.clear()

    @staticmethod
    def _require_id(schema: SchemaNode) -> str:
        schema_id = getattr(schema, "schema_id", None)
        if not isinstance(schema_id, str) or not schema_id:
            raise EngineReferenceError(f"Cannot add schema without an id: {schema!r}")
        return schema_id


__all__ = ["InMemoryEngine"]
