# schemata/registry/store.py
"""Canonical id -> schema mapping with registration state."""

import logging
from threading import RLock
from typing import Any

from ..engines.base import ValidationEngine
from ..exceptions import MissingIdentifierError
from ..nodes import SchemaProtocol
from .pending import PendingSchemas

logger = logging.getLogger(__name__)


def require_schema_id(schema: Any) -> str:
    """Return the schema's id or raise :class:`MissingIdentifierError`."""
    schema_id = getattr(schema, "schema_id", None)
    if not isinstance(schema_id, str) or not schema_id.strip():
        raise MissingIdentifierError(
            f"Schema must carry a non-empty string id, got {schema_id!r} on {schema!r}. "
            "Pass id='SchemaName' when building it."
        )
    return schema_id


class SchemaStore:
    """
    Holds accepted schemas and tracks which of them the engine has confirmed.

    Three pieces of state are kept: the accepted map (every schema ever accepted),
    the pending queue (accepted but not yet committed) and the set of ids the
    engine confirmed. Lookups fall through to the engine, which may know schemas
    that were added to it directly.
    """

    def __init__(self, engine: ValidationEngine) -> None:
        self.engine = engine
        self._lock = RLock()
        self._accepted: dict[str, SchemaProtocol] = {}
        self._registered: set[str] = set()
        self.pending = PendingSchemas()

    # --- retrieval ---

    def get(self, schema_id: str) -> Any | None:
        """
        Return the schema stored under ``schema_id``.

        The pending queue is checked first, then the accepted map, then the
        engine. Returns ``None`` when nobody knows the id.

        :param schema_id: The id to look up.
        :return: The schema, or ``None``.
        """
        found = self.get_local(schema_id)
        if found is not None:
            return found
        return self.engine.get_by_name(schema_id)

    def get_local(self, schema_id: str) -> SchemaProtocol | None:
        """Like :meth:`get` but never consults the engine."""
        with self._lock:
            found = self.pending.get(schema_id)
            return found if found is not None else self._accepted.get(schema_id)

    def is_registered(self, schema_id: str) -> bool:
        """True if the id is confirmed in the engine, by us or by another path."""
        with self._lock:
            if schema_id in self._registered:
                return True
        return self.engine.get_by_name(schema_id) is not None

    # --- mutation ---

    def put(self, schema: SchemaProtocol, *, pending: bool = True) -> str:
        """
        Accept a schema.

        :param schema: The schema to store; must carry a non-empty string id.
        :param pending: Also queue it for the next commit.
        :return: The schema id.
        :raises MissingIdentifierError: If the schema has no usable id.
        """
        schema_id = require_schema_id(schema)
        with self._lock:
            self._accepted.setdefault(schema_id, schema)
            if pending and schema_id not in self._registered:
                self.pending.enqueue(schema_id, schema)
        return schema_id

    def mark_registered(self, schema_id: str) -> None:
        with self._lock:
            self._registered.add(schema_id)
            self.pending.discard(schema_id)

    def forget(self, schema_id: str) -> None:
        """Drop an accepted schema the engine never confirmed."""
        with self._lock:
            if schema_id in self._registered:
                return
            self._accepted.pop(schema_id, None)
            self.pending.discard(schema_id)
        logger.debug("Forgot uncommitted schema %r", schema_id)

    def clear(self) -> None:
        with self._lock:
            self._accepted.clear()
            self._registered.clear()
            self.pending.clear()

    # --- enumeration ---

    def items(self) -> dict[str, SchemaProtocol]:
        with self._lock:
            return dict(self._accepted)

    def pending_items(self) -> dict[str, SchemaProtocol]:
        return self.pending.snapshot()

    def registered_ids(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._registered))

    def __contains__(self, schema_id: object) -> bool:
        with self._lock:
            return schema_id in self._accepted

    def __len__(self) -> int:
        with self._lock:
            return len(self._accepted)


__all__ = ["SchemaStore", "require_schema_id"]
