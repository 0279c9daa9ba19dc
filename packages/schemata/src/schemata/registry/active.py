# schemata/registry/active.py
"""Active-registry tracking and early registration.

Schema modules are often imported before the application has built its
registry. :func:`add_schema` accepts them anyway: with no active registry
the schema is queued here, and :func:`set_active_registry` (or
:func:`push_active_registry`) replays the queue into the registry it binds.

The binding lives in a ``ContextVar``; there is no default registry.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from threading import RLock
from typing import TYPE_CHECKING, Any, Generator

from ..nodes import RefSchema, SchemaProtocol, ref
from ..utils.proxy import Proxy
from .store import require_schema_id

if TYPE_CHECKING:
    from .registry import SchemaRegistry

logger = logging.getLogger(__name__)

_active_registry: ContextVar["SchemaRegistry | None"] = ContextVar("schemata_active_registry", default=None)

_early_lock = RLock()
_early_schemas: list[SchemaProtocol] = []


def get_active_registry() -> "SchemaRegistry | None":
    return _active_registry.get()


def _drain_early(registry: "SchemaRegistry") -> None:
    with _early_lock:
        queued = list(_early_schemas)
        _early_schemas.clear()
    if not queued:
        return
    logger.info("Registering %d early schema(s) into %r", len(queued), registry)
    for schema in queued:
        registry.register(schema)


def set_active_registry(registry: "SchemaRegistry | None") -> None:
    """Bind ``registry`` for the current context and replay early registrations into it."""
    _active_registry.set(registry)
    if registry is not None:
        _drain_early(registry)


@contextmanager
def push_active_registry(registry: "SchemaRegistry") -> Generator["SchemaRegistry", None, None]:
    token = _active_registry.set(registry)
    try:
        _drain_early(registry)
        yield registry
    finally:
        _active_registry.reset(token)


def add_schema(schema: SchemaProtocol) -> Any:
    """
    Register ``schema`` with the active registry, or queue it until one is bound.

    The id is checked immediately either way.
    """
    registry = get_active_registry()
    if registry is not None:
        return registry.register(schema)

    schema_id = require_schema_id(schema)
    with _early_lock:
        _early_schemas.append(schema)
    logger.debug("No active registry; queued schema %r", schema_id)
    return schema


def ref_schema(schema_id: str) -> RefSchema:
    return ref(schema_id)


def flush_schemas() -> tuple[str, ...]:
    """Flush the active registry; a no-op when none is bound."""
    registry = get_active_registry()
    if registry is None:
        logger.debug("flush_schemas: no active registry")
        return ()
    return registry.flush()


def early_schemas() -> tuple[SchemaProtocol, ...]:
    with _early_lock:
        return tuple(_early_schemas)


def clear_early_schemas() -> None:
    with _early_lock:
        _early_schemas.clear()


current_registry = Proxy(get_active_registry, missing_message="No active schema registry; call set_active_registry() first")

__all__ = [
    "add_schema",
    "clear_early_schemas",
    "current_registry",
    "early_schemas",
    "flush_schemas",
    "get_active_registry",
    "push_active_registry",
    "ref_schema",
    "set_active_registry",
]
