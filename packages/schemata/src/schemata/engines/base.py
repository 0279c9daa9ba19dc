# schemata/engines/base.py
"""Interface of the external validation engine the registry commits into."""

from typing import Any, Iterable, Protocol, Sequence, runtime_checkable

from ..nodes import SchemaNode

__all__ = ["ValidationEngine", "GroupCommitEngine", "EnumerableEngine"]


@runtime_checkable
class ValidationEngine(Protocol):
    """
    The one external capability the registry consumes.

    ``add`` must fail descriptively when a schema references an id the engine
    does not know, and either fail or be idempotent for an id it already has.
    """

    def get_by_name(self, schema_id: str) -> Any | None: ...

    def add(self, schema: SchemaNode) -> None: ...


@runtime_checkable
class GroupCommitEngine(Protocol):
    """Optional: commit mutually-referencing schemas as one unit."""

    def add_group(self, schemas: Sequence[SchemaNode]) -> None: ...


@runtime_checkable
class EnumerableEngine(Protocol):
    """Optional: list the ids the engine already holds."""

    def names(self) -> Iterable[str]: ...
