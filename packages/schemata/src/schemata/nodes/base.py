# schemata/nodes/base.py
"""Core schema node abstractions.

Every registrable schema value is a tree of nodes. A node has a ``kind`` tag,
an optional ``schema_id`` and a ``children()`` accessor. Reference nodes are a
distinct kind with no children, so any walker that only follows
``children()`` treats them as leaves and never recurses through a named
reference.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Iterable, Protocol, runtime_checkable

__all__ = ["SchemaKind", "SchemaNode", "SchemaProtocol", "METADATA_FIELDS"]


class SchemaKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    UNION = "union"
    PRIMITIVE = "primitive"
    REF = "ref"


# Fields that never affect the wire shape of a schema.
METADATA_FIELDS: tuple[str, ...] = ("id", "title", "description", "examples", "default", "comment")


@runtime_checkable
class SchemaProtocol(Protocol):
    """
    Capability interface for any value that can be registered as a schema.

    Works for the bundled node dataclasses as well as third-party node types
    that expose the same three members.
    """

    @property
    def schema_id(self) -> str | None: ...

    @property
    def kind(self) -> SchemaKind: ...

    def children(self) -> Iterable["SchemaProtocol"]: ...


@dataclass(eq=False, kw_only=True)
class SchemaNode:
    """Base class for schema node variants.

    Nodes compare and hash by identity; structural comparison lives in
    :mod:`schemata.registry.normalize`.
    """

    kind: ClassVar[SchemaKind]

    id: str | None = None
    title: str | None = None
    description: str | None = None
    examples: list[Any] | None = None
    default: Any = None
    comment: str | None = None

    @property
    def schema_id(self) -> str | None:
        return self.id

    def children(self) -> tuple["SchemaNode", ...]:
        return ()

    def metadata(self) -> dict[str, Any]:
        """Return the metadata fields that are set on this node."""
        return {name: getattr(self, name) for name in METADATA_FIELDS if getattr(self, name) is not None}

    def __repr__(self) -> str:
        label = f" id={self.id!r}" if self.id else ""
        return f"<{type(self).__name__}{label}>"
