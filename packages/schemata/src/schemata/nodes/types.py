# schemata/nodes/types.py
"""Concrete schema node variants and small constructor helpers.

Usage:
    from schemata.nodes import obj, string, ref

    Address = obj({"street": string(), "city": string()}, id="Address")
    Person = obj({"name": string(), "address": ref("Address")}, id="Person")
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Sequence

from ..exceptions import MissingIdentifierError
from .base import SchemaKind, SchemaNode

__all__ = [
    "ObjectSchema",
    "ArraySchema",
    "UnionSchema",
    "PrimitiveSchema",
    "RefSchema",
    "PRIMITIVE_TYPES",
    "obj",
    "array",
    "union",
    "string",
    "number",
    "integer",
    "boolean",
    "null",
    "literal",
    "ref",
]

PRIMITIVE_TYPES: frozenset[str] = frozenset({"string", "number", "integer", "boolean", "null"})


@dataclass(eq=False)
class ObjectSchema(SchemaNode):
    kind = SchemaKind.OBJECT

    properties: dict[str, SchemaNode] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    # True/False openness flag, or a schema for the values of extra keys
    additional_properties: bool | SchemaNode | None = None

    def children(self) -> tuple[SchemaNode, ...]:
        nodes = tuple(self.properties.values())
        if isinstance(self.additional_properties, SchemaNode):
            nodes += (self.additional_properties,)
        return nodes


@dataclass(eq=False)
class ArraySchema(SchemaNode):
    kind = SchemaKind.ARRAY

    items: SchemaNode | None = None

    def children(self) -> tuple[SchemaNode, ...]:
        return (self.items,) if self.items is not None else ()


@dataclass(eq=False)
class UnionSchema(SchemaNode):
    kind = SchemaKind.UNION

    members: list[SchemaNode] = field(default_factory=list)
    mode: Literal["any_of", "one_of"] = "any_of"
    # When True the member order is part of the contract (e.g. first-match unions).
    ordered: bool = False

    def children(self) -> tuple[SchemaNode, ...]:
        return tuple(self.members)


@dataclass(eq=False)
class PrimitiveSchema(SchemaNode):
    kind = SchemaKind.PRIMITIVE

    # None for type-less leaves such as {"const": 200}
    type: str | None = None
    constraints: dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class RefSchema(SchemaNode):
    """Placeholder standing in for the schema registered under ``target``."""

    kind = SchemaKind.REF

    target: str = ""


# ---------------------------------------------------------------------------
# Constructor helpers
# ---------------------------------------------------------------------------

def obj(
    properties: Mapping[str, SchemaNode] | None = None,
    *,
    required: Sequence[str] | None = None,
    additional_properties: bool | SchemaNode | None = None,
    **meta: Any,
) -> ObjectSchema:
    """Build an object schema. All fields are required unless ``required`` says otherwise."""
    props = dict(properties or {})
    return ObjectSchema(
        properties=props,
        required=list(required) if required is not None else list(props),
        additional_properties=additional_properties,
        **meta,
    )


def array(items: SchemaNode, **meta: Any) -> ArraySchema:
    return ArraySchema(items=items, **meta)


def union(
    *members: SchemaNode,
    mode: Literal["any_of", "one_of"] = "any_of",
    ordered: bool = False,
    **meta: Any,
) -> UnionSchema:
    return UnionSchema(members=list(members), mode=mode, ordered=ordered, **meta)


def _primitive(type_: str | None, meta: dict[str, Any]) -> PrimitiveSchema:
    node_meta = {k: meta.pop(k) for k in ("id", "title", "description", "examples", "default", "comment") if k in meta}
    return PrimitiveSchema(type=type_, constraints=meta, **node_meta)


def string(**constraints: Any) -> PrimitiveSchema:
    return _primitive("string", constraints)


def number(**constraints: Any) -> PrimitiveSchema:
    return _primitive("number", constraints)


def integer(**constraints: Any) -> PrimitiveSchema:
    return _primitive("integer", constraints)


def boolean(**constraints: Any) -> PrimitiveSchema:
    return _primitive("boolean", constraints)


def null(**constraints: Any) -> PrimitiveSchema:
    return _primitive("null", constraints)


def literal(value: Any, **constraints: Any) -> PrimitiveSchema:
    """A fixed value, e.g. ``literal(200)`` for a status marker."""
    constraints["const"] = value
    return _primitive(None, constraints)


def ref(target: str, **meta: Any) -> RefSchema:
    """Build a reference node. The target does not need to exist yet."""
    if not isinstance(target, str) or not target.strip():
        raise MissingIdentifierError(
            f"A reference requires a non-empty string schema id, got {target!r}"
        )
    return RefSchema(target=target, **meta)
