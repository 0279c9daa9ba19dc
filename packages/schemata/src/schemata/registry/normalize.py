# schemata/registry/normalize.py
"""
Structural normalization of schema trees.

Two schemas describe the same wire shape when their normalized forms
serialize to the same canonical string. Normalization:

* drops metadata (id, title, description, examples, default, comment);
* sorts object fields and the ``required`` list, keeping openness flags;
* sorts union branches unless the union is declared ``ordered``;
* keeps reference targets verbatim, so two references only match when they
  point at the same schema.

Recursion is bounded by ``max_depth``. Past the ceiling the raw node is kept
as-is and serializes with all of its fields, metadata included, so two raw
nodes compare equal when their contents are equal.
"""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from typing import Any

from ..nodes import (
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    SchemaKind,
    SchemaNode,
    SchemaProtocol,
    UnionSchema,
)

__all__ = ["DEFAULT_MAX_DEPTH", "normalize", "canonical", "are_equivalent"]

DEFAULT_MAX_DEPTH = 10


def normalize(schema: SchemaProtocol, max_depth: int = DEFAULT_MAX_DEPTH) -> Any:
    """Return the metadata-free, order-canonical form of ``schema``."""
    return _normalize(schema, 0, max_depth)


def canonical(schema: SchemaProtocol, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    """Deterministic serialization of the normalized form."""
    return _dumps(normalize(schema, max_depth))


def are_equivalent(a: SchemaProtocol, b: SchemaProtocol, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    if a is b:
        return True
    return canonical(a, max_depth) == canonical(b, max_depth)


def _normalize(node: Any, depth: int, max_depth: int) -> Any:
    if depth > max_depth:
        return node

    child = depth + 1

    if isinstance(node, RefSchema) or (
        isinstance(node, SchemaProtocol) and node.kind == SchemaKind.REF
    ):
        return {"$ref": getattr(node, "target", None)}

    if isinstance(node, ObjectSchema):
        out: dict[str, Any] = {
            "type": "object",
            "properties": {
                name: _normalize(node.properties[name], child, max_depth)
                for name in sorted(node.properties)
            },
            "required": sorted(node.required),
        }
        extra = node.additional_properties
        if isinstance(extra, SchemaNode):
            out["additionalProperties"] = _normalize(extra, child, max_depth)
        elif extra is not None:
            out["additionalProperties"] = bool(extra)
        return out

    if isinstance(node, ArraySchema):
        return {"type": "array", "items": _normalize(node.items, child, max_depth)}

    if isinstance(node, UnionSchema):
        branches = [_normalize(member, child, max_depth) for member in node.members]
        if node.ordered:
            return {node.mode: branches, "ordered": True}
        return {node.mode: sorted(branches, key=_dumps)}

    if isinstance(node, PrimitiveSchema):
        out = {key: _plain(value, child, max_depth) for key, value in node.constraints.items()}
        if node.type is not None:
            out["type"] = node.type
        return out

    if isinstance(node, SchemaProtocol):
        # third-party node types: keep the kind and the child order they expose
        return {"kind": _kind_name(node), "children": [_normalize(c, child, max_depth) for c in node.children()]}

    return node


def _plain(value: Any, depth: int, max_depth: int) -> Any:
    # constraint values may embed nodes (e.g. "contains") or plain containers
    if isinstance(value, SchemaProtocol):
        return _normalize(value, depth, max_depth)
    if isinstance(value, dict):
        return {str(k): _plain(v, depth + 1, max_depth) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v, depth + 1, max_depth) for v in value]
    return value


def _kind_name(node: SchemaProtocol) -> str:
    return node.kind.value if isinstance(node.kind, SchemaKind) else str(node.kind)


def _raw(value: Any, path: list[int]) -> Any:
    """
    JSON-ready form of a value left raw past the depth ceiling.

    Raw nodes keep every field, metadata included. A node that recurs on the
    current path becomes ``{"$recurs": n}``, ``n`` being how many levels up
    it was first seen.
    """
    if isinstance(value, dict):
        return {str(k): _raw(v, path) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_raw(v, path) for v in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_raw(v, path) for v in value), key=repr)
    if not isinstance(value, SchemaProtocol):
        return value

    if id(value) in path:
        return {"$recurs": len(path) - path.index(id(value))}

    path.append(id(value))
    try:
        if is_dataclass(value):
            body = {f.name: _raw(getattr(value, f.name), path) for f in fields(value)}
        else:
            body = {"children": [_raw(c, path) for c in value.children()]}
        body["kind"] = _kind_name(value)
        return body
    finally:
        path.pop()


def _dumps(value: Any) -> str:
    return json.dumps(_raw(value, []), sort_keys=True, separators=(",", ":"), default=repr)
