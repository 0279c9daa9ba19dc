# schemata/nodes/adapters.py
"""
Conversion between schema nodes and JSON Schema documents.

- :func:`to_json_schema` renders a node tree as a JSON Schema (2020-12) document,
  the wire form handed to JSON-Schema based validation engines.
- :func:`from_json_schema` parses a JSON Schema document into nodes.
- :func:`from_pydantic` turns a Pydantic model class into registrable nodes:
  one node per entry in ``$defs`` plus the model itself, dependencies first.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from ..exceptions import SchemaStructureError
from .base import SchemaNode
from .types import (
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    UnionSchema,
)

if TYPE_CHECKING:
    from pydantic import BaseModel

logger = logging.getLogger(__name__)

__all__ = ["to_json_schema", "from_json_schema", "from_pydantic"]

_META_TO_JSON = {
    "title": "title",
    "description": "description",
    "examples": "examples",
    "default": "default",
    "comment": "$comment",
}
_JSON_TO_META = {v: k for k, v in _META_TO_JSON.items()}
_LOCAL_REF_PREFIXES = ("#/$defs/", "#/definitions/")
_STRUCTURAL_KEYS = frozenset(
    {"$id", "$ref", "$schema", "$defs", "definitions", "type", "properties", "required",
     "additionalProperties", "items", "anyOf", "oneOf"}
)


# ---------------------------------------------------------------------------
# Node -> JSON Schema
# ---------------------------------------------------------------------------

def to_json_schema(node: SchemaNode) -> dict[str, Any]:
    """Render ``node`` as a JSON Schema document.

    Only the root carries ``$id``; nested nodes are rendered inline. Inline
    object cycles cannot be represented and raise :class:`SchemaStructureError`;
    use a reference node to express recursion.
    """
    doc = _render(node, set())
    if node.id:
        doc = {"$id": node.id, **doc}
    return doc


def _render(node: SchemaNode, stack: set[int]) -> dict[str, Any]:
    if id(node) in stack:
        raise SchemaStructureError(
            f"Inline cycle detected at {node!r}; use ref() to express recursive schemas"
        )
    stack.add(id(node))
    try:
        doc = _render_body(node, stack)
    finally:
        stack.discard(id(node))

    for attr, value in node.metadata().items():
        # only the root carries $id, added by the caller
        if attr in _META_TO_JSON:
            doc[_META_TO_JSON[attr]] = value
    return doc


def _render_body(node: SchemaNode, stack: set[int]) -> dict[str, Any]:
    if isinstance(node, RefSchema):
        return {"$ref": node.target}

    if isinstance(node, ObjectSchema):
        doc: dict[str, Any] = {
            "type": "object",
            "properties": {name: _render(child, stack) for name, child in node.properties.items()},
        }
        if node.required:
            doc["required"] = list(node.required)
        if isinstance(node.additional_properties, SchemaNode):
            doc["additionalProperties"] = _render(node.additional_properties, stack)
        elif node.additional_properties is not None:
            doc["additionalProperties"] = node.additional_properties
        return doc

    if isinstance(node, ArraySchema):
        doc = {"type": "array"}
        if node.items is not None:
            doc["items"] = _render(node.items, stack)
        return doc

    if isinstance(node, UnionSchema):
        key = "oneOf" if node.mode == "one_of" else "anyOf"
        return {key: [_render(member, stack) for member in node.members]}

    if isinstance(node, PrimitiveSchema):
        doc = {"type": node.type} if node.type else {}
        doc.update(node.constraints)
        return doc

    raise SchemaStructureError(f"Unsupported schema node type: {type(node).__name__}")


# ---------------------------------------------------------------------------
# JSON Schema -> Node
# ---------------------------------------------------------------------------

def _ref_target(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise SchemaStructureError(f"$ref must be a non-empty string, got {value!r}")
    for prefix in _LOCAL_REF_PREFIXES:
        if value.startswith(prefix):
            return value[len(prefix):]
    return value


def from_json_schema(doc: Mapping[str, Any], *, schema_id: str | None = None) -> SchemaNode:
    """Parse a JSON Schema document into a node tree.

    ``#/$defs/X`` and ``#/definitions/X`` references become ``ref("X")`` so the
    definitions can be registered as standalone schemas.
    """
    node = _parse(doc, "$")
    node_id = schema_id or doc.get("$id")
    if node_id:
        node.id = node_id
    return node


def _parse(doc: Any, path: str) -> SchemaNode:
    if doc is True or doc is False:
        # boolean schemas: true accepts anything, false rejects everything
        return PrimitiveSchema(constraints={} if doc else {"not": {}})
    if not isinstance(doc, Mapping):
        raise SchemaStructureError(f"{path}: expected a JSON Schema object, got {type(doc).__name__}")

    meta = {_JSON_TO_META[k]: v for k, v in doc.items() if k in _JSON_TO_META}

    if "$ref" in doc:
        return RefSchema(target=_ref_target(doc["$ref"]), **meta)

    for key, mode in (("anyOf", "any_of"), ("oneOf", "one_of")):
        if key in doc:
            members = [_parse(sub, f"{path}.{key}[{i}]") for i, sub in enumerate(doc[key])]
            return UnionSchema(members=members, mode=mode, **meta)

    type_ = doc.get("type")
    if isinstance(type_, list):
        members = [PrimitiveSchema(type=t) for t in type_]
        return UnionSchema(members=members, **meta)

    if type_ == "object" or "properties" in doc:
        props = doc.get("properties") or {}
        additional = doc.get("additionalProperties")
        if isinstance(additional, Mapping):
            additional = _parse(additional, f"{path}.additionalProperties")
        return ObjectSchema(
            properties={name: _parse(sub, f"{path}.properties.{name}") for name, sub in props.items()},
            required=list(doc.get("required") or []),
            additional_properties=additional,
            **meta,
        )

    if type_ == "array" or "items" in doc:
        items = doc.get("items")
        return ArraySchema(items=_parse(items, f"{path}.items") if items is not None else None, **meta)

    constraints = {
        k: v for k, v in doc.items()
        if k not in _STRUCTURAL_KEYS and k not in _JSON_TO_META
    }
    return PrimitiveSchema(type=type_, constraints=constraints, **meta)


def from_pydantic(model: type["BaseModel"], *, schema_id: str | None = None) -> list[SchemaNode]:
    """
    Convert a Pydantic model class into registrable schema nodes.

    Nested models listed under ``$defs`` become standalone schemas named after
    the model; the returned list holds them first and the model itself last.

    :param model: The Pydantic model class to convert.
    :param schema_id: Optional id for the model schema; defaults to its title.
    :return: Schema nodes, dependencies first.
    """
    doc = dict(model.model_json_schema(ref_template="{model}"))
    defs = doc.pop("$defs", {}) or {}

    nodes = [from_json_schema(sub, schema_id=name) for name, sub in defs.items()]
    root_id = schema_id or doc.get("title") or model.__name__
    nodes.append(from_json_schema(doc, schema_id=root_id))
    logger.debug("Converted pydantic model %s into %d schema(s)", model.__name__, len(nodes))
    return nodes
