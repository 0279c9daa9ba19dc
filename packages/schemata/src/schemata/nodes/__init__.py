"""Schema node model: kinds, the capability protocol, node variants and adapters."""

from .adapters import from_json_schema, from_pydantic, to_json_schema
from .base import METADATA_FIELDS, SchemaKind, SchemaNode, SchemaProtocol
from .types import (
    PRIMITIVE_TYPES,
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    UnionSchema,
    array,
    boolean,
    integer,
    literal,
    null,
    number,
    obj,
    ref,
    string,
    union,
)

__all__ = [
    "METADATA_FIELDS",
    "PRIMITIVE_TYPES",
    "SchemaKind",
    "SchemaNode",
    "SchemaProtocol",
    "ObjectSchema",
    "ArraySchema",
    "UnionSchema",
    "PrimitiveSchema",
    "RefSchema",
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
    "to_json_schema",
    "from_json_schema",
    "from_pydantic",
]
