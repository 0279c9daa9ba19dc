"""
schemata: schema registration and dependency resolution.

Named schema definitions are collected from anywhere in an application,
their cross-references are resolved, structurally duplicate definitions are
reported, and everything is committed into a validation engine in an order
that engine can satisfy.

Import Guidelines:
------------------
- Build schemas with the helpers in `schemata.nodes` (`obj`, `array`, `ref`, ...).
- Create one `SchemaRegistry` per application and call `flush()` once at startup.
- Use `schemata.engines` for the bundled engines (`InMemoryEngine`, `JsonSchemaEngine`).
- Use `schemata.exceptions` for error handling.
- Use `add_schema` / `set_active_registry` for modules imported before the registry exists.
"""

from importlib.metadata import PackageNotFoundError, version

from .conf import RegistrySettings, Settings
from .engines import InMemoryEngine, JsonSchemaEngine, ValidationEngine
from .exceptions import (
    ConflictingDefinitionError,
    EngineRejectionError,
    MissingIdentifierError,
    SchemataError,
    UnresolvedReferenceError,
)
from .nodes import SchemaKind, SchemaNode, SchemaProtocol, array, obj, ref, string, union
from .registry import (
    DuplicateDetector,
    OrderedResolver,
    SchemaRegistry,
    TopologicalResolver,
    add_schema,
    current_registry,
    flush_schemas,
    get_active_registry,
    push_active_registry,
    ref_schema,
    set_active_registry,
)

try:
    __version__ = version("schemata")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "SchemaRegistry",
    "Settings",
    "RegistrySettings",
    "ValidationEngine",
    "InMemoryEngine",
    "JsonSchemaEngine",
    "DuplicateDetector",
    "TopologicalResolver",
    "OrderedResolver",
    "SchemaKind",
    "SchemaNode",
    "SchemaProtocol",
    "obj",
    "array",
    "union",
    "string",
    "ref",
    "add_schema",
    "ref_schema",
    "flush_schemas",
    "current_registry",
    "get_active_registry",
    "set_active_registry",
    "push_active_registry",
    "SchemataError",
    "MissingIdentifierError",
    "ConflictingDefinitionError",
    "UnresolvedReferenceError",
    "EngineRejectionError",
]
