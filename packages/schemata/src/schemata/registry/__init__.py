"""Schema registry: store, reference extraction, duplicate detection, resolvers and the facade."""

from .references import extract_references, references_by_id
from .pending import PendingSchemas
from .records import DuplicateReport
from .store import SchemaStore, require_schema_id
from .normalize import are_equivalent, canonical, normalize
from .predicates import (
    GeneratedSchemaPredicate,
    PrefixFamilyPredicate,
    ResponseEnvelopePredicate,
    build_predicates,
)
from .duplicates import DuplicateDetector
from .resolvers import BaseResolver, OrderedResolver, TopologicalResolver
from .registry import SchemaRegistry
from .active import (
    add_schema,
    clear_early_schemas,
    current_registry,
    flush_schemas,
    get_active_registry,
    push_active_registry,
    ref_schema,
    set_active_registry,
)

__all__ = [
    "extract_references",
    "references_by_id",
    "PendingSchemas",
    "DuplicateReport",
    "SchemaStore",
    "require_schema_id",
    "normalize",
    "canonical",
    "are_equivalent",
    "ResponseEnvelopePredicate",
    "GeneratedSchemaPredicate",
    "PrefixFamilyPredicate",
    "build_predicates",
    "DuplicateDetector",
    "BaseResolver",
    "TopologicalResolver",
    "OrderedResolver",
    "SchemaRegistry",
    "add_schema",
    "clear_early_schemas",
    "current_registry",
    "flush_schemas",
    "get_active_registry",
    "push_active_registry",
    "ref_schema",
    "set_active_registry",
]
