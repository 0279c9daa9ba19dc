# schemata/registry/references.py
"""Reference extraction.

Collects the ids a single schema points at. Reference nodes are leaves: the
walk never follows a named reference into the referenced schema's body, which
keeps the work local to one tree and makes named cycles harmless. A ``visited``
set of node identities also guards against inline cycles in the schema's own
object graph.
"""

from __future__ import annotations

from ..nodes import SchemaKind, SchemaProtocol

__all__ = ["extract_references", "references_by_id"]


def extract_references(schema: SchemaProtocol) -> tuple[str, ...]:
    """Return the ids referenced by ``schema``, each once, in first-seen order."""
    found: dict[str, None] = {}
    visited: set[int] = set()

    def walk(node: SchemaProtocol) -> None:
        if id(node) in visited:
            return
        visited.add(id(node))

        if node.kind == SchemaKind.REF:
            target = getattr(node, "target", None)
            if target:
                found.setdefault(target, None)
            return

        for child in node.children():
            walk(child)

    walk(schema)
    return tuple(found)


def references_by_id(schemas: dict[str, SchemaProtocol]) -> dict[str, tuple[str, ...]]:
    """Map every schema id to the ids it references."""
    return {schema_id: extract_references(schema) for schema_id, schema in schemas.items()}
