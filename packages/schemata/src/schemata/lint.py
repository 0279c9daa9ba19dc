"""
Structural lint for schema node trees.

This module checks that a schema is plausibly a well-formed typed schema. It
does not perform full JSON-Schema semantic validation: constraint values are
not checked, only the shape of the tree.

Usage:
    from schemata.lint import lint_schema, format_violations

    violations = lint_schema(my_schema)
    if violations:
        logger.warning(format_violations(violations))
"""

from dataclasses import dataclass

from .nodes import (
    PRIMITIVE_TYPES,
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    SchemaNode,
    SchemaProtocol,
    UnionSchema,
)


@dataclass
class SchemaViolation:
    """Represents a structural problem in a schema tree."""
    path: str
    rule: str
    message: str
    suggestion: str | None = None


def lint_schema(schema: SchemaProtocol, path: str = "$") -> list[SchemaViolation]:
    """
    Recursively lint a schema tree.

    Args:
        schema: Root node to check
        path: Current path (for error reporting)

    Returns:
        List of SchemaViolation objects (empty if the shape looks sound)

    Rules:
        1. Every node must be a schema node
        2. Objects must list only declared fields in "required"
        3. Arrays must declare an item schema
        4. Unions must have at least one member
        5. References must name a target
        6. Primitive types must be JSON primitive type names
    """
    violations: list[SchemaViolation] = []
    _lint(schema, path, violations, set())
    return violations


def _lint(node: object, path: str, violations: list[SchemaViolation], seen: set[int]) -> None:
    if id(node) in seen:
        return
    seen.add(id(node))

    # Rule 1
    if not isinstance(node, SchemaProtocol):
        violations.append(SchemaViolation(
            path=path,
            rule="not_a_schema",
            message=f"Expected a schema node, got {type(node).__name__}",
            suggestion="Build schemas with schemata.nodes helpers (obj, array, string, ref, ...)",
        ))
        return

    if isinstance(node, ObjectSchema):
        # Rule 2
        undeclared = [name for name in node.required if name not in node.properties]
        if undeclared:
            violations.append(SchemaViolation(
                path=path,
                rule="required_undeclared",
                message=f"'required' lists fields that are not declared: {undeclared}",
                suggestion="Remove them from 'required' or add them to 'properties'",
            ))
        for name, child in node.properties.items():
            _lint(child, f"{path}.properties.{name}", violations, seen)
        if isinstance(node.additional_properties, SchemaNode):
            _lint(node.additional_properties, f"{path}.additionalProperties", violations, seen)

    elif isinstance(node, ArraySchema):
        # Rule 3
        if node.items is None:
            violations.append(SchemaViolation(
                path=path,
                rule="array_items_missing",
                message="Array schema must declare an item schema",
                suggestion="Pass the item schema, e.g. array(string())",
            ))
        else:
            _lint(node.items, f"{path}.items", violations, seen)

    elif isinstance(node, UnionSchema):
        # Rule 4
        if not node.members:
            violations.append(SchemaViolation(
                path=path,
                rule="union_empty",
                message="Union schema has no members",
            ))
        for idx, member in enumerate(node.members):
            _lint(member, f"{path}.{node.mode}[{idx}]", violations, seen)

    elif isinstance(node, RefSchema):
        # Rule 5
        if not node.target:
            violations.append(SchemaViolation(
                path=path,
                rule="ref_target_missing",
                message="Reference node does not name a target schema",
                suggestion="Use ref('SchemaName')",
            ))

    elif isinstance(node, PrimitiveSchema):
        # Rule 6
        if node.type is not None and node.type not in PRIMITIVE_TYPES:
            violations.append(SchemaViolation(
                path=path,
                rule="primitive_type_unknown",
                message=f"Unknown primitive type {node.type!r}",
                suggestion=f"Use one of {sorted(PRIMITIVE_TYPES)}",
            ))

    else:
        for idx, child in enumerate(node.children()):
            _lint(child, f"{path}[{idx}]", violations, seen)


def format_violations(violations: list[SchemaViolation], *, schema_id: str | None = None) -> str:
    """
    Format violations as a human-readable report.

    Args:
        violations: List of SchemaViolation objects
        schema_id: Optional schema id for the report header

    Returns:
        Formatted string report
    """
    label = f"Schema {schema_id!r}" if schema_id else "Schema"
    if not violations:
        return f"{label} looks structurally sound"

    lines = [f"{label} has {len(violations)} structural issue(s):"]
    for v in violations:
        lines.append(f"  [{v.rule}] {v.path}: {v.message}")
        if v.suggestion:
            lines.append(f"    hint: {v.suggestion}")
    return "\n".join(lines)
