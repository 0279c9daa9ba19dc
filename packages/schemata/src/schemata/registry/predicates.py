# schemata/registry/predicates.py
"""
Exclusion predicates for duplicate detection.

Some schemas are supposed to look alike. Three kinds of predicate keep them
out of duplicate reports:

* *exempt* ``(schema) -> bool``: the schema is never compared at all
  (e.g. response envelopes, which many endpoints share by shape);
* *peer-exempt* ``(schema) -> bool``: a pair is skipped only when both sides
  match (e.g. two generated model schemas);
* *distinct* ``(a, b) -> bool``: the pair is declared never-duplicate
  (e.g. ``QueryUser`` vs ``OutputUser``).

All of them are plain callables; the classes below are the configurable
defaults built by :func:`build_predicates`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

from ..nodes import ObjectSchema, PrimitiveSchema, SchemaProtocol

if TYPE_CHECKING:
    from ..conf.models import RegistrySettings

SchemaPredicate = Callable[[SchemaProtocol], bool]
PairPredicate = Callable[[SchemaProtocol, SchemaProtocol], bool]

__all__ = [
    "SchemaPredicate",
    "PairPredicate",
    "ResponseEnvelopePredicate",
    "GeneratedSchemaPredicate",
    "PrefixFamilyPredicate",
    "DEFAULT_DISTINCT_PREFIXES",
    "build_predicates",
]

# Conventional prefixes for request and response parts of a route.
DEFAULT_DISTINCT_PREFIXES: tuple[str, ...] = ("Query", "Input", "Output", "Params", "Headers")


@dataclass(frozen=True)
class ResponseEnvelopePredicate:
    """Match ``{status: <literal>, data: <payload>}`` wrappers."""

    status_field: str = "status"
    payload_field: str = "data"

    def __call__(self, schema: SchemaProtocol) -> bool:
        if not isinstance(schema, ObjectSchema):
            return False
        if set(schema.properties) != {self.status_field, self.payload_field}:
            return False
        status = schema.properties[self.status_field]
        return isinstance(status, PrimitiveSchema) and (
            "const" in status.constraints or "enum" in status.constraints
        )


@dataclass(frozen=True)
class GeneratedSchemaPredicate:
    """
    Match schemas produced by a code generator.

    The id must start with one of ``prefixes`` and end with ``suffix``, and
    the fields must include ``id_field`` plus at least one of ``audit_fields``.
    """

    prefixes: tuple[str, ...] = ("Output", "Input")
    suffix: str = "Schema"
    id_field: str = "id"
    audit_fields: tuple[str, ...] = ("createdAt", "updatedAt")

    def __call__(self, schema: SchemaProtocol) -> bool:
        if not isinstance(schema, ObjectSchema):
            return False
        schema_id = schema.schema_id
        if not schema_id or not schema_id.endswith(self.suffix):
            return False
        if not any(schema_id.startswith(prefix) for prefix in self.prefixes):
            return False
        props = schema.properties
        return self.id_field in props and any(field in props for field in self.audit_fields)


@dataclass(frozen=True)
class PrefixFamilyPredicate:
    """Schemas from different prefix families are never duplicates of each other."""

    prefixes: tuple[str, ...] = DEFAULT_DISTINCT_PREFIXES

    def family(self, schema_id: str | None) -> str | None:
        if not schema_id:
            return None
        # longest match first so "InputX" never lands in a shorter family by accident
        for prefix in sorted(self.prefixes, key=len, reverse=True):
            if schema_id.startswith(prefix):
                return prefix
        return None

    def __call__(self, a: SchemaProtocol, b: SchemaProtocol) -> bool:
        fa, fb = self.family(a.schema_id), self.family(b.schema_id)
        return fa is not None and fb is not None and fa != fb


def build_predicates(
    settings: "RegistrySettings",
) -> tuple[Sequence[SchemaPredicate], Sequence[SchemaPredicate], Sequence[PairPredicate]]:
    """Return ``(exempt, peer_exempt, distinct)`` predicates for ``settings``."""
    exempt: list[SchemaPredicate] = [
        ResponseEnvelopePredicate(
            status_field=settings.ENVELOPE_STATUS_FIELD,
            payload_field=settings.ENVELOPE_PAYLOAD_FIELD,
        )
    ]
    peer_exempt: list[SchemaPredicate] = [
        GeneratedSchemaPredicate(
            prefixes=tuple(settings.GENERATED_PREFIXES),
            suffix=settings.GENERATED_SUFFIX,
            id_field=settings.GENERATED_ID_FIELD,
            audit_fields=tuple(settings.GENERATED_AUDIT_FIELDS),
        )
    ]
    distinct: list[PairPredicate] = []
    if settings.DISTINCT_PREFIXES:
        distinct.append(PrefixFamilyPredicate(prefixes=tuple(settings.DISTINCT_PREFIXES)))
    return exempt, peer_exempt, distinct
