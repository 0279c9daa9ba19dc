# schemata/engines/jsonschema_engine.py
"""
Validation engine backed by ``jsonschema`` and ``referencing``.

Committed schemas are rendered to JSON Schema documents, checked against the
draft metaschema and stored as resources of a :class:`referencing.Registry`
keyed by schema id, so ``{"$ref": "Address"}`` in one schema resolves to the
document committed as ``Address``.
"""

import logging
from threading import RLock
from typing import Any, Iterable, Sequence

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, ValidationError
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from ..exceptions import EngineDuplicateError, EngineError, EngineReferenceError
from ..nodes import SchemaNode, to_json_schema
from ..registry.references import extract_references

logger = logging.getLogger(__name__)


class JsonSchemaEngine:
    """JSON Schema (draft 2020-12) engine with eager reference resolution."""

    validator_cls = Draft202012Validator

    def __init__(self) -> None:
        self._lock = RLock()
        self._documents: dict[str, dict[str, Any]] = {}
        self._registry: Registry = Registry()

    # --- queries ---

    def get_by_name(self, schema_id: str) -> dict[str, Any] | None:
        with self._lock:
            return self._documents.get(schema_id)

    def names(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._documents)

    # --- commits ---

    def add(self, schema: SchemaNode) -> None:
        self.add_group([schema])

    def add_group(self, schemas: Sequence[SchemaNode]) -> None:
        with self._lock:
            batch: dict[str, dict[str, Any]] = {}
            refs: dict[str, Iterable[str]] = {}
            for schema in schemas:
                schema_id = schema.schema_id
                if not schema_id:
                    raise EngineError(f"Cannot add schema without an id: {schema!r}")
                if schema_id in self._documents:
                    raise EngineDuplicateError(f"Schema with id {schema_id!r} already exists")
                document = to_json_schema(schema)
                try:
                    self.validator_cls.check_schema(document)
                except SchemaError as err:
                    raise EngineError(f"Schema {schema_id!r} is not a valid JSON Schema: {err.message}") from err
                batch[schema_id] = document
                refs[schema_id] = extract_references(schema)

            candidate = self._registry.with_resources(
                (schema_id, Resource.from_contents(doc, default_specification=DRAFT202012))
                for schema_id, doc in batch.items()
            )
            resolver = candidate.resolver()
            for schema_id, targets in refs.items():
                for target in targets:
                    try:
                        resolver.lookup(target)
                    except Unresolvable as err:
                        raise EngineReferenceError(
                            f"Schema {schema_id!r}: can't resolve reference {target!r}"
                        ) from err

            self._registry = candidate
            self._documents.update(batch)
            logger.debug("engine.add %s", ",".join(batch))

    # --- validation ---

    def validator(self, schema_id: str) -> Draft202012Validator:
        with self._lock:
            document = self._documents.get(schema_id)
            if document is None:
                raise KeyError(f"Schema not registered: {schema_id}")
            return self.validator_cls(document, registry=self._registry)

    def validate(self, schema_id: str, instance: Any) -> None:
        """Validate ``instance`` against a committed schema, raising ``ValueError`` on failure."""
        validator = self.validator(schema_id)
        errors: list[ValidationError] = sorted(validator.iter_errors(instance), key=lambda e: e.json_path)
        if errors:
            messages = "; ".join(error.message for error in errors)
            raise ValueError(f"{schema_id}: validation failed: {messages}")

    def is_valid(self, schema_id: str, instance: Any) -> bool:
        return self.validator(schema_id).is_valid(instance)


__all__ = ["JsonSchemaEngine"]
