# schemata/exceptions.py
"""Unified exception hierarchy for schema registration."""


class SchemataError(Exception): ...


class SchemaStructureError(SchemataError, ValueError):
    """Raised when a schema value cannot be converted or serialized."""


# ----------------------------------------------------------------------------
# Registry errors
# ----------------------------------------------------------------------------
class RegistryError(SchemataError): ...


class MissingIdentifierError(RegistryError, ValueError):
    """Raised when a schema submitted for registration carries no usable id."""


class ConflictingDefinitionError(RegistryError):
    """Raised when an id is registered twice with structurally different content."""

    def __init__(self, schema_id: str, message: str | None = None) -> None:
        self.schema_id = schema_id
        super().__init__(
            message
            or f"Schema {schema_id!r} is already registered with a different definition"
        )


class UnresolvedReferenceError(RegistryError, LookupError):
    """Raised when a reference names an id that was never registered."""

    def __init__(self, schema_id: str, referrer: str | None) -> None:
        self.schema_id = schema_id
        self.referrer = referrer
        super().__init__(
            f"Schema {referrer!r} references {schema_id!r}, which is not registered. "
            f"Register {schema_id!r} or fix the reference."
        )


class EngineRejectionError(RegistryError):
    """Raised when the validation engine refuses a fully-resolved schema."""

    def __init__(self, schema_id: str, reason: str) -> None:
        self.schema_id = schema_id
        self.reason = reason
        super().__init__(f"Validation engine rejected schema {schema_id!r}: {reason}")


# ----------------------------------------------------------------------------
# Engine errors (raised by the bundled engines)
# ----------------------------------------------------------------------------
class EngineError(SchemataError): ...


class EngineDuplicateError(EngineError): ...


class EngineReferenceError(EngineError, LookupError): ...


__all__ = [
    "SchemataError",
    "SchemaStructureError",
    "RegistryError",
    "MissingIdentifierError",
    "ConflictingDefinitionError",
    "UnresolvedReferenceError",
    "EngineRejectionError",
    "EngineError",
    "EngineDuplicateError",
    "EngineReferenceError",
]
