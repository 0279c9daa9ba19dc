"""Validation engines the registry can commit into."""

from .base import EnumerableEngine, GroupCommitEngine, ValidationEngine
from .jsonschema_engine import JsonSchemaEngine
from .memory import InMemoryEngine

__all__ = [
    "ValidationEngine",
    "GroupCommitEngine",
    "EnumerableEngine",
    "InMemoryEngine",
    "JsonSchemaEngine",
]
