"""Loaders that import schema modules and hand them to a registry."""

from .base import BaseLoader
from .default import SchemaLoader

__all__ = ["BaseLoader", "SchemaLoader"]
