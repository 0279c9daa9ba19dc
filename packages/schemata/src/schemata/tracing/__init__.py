# schemata/tracing/__init__.py
from .tracing import get_tracer, registry_span

__all__ = ["get_tracer", "registry_span"]
