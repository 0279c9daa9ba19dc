import logging
from collections.abc import Mapping, Sequence
from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tracer utilities
# ---------------------------------------------------------------------------

_DEFAULT_TRACER_NAME = "schemata"
_ALLOWED = (bool, str, bytes, int, float)


def get_tracer(name: str | None = None) -> Tracer:
    """Return an OpenTelemetry tracer for this package."""
    return trace.get_tracer(name or _DEFAULT_TRACER_NAME)


def _apply_attributes(span: Span, attrs: Mapping[str, Any] | None) -> None:
    # OpenTelemetry accepts only scalars of _ALLOWED types or sequences of them.
    for key, value in (attrs or {}).items():
        if value is None:
            continue
        if isinstance(value, _ALLOWED):
            span.set_attribute(key, value)
        elif isinstance(value, Sequence):
            cleaned = [x for x in value if isinstance(x, _ALLOWED)]
            if cleaned:
                span.set_attribute(key, cleaned)


def _record_exception(span: Span, err: BaseException) -> None:
    span.record_exception(err)
    span.set_status(Status(StatusCode.ERROR, description=str(err)))
    span.set_attribute("exception.type", type(err).__name__)
    schema_id = getattr(err, "schema_id", None)
    if isinstance(schema_id, str):
        span.set_attribute("schemata.schema_id", schema_id)


@contextmanager
def registry_span(name: str, *, attributes: Mapping[str, Any] | None = None) -> Iterator[Span]:
    """Span around a registry operation.

    Usage:
        with registry_span("schemata.flush", attributes={"schemata.pending": 12}) as span:
            ...
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=SpanKind.INTERNAL) as span:
        _apply_attributes(span, attributes)
        try:
            yield span
            span.set_attribute("ok", True)
        except Exception as e:
            span.set_attribute("ok", False)
            _record_exception(span, e)
            raise


__all__ = ["get_tracer", "registry_span"]
