"""Span descriptor types and construction."""

from otel_cli.tracer.builder import build, resolve_span_kind
from otel_cli.tracer.id_generator import SecureIdGenerator, new_child_context, new_root_context
from otel_cli.tracer.span import SpanDescriptor, SpanKind
from otel_cli.tracer.span_context import TraceContext

__all__ = [
    "build",
    "resolve_span_kind",
    "SecureIdGenerator",
    "new_root_context",
    "new_child_context",
    "SpanDescriptor",
    "SpanKind",
    "TraceContext",
]
