"""Trace context propagation."""

from otel_cli.context.propagators import decode, encode, resolve_parent
from otel_cli.context.sources import (
    TRACEPARENT_ENV,
    ContextSource,
    EnvironmentContextSource,
    StaticContextSource,
)

__all__ = [
    "decode",
    "encode",
    "resolve_parent",
    "TRACEPARENT_ENV",
    "ContextSource",
    "EnvironmentContextSource",
    "StaticContextSource",
]
