"""W3C traceparent codec: decode and encode traceparent values and pick the
parent context for an invocation."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from opentelemetry.trace import NonRecordingSpan, set_span_in_context
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from otel_cli.context.sources import ContextSource, EnvironmentContextSource
from otel_cli.errors import ContextFormatError
from otel_cli.tracer.span_context import SUPPORTED_VERSION, TraceContext

logger = logging.getLogger(__name__)

RESERVED_VERSION = 0xFF

# (field, width in hex characters), in header order
_FIELDS = (
    ("version", 2),
    ("trace_id", 32),
    ("span_id", 16),
    ("trace_flags", 2),
)
_HEX_DIGITS = frozenset("0123456789abcdef")

_propagator = TraceContextTextMapPropagator()


def decode(raw: str) -> TraceContext:
    """
    Parse a traceparent value into a TraceContext.

    Hex is case-insensitive and surrounding whitespace is ignored. Fields after
    the fourth are vendor extensions and are discarded.

    Raises:
        ContextFormatError: if the value is not a usable traceparent
    """
    if not raw or not raw.strip():
        raise ContextFormatError("traceparent is empty")

    fields = raw.strip().lower().split("-")
    if len(fields) < len(_FIELDS):
        raise ContextFormatError(
            "traceparent must have 4 hyphen-separated fields",
            {"fields": len(fields)},
        )

    parsed: Dict[str, int] = {}
    for (name, width), field in zip(_FIELDS, fields):
        if len(field) != width:
            raise ContextFormatError(
                f"traceparent {name} must be {width} hex characters",
                {"value": field},
            )
        if not _HEX_DIGITS.issuperset(field):
            raise ContextFormatError(f"traceparent {name} is not hex", {"value": field})
        parsed[name] = int(field, 16)

    if len(fields) > len(_FIELDS):
        logger.debug("discarding %d vendor field(s) in traceparent", len(fields) - len(_FIELDS))

    version = parsed["version"]
    if version == RESERVED_VERSION:
        raise ContextFormatError("traceparent version ff is reserved")
    if version != SUPPORTED_VERSION:
        raise ContextFormatError(
            "unsupported traceparent version", {"version": format(version, "02x")}
        )
    if parsed["trace_id"] == 0:
        raise ContextFormatError("traceparent trace_id is all zeros")
    if parsed["span_id"] == 0:
        raise ContextFormatError("traceparent span_id is all zeros")

    return TraceContext(**parsed)


def encode(context: TraceContext) -> str:
    """Format a TraceContext as a lower-case, version 00 traceparent."""
    span = NonRecordingSpan(context.to_otel())
    carrier: Dict[str, str] = {}
    _propagator.inject(carrier, context=set_span_in_context(span))
    return carrier["traceparent"]


def resolve_parent(
    source: Optional[ContextSource] = None,
    ignore_env: bool = False,
    strict: bool = False,
) -> Optional[TraceContext]:
    """
    Work out the parent context for this invocation.

    Returns None when the caller asked to ignore the inbound context, when
    there is none, or when it is malformed and ``strict`` is off.

    Raises:
        ContextFormatError: if the inbound context is malformed and ``strict`` is on
    """
    if ignore_env:
        logger.debug("ignoring inbound traceparent, starting a new trace")
        return None

    source = source or EnvironmentContextSource()
    raw = source.get_traceparent()
    if not raw:
        return None

    try:
        return decode(raw)
    except ContextFormatError as exc:
        if strict:
            raise
        logger.warning("ignoring malformed traceparent %r: %s", raw, exc)
        return None
