"""Trace and span id generation for fresh contexts."""

from __future__ import annotations

import secrets
from typing import Optional

from opentelemetry.sdk.trace.id_generator import IdGenerator
from opentelemetry.trace import INVALID_SPAN_ID, INVALID_TRACE_ID, TraceFlags

from otel_cli.tracer.span_context import TraceContext


class SecureIdGenerator(IdGenerator):
    """
    IdGenerator backed by the operating system's CSPRNG.

    OpenTelemetry's RandomIdGenerator uses the ``random`` module; ids handed to
    other processes through the shell should not be predictable from earlier
    invocations, so this draws from ``secrets`` instead.
    """

    def generate_span_id(self) -> int:
        span_id = secrets.randbits(64)
        while span_id == INVALID_SPAN_ID:
            span_id = secrets.randbits(64)
        return span_id

    def generate_trace_id(self) -> int:
        trace_id = secrets.randbits(128)
        while trace_id == INVALID_TRACE_ID:
            trace_id = secrets.randbits(128)
        return trace_id


def new_root_context(
    id_generator: Optional[IdGenerator] = None,
    sampled: bool = False,
) -> TraceContext:
    """Start a new trace with fresh ids."""
    generator = id_generator or SecureIdGenerator()
    flags = TraceFlags.SAMPLED if sampled else TraceFlags.DEFAULT
    return TraceContext(
        trace_id=generator.generate_trace_id(),
        span_id=generator.generate_span_id(),
        trace_flags=flags,
    )


def new_child_context(
    parent: TraceContext,
    id_generator: Optional[IdGenerator] = None,
) -> TraceContext:
    """Context for a span inside the parent's trace, inheriting its flags."""
    generator = id_generator or SecureIdGenerator()
    return TraceContext(
        trace_id=parent.trace_id,
        span_id=generator.generate_span_id(),
        trace_flags=parent.trace_flags,
        version=parent.version,
    )
