"""Builds the span descriptor from resolved settings and the parent context."""

from __future__ import annotations

import logging
import time
from types import MappingProxyType
from typing import Optional

from opentelemetry.sdk.trace.id_generator import IdGenerator

from otel_cli.config import DEFAULT_SPAN_NAME, ResolvedConfig
from otel_cli.tracer.id_generator import new_child_context, new_root_context
from otel_cli.tracer.span import SpanDescriptor, SpanKind
from otel_cli.tracer.span_context import TraceContext

logger = logging.getLogger(__name__)

_SPAN_KINDS = {
    "internal": SpanKind.INTERNAL,
    "server": SpanKind.SERVER,
    "client": SpanKind.CLIENT,
    "producer": SpanKind.PRODUCER,
    "consumer": SpanKind.CONSUMER,
}


def resolve_span_kind(value: Optional[str]) -> SpanKind:
    """Exact, case-sensitive lookup; anything unrecognized is UNSPECIFIED."""
    return _SPAN_KINDS.get(value, SpanKind.UNSPECIFIED)


def build(
    config: ResolvedConfig,
    parent: Optional[TraceContext] = None,
    id_generator: Optional[IdGenerator] = None,
    start_time_ns: Optional[int] = None,
    end_time_ns: Optional[int] = None,
) -> SpanDescriptor:
    """
    Create the descriptor for this invocation's span.

    The span continues ``parent``'s trace when given, otherwise it starts a new
    one, sampled only if ``config.sampled`` is set. Timestamps default to now.
    Neither ``config`` nor ``parent`` is modified.
    """
    if parent is not None:
        context = new_child_context(parent, id_generator)
    else:
        context = new_root_context(id_generator, sampled=config.sampled)

    kind = resolve_span_kind(config.kind)
    if kind is SpanKind.UNSPECIFIED:
        logger.debug("unknown span kind %r, using UNSPECIFIED", config.kind)
    if config.span_name == DEFAULT_SPAN_NAME:
        logger.debug("no span name given, using placeholder %r", DEFAULT_SPAN_NAME)

    start = time.time_ns() if start_time_ns is None else start_time_ns
    end = time.time_ns() if end_time_ns is None else end_time_ns

    return SpanDescriptor(
        name=config.span_name,
        kind=kind,
        attributes=MappingProxyType(dict(config.attributes)),
        parent=parent,
        service_name=config.service_name,
        context=context,
        start_time_ns=start,
        end_time_ns=max(start, end),
    )
