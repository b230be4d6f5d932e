"""One invocation: resolve the parent context, build the span, emit it once."""

from __future__ import annotations

import logging
from typing import Optional

from opentelemetry.sdk.trace.id_generator import IdGenerator

from otel_cli.config import ResolvedConfig
from otel_cli.context.propagators import encode, resolve_parent
from otel_cli.context.sources import ContextSource
from otel_cli.exporter import ConsoleExporter, NoopExporter, OTLPExporter, SpanExporter
from otel_cli.tracer.builder import build
from otel_cli.tracer.span import SpanDescriptor

logger = logging.getLogger(__name__)


def select_exporter(config: ResolvedConfig) -> SpanExporter:
    """Console output wins over OTLP; without an endpoint nothing is sent."""
    if config.console:
        return ConsoleExporter()
    if config.endpoint:
        return OTLPExporter(config.endpoint, timeout=config.timeout)
    return NoopExporter()


def prepare(
    config: ResolvedConfig,
    source: Optional[ContextSource] = None,
    id_generator: Optional[IdGenerator] = None,
    start_time_ns: Optional[int] = None,
) -> SpanDescriptor:
    """
    Resolve the parent context and build the descriptor, without emitting.

    Raises:
        ContextFormatError: if the inbound context is malformed in strict mode
    """
    parent = resolve_parent(
        source,
        ignore_env=config.ignore_tp_env,
        strict=config.strict_traceparent,
    )
    descriptor = build(config, parent, id_generator=id_generator, start_time_ns=start_time_ns)
    logger.debug(
        "built span %r trace_id=%s span_id=%s parent=%s",
        descriptor.name,
        descriptor.context.trace_id_hex,
        descriptor.context.span_id_hex,
        parent.span_id_hex if parent else None,
    )
    return descriptor


def run(
    config: ResolvedConfig,
    source: Optional[ContextSource] = None,
    id_generator: Optional[IdGenerator] = None,
    exporter: Optional[SpanExporter] = None,
) -> SpanDescriptor:
    """
    Build the span and hand it to the exporter exactly once.

    Raises:
        ContextFormatError: if the inbound context is malformed in strict mode
        EmissionError: if the exporter fails
    """
    descriptor = prepare(config, source, id_generator)
    (exporter or select_exporter(config)).emit(descriptor, timeout=config.timeout)
    return descriptor


def format_span_output(descriptor: SpanDescriptor) -> str:
    """Trace id, span id and traceparent, one per line."""
    context = descriptor.context
    return f"{context.trace_id_hex}\n{context.span_id_hex}\n{encode(context)}\n"
