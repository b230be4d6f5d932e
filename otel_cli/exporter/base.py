"""Exporter interface shared by every way of delivering the span."""

from __future__ import annotations

import logging
from typing import Optional

from otel_cli.tracer.span import SpanDescriptor

logger = logging.getLogger(__name__)


class SpanExporter:
    """
    Delivers one finished span descriptor.

    Implementations raise EmissionError when delivery fails. ``timeout`` bounds
    any network wait, in seconds.
    """

    def emit(self, descriptor: SpanDescriptor, timeout: Optional[float] = None) -> None:
        raise NotImplementedError


class NoopExporter(SpanExporter):
    """Used when no collector endpoint is configured."""

    def emit(self, descriptor: SpanDescriptor, timeout: Optional[float] = None) -> None:
        logger.debug(
            "no endpoint configured, not exporting span %s (trace %s)",
            descriptor.context.span_id_hex,
            descriptor.context.trace_id_hex,
        )
