"""Span descriptor: the finished, immutable description of the span to emit."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from opentelemetry.trace import SpanKind as OTelSpanKind

from otel_cli.tracer.span_context import TraceContext


class SpanKind(Enum):
    # values follow the OTLP wire enum
    UNSPECIFIED = 0
    INTERNAL = 1
    SERVER = 2
    CLIENT = 3
    PRODUCER = 4
    CONSUMER = 5

    def to_otel(self) -> OTelSpanKind:
        """
        Map to the OpenTelemetry API kind.

        The API has no unspecified member; UNSPECIFIED becomes INTERNAL, which
        is also what the SDK assumes when no kind is given.
        """
        if self is SpanKind.UNSPECIFIED:
            return OTelSpanKind.INTERNAL
        return OTelSpanKind[self.name]


@dataclass(frozen=True)
class SpanDescriptor:
    """
    Everything the emission step needs to know about the span.

    Attributes:
        name: span name
        kind: semantic role of the span
        attributes: read-only string attributes
        parent: inbound context this span continues, None for a root span
        service_name: value of the ``service.name`` resource attribute
        context: the span's own ids; shares the parent's trace id when there is one
        start_time_ns: start timestamp, nanoseconds since the epoch
        end_time_ns: end timestamp, nanoseconds since the epoch
    """

    name: str
    kind: SpanKind
    attributes: Mapping[str, str]
    parent: Optional[TraceContext]
    service_name: str
    context: TraceContext
    start_time_ns: int
    end_time_ns: int

    @property
    def duration_ns(self) -> int:
        return self.end_time_ns - self.start_time_ns
