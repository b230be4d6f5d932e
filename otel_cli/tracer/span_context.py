"""Immutable trace context."""

from __future__ import annotations

from dataclasses import dataclass

from opentelemetry.trace import INVALID_SPAN_ID, INVALID_TRACE_ID
from opentelemetry.trace import SpanContext as OTelSpanContext, TraceFlags

SUPPORTED_VERSION = 0x00

_MAX_TRACE_ID = (1 << 128) - 1
_MAX_SPAN_ID = (1 << 64) - 1


@dataclass(frozen=True)
class TraceContext:
    trace_id: int
    span_id: int
    trace_flags: int = TraceFlags.DEFAULT
    version: int = SUPPORTED_VERSION

    def __post_init__(self) -> None:
        if not INVALID_TRACE_ID < self.trace_id <= _MAX_TRACE_ID:
            raise ValueError(f"trace_id out of range: {self.trace_id!r}")
        if not INVALID_SPAN_ID < self.span_id <= _MAX_SPAN_ID:
            raise ValueError(f"span_id out of range: {self.span_id!r}")
        if not 0 <= self.trace_flags <= 0xFF:
            raise ValueError(f"trace_flags out of range: {self.trace_flags!r}")

    @property
    def trace_id_hex(self) -> str:
        return format(self.trace_id, "032x")

    @property
    def span_id_hex(self) -> str:
        return format(self.span_id, "016x")

    @property
    def sampled(self) -> bool:
        return bool(self.trace_flags & TraceFlags.SAMPLED)

    def to_otel(self, is_remote: bool = False) -> OTelSpanContext:
        """Convert to an OpenTelemetry SpanContext."""
        return OTelSpanContext(
            trace_id=self.trace_id,
            span_id=self.span_id,
            is_remote=is_remote,
            trace_flags=TraceFlags(self.trace_flags),
        )
