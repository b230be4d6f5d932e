"""Console exporter for developer visibility."""

from __future__ import annotations

import sys
from typing import Optional

from otel_cli.exporter.base import SpanExporter
from otel_cli.tracer.span import SpanDescriptor


class ConsoleExporter(SpanExporter):
    """Prints a one-line span summary to stderr (or the provided stream).

    stdout is left alone so ``--print-span`` output stays machine readable.
    """

    def __init__(self, stream=None) -> None:
        self.stream = stream

    def emit(self, descriptor: SpanDescriptor, timeout: Optional[float] = None) -> None:
        parent = descriptor.parent.span_id_hex if descriptor.parent else "-"
        line = (
            f"[span] name={descriptor.name} service={descriptor.service_name} "
            f"kind={descriptor.kind.name} trace_id={descriptor.context.trace_id_hex} "
            f"span_id={descriptor.context.span_id_hex} parent_span_id={parent} "
            f"duration_ns={descriptor.duration_ns}"
        )
        if descriptor.attributes:
            line += f" attrs={dict(descriptor.attributes)}"
        print(line, file=self.stream or sys.stderr)
