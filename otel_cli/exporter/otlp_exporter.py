"""OTLP exporter using OpenTelemetry OTLP HTTP exporter."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter as OTelOTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExportResult
from opentelemetry.sdk.util.instrumentation import InstrumentationScope
from opentelemetry.trace import Status, StatusCode

from otel_cli.errors import EmissionError
from otel_cli.exporter.base import SpanExporter
from otel_cli.tracer.span import SpanDescriptor
from otel_cli.version import __version__

TRACES_PATH = "/v1/traces"


def traces_url(endpoint: str) -> str:
    """Append the OTLP traces path when the endpoint is a bare collector address."""
    parts = urlsplit(endpoint)
    if parts.path in ("", "/"):
        parts = parts._replace(path=TRACES_PATH)
    return urlunsplit(parts)


def to_readable_span(descriptor: SpanDescriptor) -> ReadableSpan:
    """Convert a descriptor to the SDK's finished-span type."""
    parent = descriptor.parent.to_otel(is_remote=True) if descriptor.parent else None
    return ReadableSpan(
        name=descriptor.name,
        context=descriptor.context.to_otel(),
        parent=parent,
        resource=Resource.create({SERVICE_NAME: descriptor.service_name}),
        attributes=dict(descriptor.attributes),
        kind=descriptor.kind.to_otel(),
        status=Status(status_code=StatusCode.UNSET),
        start_time=descriptor.start_time_ns,
        end_time=descriptor.end_time_ns,
        instrumentation_scope=InstrumentationScope("otel-cli", __version__),
    )


class OTLPExporter(SpanExporter):
    """
    Sends the span to an OTLP/HTTP collector.

    A fresh OpenTelemetry exporter is created per emission and shut down
    afterwards; the process only ever sends one span.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 10.0,
        headers: Optional[dict] = None,
    ) -> None:
        """
        Initialize OTLP exporter.

        Args:
            endpoint: collector address or full traces URL
            timeout: default request timeout in seconds
            headers: optional additional headers
        """
        self.endpoint = traces_url(endpoint)
        self.timeout = timeout
        self.headers = dict(headers) if headers else None

    def emit(self, descriptor: SpanDescriptor, timeout: Optional[float] = None) -> None:
        otel_exporter = OTelOTLPSpanExporter(
            endpoint=self.endpoint,
            timeout=timeout or self.timeout,
            headers=self.headers,
        )
        try:
            result = otel_exporter.export([to_readable_span(descriptor)])
        except Exception as exc:
            raise EmissionError(
                "failed to export span", {"endpoint": self.endpoint, "error": exc}
            ) from exc
        finally:
            otel_exporter.shutdown()

        if result != SpanExportResult.SUCCESS:
            raise EmissionError("collector did not accept span", {"endpoint": self.endpoint})
