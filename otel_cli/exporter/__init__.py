"""Exporters for delivering the span to a backend."""

from otel_cli.exporter.base import NoopExporter, SpanExporter
from otel_cli.exporter.console_exporter import ConsoleExporter
from otel_cli.exporter.otlp_exporter import OTLPExporter

__all__ = ["SpanExporter", "NoopExporter", "ConsoleExporter", "OTLPExporter"]
