"""otel-cli: emit one OpenTelemetry span from a shell invocation."""

from otel_cli.config import ResolvedConfig, load_config_with_priority, resolve
from otel_cli.context import decode, encode, resolve_parent
from otel_cli.errors import ConfigError, ContextFormatError, EmissionError, OtelCliError
from otel_cli.pipeline import format_span_output, prepare, run
from otel_cli.tracer import SpanDescriptor, SpanKind, TraceContext, build
from otel_cli.version import __version__

__all__ = [
    "__version__",
    "ResolvedConfig",
    "resolve",
    "load_config_with_priority",
    "decode",
    "encode",
    "resolve_parent",
    "SpanDescriptor",
    "SpanKind",
    "TraceContext",
    "build",
    "prepare",
    "run",
    "format_span_output",
    "OtelCliError",
    "ConfigError",
    "ContextFormatError",
    "EmissionError",
]
