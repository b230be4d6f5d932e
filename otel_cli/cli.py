"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from typing import Mapping, Optional, Sequence, TextIO

from otel_cli.config import DEFAULT_CONFIG_FILENAME, load_config_with_priority, parse_attributes
from otel_cli.context.sources import EnvironmentContextSource
from otel_cli.errors import ConfigError, EmissionError, OtelCliError
from otel_cli.pipeline import format_span_output, prepare, select_exporter
from otel_cli.version import __version__

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(name)s %(levelname)s: %(message)s"


class AttributesAction(argparse.Action):
    """Accumulates ``--attrs k=v,k=v`` across repeated flags; later keys win."""

    def __call__(self, parser, namespace, values, option_string=None):
        try:
            parsed = parse_attributes(values)
        except ConfigError as exc:
            raise argparse.ArgumentError(self, str(exc)) from exc
        merged = dict(getattr(namespace, self.dest) or {})
        merged.update(parsed)
        setattr(namespace, self.dest, merged)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="otel-cli",
        description="Create and send an OpenTelemetry span from the command line.",
    )
    # every option defaults to None so unset flags fall through to env/file/defaults
    parser.add_argument(
        "-c", "--config", dest="config_file",
        help=f"config file (default is $HOME/{DEFAULT_CONFIG_FILENAME})",
    )
    parser.add_argument(
        "-n", "--service-name", dest="service_name",
        help="service name sent on the span (default otel-cli)",
    )
    parser.add_argument("-s", "--span-name", dest="span_name", help="name of the span")
    parser.add_argument(
        "-k", "--kind", dest="kind",
        help="span kind: internal, server, client, producer, consumer (default client)",
    )
    parser.add_argument(
        "-a", "--attrs", dest="attributes", action=AttributesAction, metavar="KEY=VALUE,...",
        help="comma-separated key=value attributes, may be repeated",
    )
    parser.add_argument(
        "--ignore-tp-env", dest="ignore_tp_env", action=argparse.BooleanOptionalAction,
        help="ignore the TRACEPARENT envvar even if it's set",
    )
    parser.add_argument(
        "-p", "--print-span", dest="print_span", action=argparse.BooleanOptionalAction,
        help="print the trace id, span id and traceparent of the new span",
    )
    parser.add_argument(
        "--strict-tp", dest="strict_traceparent", action=argparse.BooleanOptionalAction,
        help="fail instead of starting a new trace when TRACEPARENT is malformed",
    )
    parser.add_argument(
        "--sampled", dest="sampled", action=argparse.BooleanOptionalAction,
        help="mark a newly started trace as sampled",
    )
    parser.add_argument("--endpoint", dest="endpoint", help="OTLP/HTTP collector endpoint")
    parser.add_argument(
        "--timeout", dest="timeout", type=float,
        help="export timeout in seconds (default 10)",
    )
    parser.add_argument(
        "--console", dest="console", action=argparse.BooleanOptionalAction,
        help="write the span to stderr instead of sending it",
    )
    parser.add_argument(
        "-v", "--verbose", dest="verbose", action=argparse.BooleanOptionalAction,
        help="debug logging on stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool, stream: TextIO) -> None:
    package_logger = logging.getLogger("otel_cli")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _fail(error: OtelCliError, stderr: TextIO) -> int:
    print(f"otel-cli: {error}", file=stderr)
    return error.exit_code


def main(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> int:
    start_time_ns = time.time_ns()
    environ = os.environ if environ is None else environ
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    args = build_parser().parse_args(argv)
    configure_logging(bool(args.verbose), stderr)

    try:
        config = load_config_with_priority(vars(args), environ)
        configure_logging(config.verbose, stderr)
        if config.config_file:
            logger.info("Using config file: %s", config.config_file)
        descriptor = prepare(
            config, EnvironmentContextSource(environ), start_time_ns=start_time_ns
        )
    except OtelCliError as exc:
        return _fail(exc, stderr)

    emission_error = None
    try:
        select_exporter(config).emit(descriptor, timeout=config.timeout)
    except EmissionError as exc:
        emission_error = exc

    # the ids are final even if the collector was unreachable
    if config.print_span:
        stdout.write(format_span_output(descriptor))
        stdout.flush()

    if emission_error is not None:
        return _fail(emission_error, stderr)
    return 0
