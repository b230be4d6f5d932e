"""Shared fixtures: deterministic ids and an exporter that records emissions."""

import itertools
import logging

import pytest
from opentelemetry.sdk.trace.id_generator import IdGenerator

from otel_cli.exporter import SpanExporter


class SequenceIdGenerator(IdGenerator):
    """Same trace id every time, span ids counting up from a fixed start."""

    def __init__(self, trace_id=0x0AF7651916CD43DD8448EB211C80319C, first_span_id=0xB7AD6B7169203331):
        self.trace_id = trace_id
        self.first_span_id = first_span_id
        self._span_ids = itertools.count(first_span_id)

    def generate_trace_id(self) -> int:
        return self.trace_id

    def generate_span_id(self) -> int:
        return next(self._span_ids)


class RecordingExporter(SpanExporter):
    def __init__(self):
        self.emitted = []
        self.timeouts = []

    def emit(self, descriptor, timeout=None):
        self.emitted.append(descriptor)
        self.timeouts.append(timeout)


@pytest.fixture
def id_generator():
    return SequenceIdGenerator()


@pytest.fixture
def recording_exporter():
    return RecordingExporter()


@pytest.fixture
def home(tmp_path, monkeypatch):
    """An empty home directory, so a real ~/.otel-cli.toml never leaks in."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture(autouse=True)
def reset_package_logger():
    """The CLI attaches a handler to its own stream; drop it after each test."""
    yield
    package_logger = logging.getLogger("otel_cli")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
