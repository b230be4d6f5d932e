"""otel-cli error hierarchy and exceptions."""

from __future__ import annotations


class OtelCliError(Exception):
    """Base exception for all otel-cli errors."""

    exit_code = 1

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class ConfigError(OtelCliError):
    """Raised when a named config file is unusable or a setting is invalid."""

    exit_code = 2


class ContextFormatError(OtelCliError):
    """Raised when an inbound traceparent is malformed."""

    exit_code = 3


class EmissionError(OtelCliError):
    """Raised when the span could not be delivered to the collector."""

    exit_code = 4
