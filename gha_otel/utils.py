"""Shared utilities for the GitHub Actions trace exporter."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from opentelemetry import trace


def set_span_attribute(span: trace.Span, key: str, value: Any) -> None:
    """Set a span attribute, converting unsupported types to strings.

    Does nothing if value is None or span is not recording.
    """
    if value is None:
        return
    if not span.is_recording():
        return

    if isinstance(value, (str, int, float, bool)):
        span.set_attribute(key, value)
    else:
        span.set_attribute(key, str(value))


def set_span_parameters(span: trace.Span, parameters: Mapping[str, str]) -> None:
    """Set span parameters as attributes, using the parameter keys verbatim."""
    for key, value in parameters.items():
        set_span_attribute(span, key, value)


def to_unix_nanos(value: datetime | None) -> int | None:
    """Convert a timestamp to nanoseconds since the epoch."""
    if value is None:
        return None
    return int(value.timestamp() * 1_000_000_000)
