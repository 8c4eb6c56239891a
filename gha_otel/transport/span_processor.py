"""Span processor exporting workflow traces over OTLP/HTTP.

This module defines the OTLPExportSpanProcessor class, which extends OpenTelemetry's
BatchSpanProcessor with the exporter's endpoint and header configuration.
"""

from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
    Compression,
    OTLPSpanExporter,
)
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from gha_otel.constants import DEFAULT_FLUSH_AT, DEFAULT_FLUSH_INTERVAL, SDK_VERSION


class OTLPExportSpanProcessor(BatchSpanProcessor):
    """OpenTelemetry span processor that sends spans to an OTLP/HTTP collector.

    Spans of one workflow run are produced in a burst and flushed explicitly
    at the end of the export, so the batch defaults are generous.
    """

    def __init__(
        self,
        *,
        endpoint: str,
        headers: dict[str, str] | None = None,
        flush_at: int = DEFAULT_FLUSH_AT,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
    ):
        """Initialize the span processor.

        Args:
            endpoint: OTLP/HTTP traces endpoint, e.g. ``https://collector:4318/v1/traces``.
            headers: Extra request headers (authentication, tenant, ...).
            flush_at: Max batch size before flush.
            flush_interval: Seconds between automatic flushes.
        """
        exporter = OTLPSpanExporter(
            endpoint=endpoint,
            headers={
                "x-gha-otel-export-version": SDK_VERSION,
                **(headers or {}),
            },
            compression=Compression.Gzip,
        )

        super().__init__(
            span_exporter=exporter,
            max_export_batch_size=flush_at,
            schedule_delay_millis=int(flush_interval * 1000),
        )

        self._endpoint = endpoint
        self._otlp_exporter = exporter

    @property
    def endpoint(self) -> str:
        """Get the configured OTLP endpoint."""
        return self._endpoint

    @property
    def otlp_exporter(self) -> OTLPSpanExporter:
        """Get the OTLP exporter batches are sent with."""
        return self._otlp_exporter
