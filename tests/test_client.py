"""Tests for the exporter client's span processor selection."""

from opentelemetry.exporter.otlp.proto.http.trace_exporter import Compression
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from gha_otel.client import ExporterClient
from gha_otel.constants import SDK_VERSION
from gha_otel.transport.span_processor import OTLPExportSpanProcessor

ENDPOINT = "https://collector:4318/v1/traces"


def test_otlp_endpoint_uses_batch_processor():
    client = ExporterClient(otlp_endpoint=ENDPOINT, otlp_headers={"authorization": "Bearer x"})
    try:
        processor = client.span_processor
        assert isinstance(processor, OTLPExportSpanProcessor)
        assert processor.endpoint == ENDPOINT

        exporter = processor.otlp_exporter
        assert exporter._endpoint == ENDPOINT
        assert exporter._compression == Compression.Gzip
        assert exporter._headers == {
            "x-gha-otel-export-version": SDK_VERSION,
            "authorization": "Bearer x",
        }
    finally:
        client.shutdown()

    assert client.span_processor is None


def test_otlp_version_header_without_extra_headers():
    client = ExporterClient(otlp_endpoint=ENDPOINT)
    try:
        assert client.span_processor.otlp_exporter._headers == {
            "x-gha-otel-export-version": SDK_VERSION,
        }
    finally:
        client.shutdown()


def test_console_fallback_without_endpoint():
    client = ExporterClient()
    try:
        processor = client.span_processor
        assert isinstance(processor, SimpleSpanProcessor)
        assert isinstance(processor.span_exporter, ConsoleSpanExporter)
        assert client.flush() is True
    finally:
        client.shutdown()
