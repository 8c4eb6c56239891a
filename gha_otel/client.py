"""Tracer provider setup for exported workflow traces."""

import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from gha_otel.constants import DEFAULT_SERVICE_NAME, SDK_VERSION, TRACER_NAME
from gha_otel.transport.span_processor import OTLPExportSpanProcessor

logger = logging.getLogger(__name__)


class ExporterClient:
    """Owns the TracerProvider used to export one workflow run.

    Spans go to an OTLP/HTTP endpoint when one is configured, otherwise they
    are printed to stdout. The provider is not installed globally.
    """

    def __init__(
        self,
        otlp_endpoint: str | None = None,
        otlp_headers: dict[str, str] | None = None,
        service_name: str = DEFAULT_SERVICE_NAME,
        span_processor: SpanProcessor | None = None,
    ):
        """Initialize the exporter client.

        Args:
            otlp_endpoint: OTLP/HTTP traces endpoint. None prints spans to stdout.
            otlp_headers: Extra headers sent to the OTLP endpoint.
            service_name: ``service.name`` resource attribute.
            span_processor: Processor to use instead of the one derived from
                the endpoint (used by tests).
        """
        if span_processor is None:
            if otlp_endpoint:
                span_processor = OTLPExportSpanProcessor(
                    endpoint=otlp_endpoint,
                    headers=otlp_headers,
                )
            else:
                span_processor = SimpleSpanProcessor(ConsoleSpanExporter())

        self._span_processor: SpanProcessor | None = span_processor
        self._provider: TracerProvider | None = TracerProvider(
            resource=Resource.create({SERVICE_NAME: service_name})
        )
        self._provider.add_span_processor(span_processor)
        if isinstance(span_processor, OTLPExportSpanProcessor):
            logger.debug(f"Exporter client initialized (OTLP endpoint {span_processor.endpoint})")
        else:
            logger.debug(f"Exporter client initialized ({type(span_processor).__name__})")

    @property
    def tracer(self) -> trace.Tracer:
        """Get a tracer bound to this client's provider."""
        if self._provider is None:
            raise RuntimeError("Exporter client is shut down")
        return self._provider.get_tracer(TRACER_NAME, SDK_VERSION)

    @property
    def span_processor(self) -> SpanProcessor | None:
        """Get the span processor spans are handed to."""
        return self._span_processor

    def flush(self) -> bool:
        """Flush all pending spans."""
        if self._provider:
            return self._provider.force_flush()
        return True

    def shutdown(self) -> None:
        """Shutdown the provider, flushing remaining spans."""
        if self._provider:
            self._provider.shutdown()
            self._provider = None

        self._span_processor = None
        logger.debug("Exporter client shutdown")
