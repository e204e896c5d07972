"""
Telemetry infrastructure setup.

Traversal, extraction and session calls are wrapped in OpenTelemetry spans;
this module decides where those spans are exported.
"""

import logging
import os

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_SERVICE_NAME = "ville-ratings-crawler"
DEFAULT_OTLP_ENDPOINT = "http://localhost:4318"


def traces_enabled() -> bool:
    """Whether OTEL_TRACES_ENABLED allows exporting spans (default: true)."""
    return os.getenv("OTEL_TRACES_ENABLED", "true").lower() in ("true", "1", "yes")


def setup_opentelemetry() -> None:
    """
    Install an OTLP/HTTP span exporter for the crawler.

    Configuration is controlled by environment variables:
    - OTEL_TRACES_ENABLED: Enable/disable tracing (default: true)
    - OTEL_SERVICE_NAME: Service name (default: ville-ratings-crawler)
    - OTEL_EXPORTER_OTLP_ENDPOINT: OTLP endpoint (default: http://localhost:4318)

    When tracing is disabled or the exporter cannot be created, spans stay
    no-ops and the crawl runs unchanged.
    """
    if not traces_enabled():
        logger.info("OpenTelemetry tracing is disabled")
        return

    service_name = os.getenv("OTEL_SERVICE_NAME", DEFAULT_SERVICE_NAME)
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT)

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    try:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces"))
        )
    except Exception as e:
        logger.warning("Failed to initialize OpenTelemetry exporter: %s", str(e))
        return

    trace.set_tracer_provider(provider)
    # Correlate log records with the active span
    LoggingInstrumentor().instrument(set_logging_format=False)
    logger.info("OpenTelemetry initialized: service=%s, endpoint=%s", service_name, endpoint)


def get_tracer():  # type: ignore
    """Get the tracer used by application services and adapters."""
    return trace.get_tracer("ville_ratings")
