import os
import logging
from opentelemetry import trace
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

logger = logging.getLogger(__name__)

TRACER_NAME = "webhook_invoker"

def setup_telemetry():
    """
    Sets up OpenTelemetry tracing and instrumentation.

    Tracing is opt-in: set ENABLE_OPENTELEMETRY=true. The exporter endpoint is
    read by the OTLP exporter from the standard OTEL_EXPORTER_OTLP_* variables.

    Returns:
        tuple: A tuple containing the configured TracerProvider and Tracer.
               Returns (None, None) if OpenTelemetry is disabled.
    """
    if os.environ.get('ENABLE_OPENTELEMETRY', 'false').lower() != 'true':
        logger.debug("OpenTelemetry is disabled.")
        return None, None

    logger.info("Setting up OpenTelemetry...")

    resource = Resource.create({SERVICE_NAME: os.environ.get("OTEL_SERVICE_NAME", "webhook-invoker")})
    provider = TracerProvider(resource=resource)
    processor = BatchSpanProcessor(OTLPSpanExporter())
    provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)

    LoggingInstrumentor().instrument(set_logging_format=True)
    RequestsInstrumentor().instrument(tracer_provider=provider)

    tracer = trace.get_tracer(TRACER_NAME)
    logger.info("OpenTelemetry setup complete.")

    return provider, tracer
