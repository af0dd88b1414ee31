"""
OpenTelemetry configuration for distributed tracing.

This module configures OpenTelemetry with:
- FastAPI automatic instrumentation
- Logging instrumentation (trace context on stdlib log records)
- Console exporter in development, OTLP exporter elsewhere
"""

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from oauth2_registry.config import Settings
from oauth2_registry.core.logging import logger

DEVELOPMENT_ENVIRONMENTS = {"development", "dev", "local"}


def configure_opentelemetry(settings: Settings) -> TracerProvider:
    """
    Configures the global tracer provider.

    Args:
        settings: Application settings (service name, version, environment,
            collector endpoint)

    Returns:
        The registered tracer provider
    """
    resource = Resource.create(
        attributes={
            "service.name": settings.otel_service_name,
            "service.version": settings.project_version,
            "deployment.environment": settings.environment,
        }
    )

    tracer_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(tracer_provider)

    if settings.environment in DEVELOPMENT_ENVIRONMENTS:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.info("Console span exporter configured (development mode)")
    else:
        otlp_exporter = OTLPSpanExporter(
            endpoint=settings.otel_exporter_otlp_endpoint,
            insecure=True,
        )
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        logger.info(
            f"OTLP span exporter configured: endpoint={settings.otel_exporter_otlp_endpoint}"
        )

    logger.info(
        f"OpenTelemetry configured: service={settings.otel_service_name}, "
        f"version={settings.project_version}, environment={settings.environment}"
    )
    return tracer_provider


def instrument_fastapi(app: FastAPI) -> None:
    """
    Instruments a FastAPI application with OpenTelemetry.

    Args:
        app: FastAPI application instance
    """
    FastAPIInstrumentor.instrument_app(
        app,
        tracer_provider=trace.get_tracer_provider(),
        excluded_urls="/health",
    )
    logger.info("FastAPI instrumented with OpenTelemetry")


def instrument_logging() -> None:
    """
    Adds trace context (trace_id, span_id) to standard logging records.

    Call this once at application startup, before intercepting logging.
    """
    LoggingInstrumentor().instrument(set_logging_format=False)
    logger.info("Logging instrumented with OpenTelemetry")


__all__ = [
    "configure_opentelemetry",
    "instrument_fastapi",
    "instrument_logging",
]
