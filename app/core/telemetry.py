import os
from fastapi import FastAPI
from opentelemetry import trace, metrics
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
from loguru import logger

_instrumented_apps: set[int] = set()


def _instrument(app: FastAPI) -> None:
    """Instrument the app and the database drivers, at most once per app."""
    if id(app) in _instrumented_apps:
        return
    FastAPIInstrumentor.instrument_app(app, excluded_urls="/health")
    SQLAlchemyInstrumentor().instrument(enable_commenter=True)  # type: ignore
    Psycopg2Instrumentor().instrument(  # type: ignore
        enable_commenter=True, skip_dep_check=True
    )
    _instrumented_apps.add(id(app))


def setup_telemetry(app: FastAPI) -> bool:
    """
    Initialize OpenTelemetry tracing and metrics when an OTLP endpoint is configured.

    Reads OTEL_EXPORTER_OTLP_ENDPOINT, OTEL_SERVICE_NAME, ENVIRONMENT and
    OTEL_EXPORTER_OTLP_INSECURE. Without an endpoint telemetry stays disabled.
    Setup failures are logged, never raised.

    Parameters:
        app (FastAPI): Application to instrument (the /health probe is excluded).

    Returns:
        bool: True when providers were installed.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        logger.warning("No endpoint configured. Telemetry disabled.")
        return False
    try:
        resource = Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "volunteer-hub-api"),
                "deployment.environment": os.getenv("ENVIRONMENT", "unset"),
            }
        )
        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"

        tracer_provider = TracerProvider(resource=resource)
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=insecure))
        )
        trace.set_tracer_provider(tracer_provider)

        metric_reader = PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=endpoint, insecure=insecure)
        )
        metrics.set_meter_provider(
            MeterProvider(resource=resource, metric_readers=[metric_reader])
        )

        _instrument(app)
        logger.info("Traces & Metrics Active.")
        return True
    except Exception as e:
        logger.error(f"Traces & Metrics Setup Failed: {e}")
        return False
