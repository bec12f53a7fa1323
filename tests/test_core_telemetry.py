import pytest
from unittest.mock import patch
from fastapi import FastAPI

from app.core.telemetry import setup_telemetry

OTLP_ENV = {"OTEL_EXPORTER_OTLP_ENDPOINT": "http://localhost:4317"}


@pytest.fixture(name="otel")
def otel_fixture():
    """Patch every exporter, provider and instrumentor used by setup_telemetry."""
    names = [
        "Resource",
        "TracerProvider",
        "BatchSpanProcessor",
        "OTLPSpanExporter",
        "OTLPMetricExporter",
        "PeriodicExportingMetricReader",
        "MeterProvider",
        "trace",
        "metrics",
        "FastAPIInstrumentor",
        "SQLAlchemyInstrumentor",
        "Psycopg2Instrumentor",
        "logger",
    ]
    patchers = {name: patch(f"app.core.telemetry.{name}") for name in names}
    patchers["_instrumented_apps"] = patch("app.core.telemetry._instrumented_apps", set())
    mocks = {name: p.start() for name, p in patchers.items()}
    yield mocks
    for p in patchers.values():
        p.stop()


class TestSetupTelemetry:
    """Test the setup_telemetry function."""

    @patch.dict("os.environ", {}, clear=True)
    @patch("app.core.telemetry.logger")
    def test_setup_telemetry_no_endpoint(self, mock_logger):
        """Telemetry is disabled when no endpoint is configured."""
        assert setup_telemetry(FastAPI()) is False

        mock_logger.warning.assert_called_once()
        assert "No endpoint configured" in str(mock_logger.warning.call_args)

    @patch.dict("os.environ", {**OTLP_ENV, "OTEL_SERVICE_NAME": "test-service", "ENVIRONMENT": "staging"})
    def test_setup_telemetry_resource_attributes(self, otel):
        assert setup_telemetry(FastAPI()) is True

        attributes = otel["Resource"].create.call_args.args[0]
        assert attributes["service.name"] == "test-service"
        assert attributes["deployment.environment"] == "staging"
        otel["trace"].set_tracer_provider.assert_called_once()
        otel["metrics"].set_meter_provider.assert_called_once()

    @patch.dict("os.environ", OTLP_ENV, clear=True)
    def test_setup_telemetry_default_service_name(self, otel):
        setup_telemetry(FastAPI())

        attributes = otel["Resource"].create.call_args.args[0]
        assert attributes["service.name"] == "volunteer-hub-api"

    @patch.dict("os.environ", {**OTLP_ENV, "OTEL_EXPORTER_OTLP_INSECURE": "true"})
    def test_setup_telemetry_insecure_flag(self, otel):
        setup_telemetry(FastAPI())

        assert otel["OTLPSpanExporter"].call_args.kwargs["insecure"] is True
        assert otel["OTLPMetricExporter"].call_args.kwargs["insecure"] is True

    @patch.dict("os.environ", OTLP_ENV)
    def test_setup_telemetry_instrumentation(self, otel):
        setup_telemetry(FastAPI())

        kwargs = otel["FastAPIInstrumentor"].instrument_app.call_args.kwargs
        assert kwargs["excluded_urls"] == "/health"
        sqlalchemy_kwargs = otel["SQLAlchemyInstrumentor"].return_value.instrument.call_args.kwargs
        assert sqlalchemy_kwargs["enable_commenter"] is True
        psycopg2_kwargs = otel["Psycopg2Instrumentor"].return_value.instrument.call_args.kwargs
        assert psycopg2_kwargs["skip_dep_check"] is True

    @patch.dict("os.environ", OTLP_ENV)
    def test_setup_telemetry_prevents_double_instrumentation(self, otel):
        app = FastAPI()

        setup_telemetry(app)
        setup_telemetry(app)

        assert otel["FastAPIInstrumentor"].instrument_app.call_count == 1

    @patch.dict("os.environ", OTLP_ENV)
    def test_setup_telemetry_exception_handling(self, otel):
        """Setup failures are logged, not raised."""
        otel["TracerProvider"].side_effect = RuntimeError("collector unreachable")

        assert setup_telemetry(FastAPI()) is False
        otel["logger"].error.assert_called_once()
