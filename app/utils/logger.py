import logging
import sys
import os
from types import FrameType
from loguru import logger
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry._logs import set_logger_provider

# Third-party loggers whose records are rerouted to loguru
INTERCEPTED_LOGGERS = (
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
    "gunicorn.error",
    "gunicorn.access",
    "fastapi",
    "sqlalchemy.engine",
)

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> <level>{level}</level>: "
    "<cyan>[{name}:{line}]</cyan> - <level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """
    Redirects standard logging records to Loguru.

    Records emitted by OpenTelemetry itself are dropped, otherwise the OTel
    log sink would feed its own output back into the pipeline.
    """

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.startswith("opentelemetry"):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so loguru reports the real caller
        frame: FrameType | None = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _add_otel_sink(level: str) -> None:
    """
    Ship log records to the OTLP collector named by OTEL_EXPORTER_OTLP_ENDPOINT.

    Does nothing when the endpoint is not configured. Setup failures are printed
    to stderr and never raised, logging must not prevent the app from booting.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        return
    try:
        resource = Resource.create(
            {
                "service.name": os.getenv("OTEL_SERVICE_NAME", "volunteer-hub-api"),
                "deployment.environment": os.getenv("ENVIRONMENT", "production"),
            }
        )
        logger_provider = LoggerProvider(resource=resource)
        set_logger_provider(logger_provider)

        insecure = os.getenv("OTEL_EXPORTER_OTLP_INSECURE", "false").lower() == "true"
        exporter = OTLPLogExporter(endpoint=endpoint, insecure=insecure)
        logger_provider.add_log_record_processor(BatchLogRecordProcessor(exporter))

        otel_handler = LoggingHandler(
            level=logging.getLevelName(level), logger_provider=logger_provider
        )
        logger.add(otel_handler, level=level, serialize=True)
        logger.info("Logging (Loguru Sink) Active.")
    except Exception as e:
        print(f"Log Setup Failed: {e}", file=sys.stderr)


def setup_logging(level: str = "INFO"):
    """
    Route every log record of the process through a single Loguru pipeline.

    Replaces the root handler and the handlers of uvicorn, gunicorn, fastapi and
    SQLAlchemy with an InterceptHandler, installs a colored stderr sink at
    `level`, and adds the OpenTelemetry sink when an OTLP endpoint is set.

    Parameters:
        level (str): Minimum level name for the sinks, e.g. "INFO" or "DEBUG".

    Returns:
        The configured loguru logger.
    """
    level = level.upper()
    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(level)

    for name in INTERCEPTED_LOGGERS:
        log = logging.getLogger(name)
        log.handlers = []
        log.propagate = False
        log.addHandler(InterceptHandler())

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
        enqueue=True,
    )

    _add_otel_sink(level)

    return logger
