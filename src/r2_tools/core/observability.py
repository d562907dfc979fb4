"""Structured logging and tracing for r2-tools.

Both are configured from Settings when this module is first imported, so any
module may call ``get_logger``/``get_tracer`` at import time.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import Settings
from .config import settings as default_settings


def setup_tracing(config: Optional[Settings] = None) -> Optional[TracerProvider]:
    """Install an OpenTelemetry tracer provider if tracing is enabled.

    Returns:
        The installed provider, or None when tracing is disabled
    """
    config = config or default_settings
    if not config.otel_enabled:
        return None

    provider = TracerProvider(
        resource=Resource.create({"service.name": config.otel_service_name})
    )
    # TODO: export to otel_exporter_endpoint over OTLP instead of the console
    provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    trace.set_tracer_provider(provider)
    return provider


def _processors(log_format: str) -> list[Any]:
    if log_format == "console":
        renderer: Any = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def setup_logging(config: Optional[Settings] = None) -> None:
    """Route structlog events through the ``r2_tools`` stdlib logger.

    Events are written to stderr; stdout belongs to CLI output.
    """
    config = config or default_settings

    package_logger = logging.getLogger("r2_tools")
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
    package_logger.setLevel(config.log_level.upper())

    structlog.configure(
        processors=_processors(config.log_format),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger; use ``__name__`` so events reach the package logger."""
    return structlog.get_logger(name)


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer; a no-op tracer unless tracing is enabled."""
    return trace.get_tracer(name)


setup_logging()
setup_tracing()
