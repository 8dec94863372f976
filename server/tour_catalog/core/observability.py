"""Observability setup for OpenTelemetry, Prometheus metrics, and structured logging."""

import logging

import structlog
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from sqlalchemy.ext.asyncio import AsyncEngine

from .config import settings

# Prometheus metrics
REGISTRY = CollectorRegistry()

# Request metrics
REQUEST_COUNT = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status_code'],
    registry=REGISTRY
)

REQUEST_DURATION = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=REGISTRY
)

# Discovery metrics
DISCOVERY_QUERIES = Counter(
    'tour_discovery_queries_total',
    'Total tour discovery queries answered',
    ['operation'],
    registry=REGISTRY
)

DISCOVERY_RESULTS = Histogram(
    'tour_discovery_results',
    'Number of items returned per discovery query',
    ['operation'],
    buckets=(0, 1, 2, 4, 8, 16, 32, 50),
    registry=REGISTRY
)


def _add_trace_context(logger, method_name, event_dict):
    """Add trace context to log events."""
    span = trace.get_current_span()
    if span and span.is_recording():
        ctx = span.get_span_context()
        event_dict['trace_id'] = format(ctx.trace_id, '032x')
        event_dict['span_id'] = format(ctx.span_id, '016x')
    return event_dict


def _shared_processors() -> list:
    return [
        # request_id is bound per request by RequestIDMiddleware
        structlog.contextvars.merge_contextvars,
        _add_trace_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
    ]


def _default_renderer():
    return structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer()


def build_log_formatter(renderer=None) -> structlog.stdlib.ProcessorFormatter:
    """
    Formatter that renders stdlib ``logging`` records through structlog.

    Records pick up the bound contextvars (``request_id``), the trace
    context and their ``extra={...}`` fields.
    """
    renderer = renderer or _default_renderer()
    final = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if not isinstance(renderer, structlog.dev.ConsoleRenderer):
        final.append(structlog.processors.format_exc_info)
    final.append(renderer)

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_shared_processors() + [
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
        ],
        processors=final,
    )


def setup_structured_logging() -> logging.Handler:
    """
    Configure structured logging with structlog.

    Returns the handler to install on the root logger so stdlib log calls
    share the structlog pipeline.
    """
    structlog.configure(
        processors=_shared_processors() + [
            structlog.processors.StackInfoRenderer(),
            _default_renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(build_log_formatter())
    return handler


def _resource() -> Resource:
    return Resource.create({
        "service.name": settings.service_name,
        "service.version": "1.0.0",
        "environment": settings.environment,
    })


def setup_tracing():
    """Setup OpenTelemetry tracing; spans are exported only when an OTLP endpoint is set."""
    provider = TracerProvider(resource=_resource())
    if settings.otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint)))
    trace.set_tracer_provider(provider)
    return trace.get_tracer(__name__)


def setup_metrics():
    """Setup OpenTelemetry metrics export (if configured)."""
    if settings.otlp_endpoint:
        reader = PeriodicExportingMetricReader(
            exporter=OTLPMetricExporter(endpoint=settings.otlp_endpoint),
            export_interval_millis=60000,
        )
        metrics.set_meter_provider(MeterProvider(resource=_resource(), metric_readers=[reader]))
    return metrics.get_meter(__name__)


def instrument_fastapi(app):
    """Instrument FastAPI with OpenTelemetry."""
    FastAPIInstrumentor.instrument_app(app, excluded_urls="health,ready,metrics")


def instrument_sqlalchemy(engine: AsyncEngine):
    """Instrument the async engine's underlying sync engine with OpenTelemetry."""
    SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)


class MetricsCollector:
    """Collector for request and discovery metrics."""

    @staticmethod
    def record_request(method: str, endpoint: str, status_code: int, duration_seconds: float):
        """Record a completed HTTP request."""
        REQUEST_COUNT.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
        REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration_seconds)

    @staticmethod
    def record_discovery_query(operation: str, result_count: int):
        """Record a discovery query and the number of items it returned."""
        DISCOVERY_QUERIES.labels(operation=operation).inc()
        DISCOVERY_RESULTS.labels(operation=operation).observe(result_count)


def get_prometheus_metrics():
    """Get Prometheus metrics for the /metrics endpoint."""
    return generate_latest(REGISTRY)


# Global metrics collector instance
metrics_collector = MetricsCollector()
