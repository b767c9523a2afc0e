"""Process-wide logging and OpenTelemetry setup."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from coursedocs.core.config import settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_provider: Optional[TracerProvider] = None


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)


def _build_provider() -> TracerProvider:
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": "coursedocs",
                "service.version": settings.API_VERSION,
                "deployment.environment": settings.ENVIRONMENT,
            }
        )
    )
    endpoint = settings.OTEL_EXPORTER_OTLP_ENDPOINT
    if endpoint is None:
        logger.info("Tracing enabled with no OTLP endpoint; spans stay in-process")
        return provider

    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=str(endpoint))))
    logger.info("Exporting spans to %s", endpoint)
    return provider


def setup_tracing(app: Optional[FastAPI] = None) -> None:
    """Install the tracer provider once and instrument ``app`` when tracing is enabled."""

    global _provider
    if not settings.ENABLE_TRACING:
        return

    if _provider is None:
        _provider = _build_provider()
        trace.set_tracer_provider(_provider)

    if app is not None:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=_provider)


__all__ = ["configure_logging", "setup_tracing"]
