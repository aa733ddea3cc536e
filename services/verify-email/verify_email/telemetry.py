"""
Tracing for the function: OTLP export plus httpx client spans, so each
profile update shows up under the request that issued it. Opt-in through
OTEL_ENABLED; the backend credentials are not needed here.
"""
import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class TelemetrySettings(BaseSettings):
    otel_enabled: bool = False
    otel_exporter_otlp_endpoint: str = "http://jaeger:4317"
    service_name: str = "verify-email"
    environment: str = "development"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def setup_tracing(settings: TelemetrySettings) -> bool:
    """Configure the global TracerProvider; returns False when tracing is off."""
    if not settings.otel_enabled:
        logger.info("OTel tracing disabled")
        return False

    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "deployment.environment": settings.environment,
        }
    )
    provider = TracerProvider(resource=resource)

    try:
        otlp_exporter = OTLPSpanExporter(
            endpoint=settings.otel_exporter_otlp_endpoint,
            insecure=True,
        )
        provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        logger.info(
            "OTel tracing configured → %s", settings.otel_exporter_otlp_endpoint
        )
    except Exception as exc:
        logger.warning("Could not connect to OTLP exporter: %s — traces disabled", exc)

    trace.set_tracer_provider(provider)
    HTTPXClientInstrumentor().instrument()
    return True


def instrument_app(app, settings: TelemetrySettings) -> None:  # noqa: ANN001
    if settings.otel_enabled:
        FastAPIInstrumentor.instrument_app(app)
