"""OpenTelemetry tracing for the API process and the vote workflow."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span

try:  # pragma: no cover - exporter ships with the optional "otlp" extra
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
except ModuleNotFoundError:  # pragma: no cover
    OTLPSpanExporter = None  # type: ignore[assignment]

SERVICE_NAME_ATTRIBUTE = "service.name"
TRACER_NAME = "council"


def create_tracer_provider(service_name: str, endpoint: str | None) -> TracerProvider:
    """Provider exporting over OTLP when an endpoint is configured.

    Without an endpoint spans are still created, so request and vote context
    reaches the logs through the logging instrumentation, but nothing is
    exported.
    """

    provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME_ATTRIBUTE: service_name}))
    if endpoint and OTLPSpanExporter is not None:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True)))
    return provider


def initialise_tracing(
    *,
    service_name: str,
    endpoint: str | None = None,
    instrument_logging: bool = True,
) -> None:
    current_provider = trace.get_tracer_provider()
    if (
        isinstance(current_provider, TracerProvider)
        and current_provider.resource.attributes.get(SERVICE_NAME_ATTRIBUTE) == service_name
    ):
        return

    trace.set_tracer_provider(create_tracer_provider(service_name, endpoint))
    if instrument_logging:
        LoggingInstrumentor().instrument(set_logging_format=True)


def instrument_fastapi_app(app: FastAPI) -> None:
    FastAPIInstrumentor().instrument_app(app)


def instrument_sqlalchemy_engine(engine: Any) -> None:
    SQLAlchemyInstrumentor().instrument(engine=engine)


@contextmanager
def start_span(name: str, *, tracer: trace.Tracer | None = None, **attributes: Any) -> Iterator[Span]:
    """Open a span named ``council.<name>``; ``None`` attributes are left off."""

    active_tracer = tracer or trace.get_tracer(TRACER_NAME)
    with active_tracer.start_as_current_span(f"{TRACER_NAME}.{name}") as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(f"{TRACER_NAME}.{key}", value)
        yield span


__all__ = [
    "create_tracer_provider",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "start_span",
]
