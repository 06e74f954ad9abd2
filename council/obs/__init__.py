"""Observability utilities."""

from .audit import AuditLogRecord, AuditMiddleware
from .metrics import (
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    VOTE_CAST_REJECTIONS_COUNTER,
    VOTES_CAST_COUNTER,
    VOTES_CLOSED_COUNTER,
    PrometheusMiddleware,
    metrics_router,
    record_vote_cast,
    record_vote_rejection,
)
from .tracing import (
    create_tracer_provider,
    initialise_tracing,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
    start_span,
)

__all__ = [
    "AuditLogRecord",
    "AuditMiddleware",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "VOTES_CAST_COUNTER",
    "VOTES_CLOSED_COUNTER",
    "VOTE_CAST_REJECTIONS_COUNTER",
    "metrics_router",
    "record_vote_cast",
    "record_vote_rejection",
    "create_tracer_provider",
    "initialise_tracing",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "start_span",
]
