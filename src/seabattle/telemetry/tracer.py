"""Span export for SeaBattle, over OTLP gRPC or to the console."""

from __future__ import annotations

from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)
from opentelemetry.trace import Tracer

if TYPE_CHECKING:  # pragma: no cover
    from .config import TelemetryConfig

_TRACER: Tracer | None = None
_TRACER_PROVIDER: TracerProvider | None = None


def get_tracer(name: str = "seabattle") -> Tracer:
    """Shared tracer; a proxy until :func:`init_tracing` installs a provider."""
    global _TRACER
    if _TRACER is None:
        _TRACER = trace.get_tracer(name)
    return _TRACER


def _span_processor(config: TelemetryConfig) -> SpanProcessor:
    # Console output is synchronous so spans show up next to the game's own prints.
    if not config.otlp_traces_endpoint:
        return SimpleSpanProcessor(ConsoleSpanExporter())
    return BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otlp_traces_endpoint, insecure=True))


def init_tracing(config: TelemetryConfig) -> Tracer:
    global _TRACER, _TRACER_PROVIDER

    if _TRACER_PROVIDER is not None:
        _TRACER_PROVIDER.shutdown()
    provider = TracerProvider(resource=Resource.create(config.resource_dict()))
    provider.add_span_processor(_span_processor(config))
    trace.set_tracer_provider(provider)

    _TRACER_PROVIDER = provider
    _TRACER = provider.get_tracer(config.service_name)
    return _TRACER


def shutdown_tracing() -> None:
    """Flush and stop the installed provider, if any."""
    global _TRACER_PROVIDER
    provider, _TRACER_PROVIDER = _TRACER_PROVIDER, None
    if provider is not None:
        provider.shutdown()
