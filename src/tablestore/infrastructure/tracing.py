"""OpenTelemetry tracing for state manager operations.

Spans are named after the operation (``state_manager.insert_row``,
``snapshot.save``) and carry attributes under the ``tablestore.``
namespace. Until setup_tracing() installs a provider, spans are no-ops.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from tablestore.infrastructure.config import ObservabilityConfig

TRACER_NAME = "tablestore"
ATTRIBUTE_PREFIX = "tablestore."

_tracer: trace.Tracer | None = None


def setup_tracing(
    config: ObservabilityConfig | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider for the table store.

    Spans are exported over OTLP/gRPC when ``config.otel_endpoint`` is
    set, and to stdout when ``console_export`` is true.

    Returns:
        The table store tracer
    """
    global _tracer

    from tablestore import __version__

    config = config or ObservabilityConfig()
    provider = TracerProvider(
        resource=Resource.create(
            {"service.name": config.otel_service_name, "service.version": __version__}
        )
    )

    if config.otel_endpoint:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        exporter = OTLPSpanExporter(endpoint=config.otel_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))

    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(TRACER_NAME, __version__)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the table store tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def trace_span(name: str, **attributes: Any) -> Iterator[trace.Span]:
    """Run the block inside a span named ``name``.

    Keyword attributes are recorded as ``tablestore.<key>``; None values
    are dropped. Exceptions leaving the block mark the span as failed.
    """
    recorded = {
        ATTRIBUTE_PREFIX + key: value for key, value in attributes.items() if value is not None
    }
    with get_tracer().start_as_current_span(name, attributes=recorded) as span:
        yield span
