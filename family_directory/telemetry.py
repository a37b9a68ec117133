"""Telemetry setup for Arize Phoenix tracing.

This module provides OpenTelemetry instrumentation for the family directory
server, sending traces of tool calls and store round-trips to Arize Phoenix.

Environment Variables:
    PHOENIX_ENABLED: Set to 'true' to enable tracing (default: false)
    PHOENIX_ENDPOINT: Phoenix collector URL (default: http://localhost:6006)
    PHOENIX_PROJECT_NAME: Project name in Phoenix UI (default: family-directory)
"""

import os
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

# OpenInference semantic conventions for Phoenix
OPENINFERENCE_SPAN_KIND = "openinference.span.kind"

# Store operations that only read
_READ_OPERATIONS = ("store.list_all", "store.get", "store.query_where")


def is_tracing_enabled() -> bool:
    """Check if tracing is enabled via environment variable."""
    return os.getenv("PHOENIX_ENABLED", "false").lower() == "true"


def get_phoenix_endpoint() -> str:
    """Get the Phoenix collector endpoint."""
    return os.getenv("PHOENIX_ENDPOINT", "http://localhost:6006")


def get_project_name() -> str:
    """Get the project name for Phoenix."""
    return os.getenv("PHOENIX_PROJECT_NAME", "family-directory")


def span_kind_for(span_name: str) -> str:
    """Map a directory span name to an OpenInference span kind.

    Mappings:
        - 'tool.*' spans -> TOOL
        - store reads (list_all, get, query_where) -> RETRIEVER
        - everything else -> CHAIN
    """
    name = span_name.lower()
    if name.startswith("tool."):
        return "TOOL"
    if name.startswith(_READ_OPERATIONS):
        return "RETRIEVER"
    return "CHAIN"


class SpanKindProcessor(SpanProcessor):
    """Span processor that tags directory spans with an OpenInference kind."""

    def on_start(self, span: Any, parent_context: Any = None) -> None:
        """Called when a span starts. Sets OpenInference span kind."""
        if not hasattr(span, "name") or not hasattr(span, "set_attribute"):
            return
        span.set_attribute(OPENINFERENCE_SPAN_KIND, span_kind_for(span.name))

    def on_end(self, span: ReadableSpan) -> None:
        pass

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True


_tracer_provider: TracerProvider | None = None


def initialize_tracing() -> TracerProvider | None:
    """Initialize OpenTelemetry tracing for Phoenix.

    Returns:
        TracerProvider if tracing is enabled, None otherwise.
    """
    global _tracer_provider

    if not is_tracing_enabled():
        return None

    if _tracer_provider is not None:
        return _tracer_provider

    endpoint = f"{get_phoenix_endpoint()}/v1/traces"
    exporter = OTLPSpanExporter(endpoint=endpoint)

    resource = Resource.create({"service.name": get_project_name()})
    _tracer_provider = TracerProvider(resource=resource)

    # Tag kinds first, then export
    _tracer_provider.add_span_processor(SpanKindProcessor())
    _tracer_provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(_tracer_provider)

    return _tracer_provider


def get_tracer(name: str = "family-directory") -> trace.Tracer:
    """Get a tracer instance for manual instrumentation.

    Args:
        name: Name of the tracer (appears in Phoenix UI)

    Returns:
        A Tracer instance (no-op if tracing disabled)
    """
    return trace.get_tracer(name)
