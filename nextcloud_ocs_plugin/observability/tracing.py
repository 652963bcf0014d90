"""
OpenTelemetry tracing for the Nextcloud OCS plugin.

This module provides:
- OpenTelemetry SDK initialization with an optional OTLP exporter
- Helper context managers for Nextcloud API calls and table queries
- Trace context lookup for log correlation

Tracing stays a no-op until setup_tracing() is called.
"""

import logging
from contextlib import contextmanager
from typing import Any

from importlib_metadata import PackageNotFoundError, version
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Status, StatusCode, Tracer

logger = logging.getLogger(__name__)

# Global tracer instance (initialized in setup_tracing)
_tracer: Tracer | None = None


def _package_version() -> str:
    try:
        return version("nextcloud-ocs-plugin")
    except PackageNotFoundError:
        return "unknown"


def setup_tracing(
    service_name: str = "nextcloud-ocs-plugin",
    otlp_endpoint: str | None = None,
    otlp_verify_ssl: bool = False,
) -> Tracer:
    """
    Initialize OpenTelemetry tracing.

    Args:
        service_name: Service name for traces
        otlp_endpoint: OTLP gRPC endpoint (e.g., "http://otel-collector:4317").
                      If None, spans are created but not exported
        otlp_verify_ssl: Enable TLS verification for otlp_endpoint

    Returns:
        Tracer instance for creating custom spans
    """
    global _tracer

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": _package_version(),
        }
    )
    provider = TracerProvider(resource=resource)

    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(
                OTLPSpanExporter(endpoint=otlp_endpoint, insecure=not otlp_verify_ssl)
            )
        )
        logger.info(
            f"OpenTelemetry tracing enabled with OTLP endpoint: {otlp_endpoint}"
        )
    else:
        logger.info(
            "OpenTelemetry tracing initialized without OTLP exporter (traces will be generated but not exported)"
        )

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(__name__)
    return _tracer


def get_tracer() -> Tracer | None:
    """Get the global tracer, or None if tracing is not enabled."""
    return _tracer


@contextmanager
def trace_operation(
    operation_name: str,
    attributes: dict[str, Any] | None = None,
    record_exception: bool = True,
):
    """
    Context manager for tracing an operation with automatic error handling.

    Usage:
        with trace_operation("nextcloud.table.nextcloud_share.list"):
            ...

    Yields:
        Span instance (or None if tracing is disabled)
    """
    tracer = get_tracer()

    if tracer is None:
        yield None
        return

    with tracer.start_as_current_span(operation_name) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        try:
            yield span
            span.set_status(Status(StatusCode.OK))
        except Exception as e:
            if record_exception:
                span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise


def trace_nextcloud_api_call(app: str, method: str, path: str | None = None):
    """
    Create a span for a Nextcloud API call.

    Args:
        app: Nextcloud app name (activity, sharing, core)
        method: HTTP method
        path: Optional API path
    """
    attributes = {
        "nextcloud.app": app,
        "http.method": method,
    }
    if path:
        attributes["http.path"] = path

    return trace_operation(f"nextcloud.api.{app}.{method}", attributes)


def trace_table_query(
    table: str, operation: str, quals: dict[str, Any] | None = None
):
    """Create a span for a table list/get invocation."""
    attributes = {"nextcloud.table": table, "nextcloud.table.operation": operation}
    if quals:
        attributes["nextcloud.table.quals"] = ",".join(sorted(quals))
    return trace_operation(f"nextcloud.table.{table}.{operation}", attributes)


def get_trace_context() -> dict[str, str]:
    """
    Get current trace context as a dictionary.

    Returns:
        Dictionary with trace_id and span_id (or empty dict if tracing disabled or no active span)
    """
    if _tracer is None:
        return {}

    span = trace.get_current_span()
    if span.is_recording():
        span_context = span.get_span_context()
        return {
            "trace_id": format(span_context.trace_id, "032x"),
            "span_id": format(span_context.span_id, "016x"),
        }
    return {}
