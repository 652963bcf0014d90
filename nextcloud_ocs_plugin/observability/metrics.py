"""
Prometheus metrics for the Nextcloud OCS plugin.

Metrics are organized by category:

- Nextcloud API Client Metrics (per-request count and latency)
- Table Query Metrics (per-table list/get invocations and emitted rows)
"""

import logging

from prometheus_client import (
    Counter,
    Histogram,
    start_http_server,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Nextcloud API Client Metrics
# =============================================================================

nextcloud_api_requests_total = Counter(
    "nextcloud_plugin_api_requests_total",
    "Total Nextcloud API requests",
    ["app", "method", "status_code"],  # app: activity, sharing, core
)

nextcloud_api_duration_seconds = Histogram(
    "nextcloud_plugin_api_duration_seconds",
    "Nextcloud API request duration in seconds",
    ["app", "method"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# =============================================================================
# Table Query Metrics
# =============================================================================

table_queries_total = Counter(
    "nextcloud_plugin_table_queries_total",
    "Total table handler invocations",
    ["table", "operation", "status"],  # operation: list | get, status: success | error
)

table_rows_emitted_total = Counter(
    "nextcloud_plugin_table_rows_emitted_total",
    "Total rows streamed to the host",
    ["table"],
)


def setup_metrics(port: int = 9090) -> None:
    """
    Start a dedicated HTTP server exposing the metrics on the given port.

    Args:
        port: Port to serve metrics on (default: 9090)
    """
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except OSError as e:
        if "Address already in use" in str(e):
            logger.warning(
                f"Metrics port {port} already in use (metrics server likely already running)"
            )
        else:
            logger.error(f"Failed to start metrics server on port {port}: {e}")
            raise


# =============================================================================
# Convenience Functions for Common Metric Updates
# =============================================================================


def record_nextcloud_api_call(
    app: str,
    method: str,
    status_code: int,
    duration: float,
) -> None:
    """
    Record metrics for a Nextcloud API call.

    Args:
        app: Nextcloud app name (activity, sharing, core)
        method: HTTP method
        status_code: HTTP status code (0 when no response was received)
        duration: Request duration in seconds
    """
    nextcloud_api_requests_total.labels(
        app=app, method=method, status_code=str(status_code)
    ).inc()
    nextcloud_api_duration_seconds.labels(app=app, method=method).observe(duration)


def record_table_query(
    table: str, operation: str, rows: int = 0, status: str = "success"
) -> None:
    """
    Record a table handler invocation.

    Args:
        table: Table name
        operation: "list" or "get"
        rows: Number of rows emitted to the host
        status: "success" or "error"
    """
    table_queries_total.labels(table=table, operation=operation, status=status).inc()
    if rows:
        table_rows_emitted_total.labels(table=table).inc(rows)
