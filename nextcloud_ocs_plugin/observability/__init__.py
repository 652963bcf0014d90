"""
Observability module for the Nextcloud OCS plugin.

This module provides:
- Prometheus metrics collection
- OpenTelemetry tracing
- Structured logging with trace correlation
"""

from nextcloud_ocs_plugin.observability.logging_config import setup_logging
from nextcloud_ocs_plugin.observability.metrics import setup_metrics
from nextcloud_ocs_plugin.observability.tracing import setup_tracing

__all__ = [
    "setup_logging",
    "setup_metrics",
    "setup_tracing",
]
