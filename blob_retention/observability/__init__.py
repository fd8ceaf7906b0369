"""Observability package for the Blob Retention service.

This package provides:
- Structured JSON logging with correlation IDs
- Prometheus metrics for retention runs
"""

from blob_retention.observability.logging import StructuredLogger, get_logger, setup_logging
from blob_retention.observability.metrics import MetricsManager, get_metrics_manager

__all__ = [
    "StructuredLogger",
    "get_logger",
    "setup_logging",
    "MetricsManager",
    "get_metrics_manager",
]
