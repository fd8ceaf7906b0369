"""Prometheus metrics for the Blob Retention service."""

from typing import TYPE_CHECKING, Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

if TYPE_CHECKING:
    from blob_retention.retention.report import RunReport

# Default registry
DEFAULT_REGISTRY = CollectorRegistry()

METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST

# =============================================================================
# Run Metrics
# =============================================================================

RUNS_TOTAL = Counter(
    'retention_runs_total',
    'Total number of retention runs',
    ['mode', 'status'],
    registry=DEFAULT_REGISTRY,
)

RUN_DURATION = Histogram(
    'retention_run_duration_seconds',
    'Wall-clock time of a retention run',
    ['mode'],
    buckets=[0.5, 1, 2, 5, 10, 30, 60, 120, 300, 600],
    registry=DEFAULT_REGISTRY,
)

# =============================================================================
# Object Metrics
# =============================================================================

OBJECTS_TOTAL = Counter(
    'retention_objects_total',
    'Objects evaluated by retention runs, by outcome',
    ['category', 'outcome'],
    registry=DEFAULT_REGISTRY,
)

DELETE_FAILURES = Counter(
    'retention_delete_failures_total',
    'Delete calls that failed for a single object',
    ['category'],
    registry=DEFAULT_REGISTRY,
)


class MetricsManager:
    """Records retention run results into the service registry.

    The collectors are module-level, so every manager shares
    ``DEFAULT_REGISTRY``.

    Example:
        >>> manager = MetricsManager()
        >>> manager.record_run(report, duration_seconds=1.2)
    """

    def __init__(self) -> None:
        self.registry = DEFAULT_REGISTRY

    @staticmethod
    def _mode(dry_run: bool) -> str:
        return "dry_run" if dry_run else "live"

    def record_run(self, report: "RunReport", duration_seconds: float) -> None:
        """Record a completed run.

        Args:
            report: Final run report
            duration_seconds: Run duration
        """
        mode = self._mode(report.dry_run)
        RUNS_TOTAL.labels(mode=mode, status="success").inc()
        RUN_DURATION.labels(mode=mode).observe(duration_seconds)

        for category, outcome in report.outcomes.items():
            for name, value in outcome.as_dict().items():
                if value:
                    OBJECTS_TOTAL.labels(category=category.value, outcome=name).inc(value)
            if outcome.errors:
                DELETE_FAILURES.labels(category=category.value).inc(outcome.errors)

    def record_failed_run(self, dry_run: bool, duration_seconds: float) -> None:
        """Record a run aborted by a fatal error."""
        mode = self._mode(dry_run)
        RUNS_TOTAL.labels(mode=mode, status="failed").inc()
        RUN_DURATION.labels(mode=mode).observe(duration_seconds)

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus exposition format."""
        return generate_latest(self.registry)


# Global metrics manager instance
_metrics_manager: Optional[MetricsManager] = None


def get_metrics_manager() -> MetricsManager:
    """Get or create the global metrics manager."""
    global _metrics_manager
    if _metrics_manager is None:
        _metrics_manager = MetricsManager()
    return _metrics_manager
