"""Unit tests for Prometheus metrics."""

import pytest

from blob_retention.observability.metrics import (
    DEFAULT_REGISTRY,
    MetricsManager,
    get_metrics_manager,
)
from blob_retention.retention.categories import Category
from blob_retention.retention.report import CategoryAggregator
from blob_retention.storage.base import DeleteOutcome, DeleteResult


def sample(name: str, labels: dict) -> float:
    return DEFAULT_REGISTRY.get_sample_value(name, labels) or 0.0


@pytest.mark.unit
class TestMetricsManager:
    """Tests for MetricsManager."""

    def test_record_run(self):
        manager = MetricsManager()
        aggregator = CategoryAggregator()
        aggregator.record_deleted(Category.CHAT_PREVIEW, 3)
        aggregator.record_kept(Category.CHAT_PREVIEW)
        aggregator.record_delete_result(
            Category.CHAT_PREVIEW, DeleteResult(DeleteOutcome.ERROR, "boom")
        )
        report = aggregator.finalize(dry_run=False)

        runs_before = sample("retention_runs_total", {"mode": "live", "status": "success"})
        deleted_before = sample(
            "retention_objects_total", {"category": "chat-preview", "outcome": "deleted"}
        )
        failures_before = sample("retention_delete_failures_total", {"category": "chat-preview"})

        manager.record_run(report, duration_seconds=1.5)

        assert sample("retention_runs_total", {"mode": "live", "status": "success"}) == runs_before + 1
        assert sample(
            "retention_objects_total", {"category": "chat-preview", "outcome": "deleted"}
        ) == deleted_before + 3
        assert sample(
            "retention_delete_failures_total", {"category": "chat-preview"}
        ) == failures_before + 1

    def test_record_failed_run(self):
        manager = MetricsManager()
        before = sample("retention_runs_total", {"mode": "dry_run", "status": "failed"})

        manager.record_failed_run(dry_run=True, duration_seconds=0.2)

        assert sample("retention_runs_total", {"mode": "dry_run", "status": "failed"}) == before + 1

    def test_get_metrics(self):
        output = MetricsManager().get_metrics()

        assert isinstance(output, bytes)
        assert b"retention_run_duration_seconds" in output

    def test_recorded_run_is_exported(self):
        manager = MetricsManager()
        aggregator = CategoryAggregator()
        aggregator.record_deleted(Category.RESUME_GENERATION, 2)

        manager.record_run(aggregator.finalize(dry_run=True), duration_seconds=0.1)
        output = manager.get_metrics().decode("utf-8")

        assert manager.registry is DEFAULT_REGISTRY
        assert 'retention_runs_total{mode="dry_run",status="success"}' in output
        assert (
            'retention_objects_total{category="resume-generation",outcome="deleted"}'
            in output
        )

    def test_get_metrics_manager_singleton(self):
        assert get_metrics_manager() is get_metrics_manager()
