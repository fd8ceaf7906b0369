"""Retention job orchestration.

One run scans every category's governing prefixes, classifies and
evaluates each object, then deletes the eligible ones:

1. Plan: all categories are scanned concurrently. Any listing failure
   aborts the run before a single delete is issued.
2. Delete: eligible objects are deleted with bounded concurrency, or
   counted as deleted when running dry.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from blob_retention.config import RetentionSettings
from blob_retention.observability.logging import get_logger
from blob_retention.retention.categories import Category, CategoryClassifier
from blob_retention.retention.executor import DeletionExecutor
from blob_retention.retention.policy import (
    Decision,
    RetentionPolicyEvaluator,
    RetentionPolicyTable,
)
from blob_retention.retention.report import CategoryAggregator, RunReport
from blob_retention.retention.scanner import PrefixScanner
from blob_retention.storage.base import ObjectStore, StoredObject, StoreListError

logger = get_logger(__name__)


class RetentionJobError(Exception):
    """A retention run was aborted by a fatal scan failure."""

    def __init__(self, prefix: str, message: str):
        self.prefix = prefix
        super().__init__(message)


@dataclass
class _CategoryPlan:
    category: Category
    to_delete: list[StoredObject] = field(default_factory=list)
    scanned_keys: set[str] = field(default_factory=set)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RetentionJob:
    """Drives scanning, classification, evaluation and deletion.

    The job holds no per-run state; every ``run`` builds its own
    aggregator and executor, so overlapping runs do not interfere.

    Example:
        >>> job = RetentionJob.from_settings(store, settings.retention)
        >>> report = await job.run(dry_run=True)
        >>> report.totals.deleted
    """

    def __init__(
        self,
        store: ObjectStore,
        policy_table: RetentionPolicyTable,
        classifier: CategoryClassifier,
        delete_concurrency: int = 10,
        trust_uploaded_at: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the job.

        Args:
            store: Object store to scan and delete from
            policy_table: Immutable category policies and protected paths
            classifier: Category classifier
            delete_concurrency: Maximum delete calls in flight
            trust_uploaded_at: Fall back to store upload time for age
            clock: Source of the current time
        """
        self.store = store
        self.policy_table = policy_table
        self.classifier = classifier
        self.delete_concurrency = delete_concurrency
        self.evaluator = RetentionPolicyEvaluator(policy_table, trust_uploaded_at)
        self.scanner = PrefixScanner(store)
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        store: ObjectStore,
        settings: RetentionSettings,
        **kwargs,
    ) -> "RetentionJob":
        """Build a job whose policy table is read once from settings."""
        return cls(
            store=store,
            policy_table=RetentionPolicyTable.from_settings(settings),
            classifier=CategoryClassifier.from_settings(settings),
            delete_concurrency=settings.delete_concurrency,
            trust_uploaded_at=settings.trust_uploaded_at,
            **kwargs,
        )

    async def run(self, dry_run: bool = False, now: Optional[datetime] = None) -> RunReport:
        """Run one retention pass.

        Args:
            dry_run: Evaluate everything but issue no delete calls
            now: Evaluation time (defaults to the job clock)

        Returns:
            RunReport with one outcome per category

        Raises:
            RetentionJobError: If listing any prefix failed
        """
        now = now or self.clock()
        started = time.monotonic()
        aggregator = CategoryAggregator()

        logger.info("retention_run_started", dry_run=dry_run, now=now.isoformat())

        plans = await self._plan_all(aggregator, now)
        scanned = len(set().union(*(plan.scanned_keys for plan in plans)))

        if dry_run:
            for plan in plans:
                aggregator.record_deleted(plan.category, len(plan.to_delete))
        else:
            await self._delete_all(plans, aggregator)

        report = aggregator.finalize(dry_run=dry_run, scanned=scanned)

        for category, outcome in report.outcomes.items():
            logger.info("retention_category_summary", category=category.value, **outcome.as_dict())
        logger.info(
            "retention_run_completed",
            dry_run=dry_run,
            scanned=scanned,
            duration_seconds=round(time.monotonic() - started, 3),
            **report.totals.as_dict(),
        )
        return report

    async def _plan_all(
        self,
        aggregator: CategoryAggregator,
        now: datetime,
    ) -> list[_CategoryPlan]:
        tasks = [
            asyncio.create_task(self._plan_category(category, aggregator, now))
            for category in Category
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except StoreListError as e:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.error("retention_scan_failed", prefix=e.prefix, error=str(e))
            raise RetentionJobError(e.prefix, str(e)) from e

    async def _plan_category(
        self,
        category: Category,
        aggregator: CategoryAggregator,
        now: datetime,
    ) -> _CategoryPlan:
        """Scan a category's prefixes and decide the fate of each object.

        Objects listed under the prefix but classified elsewhere belong to
        another category's pass and are ignored here.
        """
        plan = _CategoryPlan(category)
        seen: set[str] = set()

        for prefix in self.classifier.scan_prefixes(category):
            async for obj in self.scanner.scan(prefix):
                plan.scanned_keys.add(obj.key)
                if obj.key in seen or self.classifier.classify(obj) is not category:
                    continue
                seen.add(obj.key)

                evaluation = self.evaluator.evaluate(obj, category, now)
                if evaluation.decision is Decision.DELETE:
                    plan.to_delete.append(obj)
                elif evaluation.decision is Decision.SKIP:
                    logger.warning(
                        "object_timestamp_unparsable",
                        category=category.value,
                        key=obj.key,
                    )
                    aggregator.record_skipped(category)
                else:
                    aggregator.record_kept(category)

        return plan

    async def _delete_all(
        self,
        plans: list[_CategoryPlan],
        aggregator: CategoryAggregator,
    ) -> None:
        executor = DeletionExecutor(self.store, self.delete_concurrency)

        async def delete_category(plan: _CategoryPlan) -> None:
            for _, result in await executor.delete_many(plan.to_delete):
                aggregator.record_delete_result(plan.category, result)

        await asyncio.gather(*(delete_category(plan) for plan in plans if plan.to_delete))
