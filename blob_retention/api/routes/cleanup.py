"""Scheduled cleanup route.

The external scheduler calls ``GET /api/cron/cleanup-chats`` with the cron
secret as a bearer token. ``?dryRun=true`` evaluates everything without
deleting.
"""

import time
import uuid

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from blob_retention.auth.bearer import require_cron_secret
from blob_retention.observability.logging import (
    correlation_id_scope,
    get_logger,
    request_context_scope,
)
from blob_retention.observability.metrics import MetricsManager, get_metrics_manager
from blob_retention.retention.job import RetentionJob, RetentionJobError

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cron", tags=["cron"])


# ============================================================================
# Response Models
# ============================================================================

class CategoryCounts(BaseModel):
    """Full counters for one category."""
    deleted: int = 0
    kept: int = 0
    skipped: int = 0
    errors: int = 0


class DeletedCount(BaseModel):
    """Deleted-only counter for categories that are always purged."""
    deleted: int = 0


class ChatsSummary(BaseModel):
    production: CategoryCounts
    preview: CategoryCounts


class AuditSummary(BaseModel):
    production: CategoryCounts
    preview: CategoryCounts
    development: DeletedCount


class ArtifactsSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    empty_placeholders: DeletedCount = Field(alias="emptyPlaceholders")
    orphan_sessions: DeletedCount = Field(alias="orphanSessions")


class CleanupResponse(BaseModel):
    """Response body of a successful cleanup run."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    dry_run: bool = Field(alias="dryRun")
    chats: ChatsSummary
    fit_assessments: CategoryCounts = Field(alias="fitAssessments")
    resume_generations: CategoryCounts = Field(alias="resumeGenerations")
    audit: AuditSummary
    artifacts: ArtifactsSummary
    totals: CategoryCounts
    categories: dict[str, CategoryCounts]


class CleanupErrorResponse(BaseModel):
    success: bool = False
    error: str


# ============================================================================
# Dependencies
# ============================================================================

def get_retention_job(request: Request) -> RetentionJob:
    """Return the job built during application startup."""
    return request.app.state.retention_job


# ============================================================================
# Routes
# ============================================================================

@router.get(
    "/cleanup-chats",
    response_model=CleanupResponse,
    response_model_by_alias=True,
    responses={500: {"model": CleanupErrorResponse}},
    dependencies=[Depends(require_cron_secret)],
)
async def cleanup_chats(
    dry_run: bool = Query(default=False, alias="dryRun"),
    job: RetentionJob = Depends(get_retention_job),
    metrics: MetricsManager = Depends(get_metrics_manager),
):
    """Run the retention job once.

    Individual delete failures do not fail the run; they are reported in
    the ``errors`` counters. A listing failure aborts the run with 500.
    """
    run_id = str(uuid.uuid4())
    started = time.monotonic()

    with correlation_id_scope(run_id), request_context_scope(trigger="cron", dry_run=dry_run):
        if dry_run:
            logger.info("dry_run_mode", message="no objects will be deleted")

        try:
            report = await job.run(dry_run=dry_run)
        except RetentionJobError as e:
            metrics.record_failed_run(dry_run, time.monotonic() - started)
            logger.error("cleanup_failed", prefix=e.prefix, error=str(e))
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=CleanupErrorResponse(error="Failed to run cleanup").model_dump(),
            )

        metrics.record_run(report, time.monotonic() - started)
        return CleanupResponse.model_validate(report.to_response_body())
