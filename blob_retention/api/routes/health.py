"""Health check routes for the Blob Retention service."""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from blob_retention import __version__

router = APIRouter(prefix="/health", tags=["Health"])


class LivenessResponse(BaseModel):
    """Liveness probe response."""
    alive: bool
    timestamp: str
    version: str


@router.get("/live", response_model=LivenessResponse)
async def liveness_probe() -> LivenessResponse:
    """Report that the process is up."""
    return LivenessResponse(
        alive=True,
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__,
    )
