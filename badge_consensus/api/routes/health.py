"""Liveness endpoint."""

from fastapi import APIRouter

from badge_consensus import __version__
from badge_consensus.api.models.health import HealthResponse

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report liveness and the running version.

    Does not touch the consensus controller, so it stays cheap even when no
    voters are configured.
    """
    return HealthResponse(status="healthy", version=__version__)
