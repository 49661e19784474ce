"""FastAPI application entry point for the badge consensus service."""

from fastapi import FastAPI

from badge_consensus import __version__
from badge_consensus.api.middleware.logging_middleware import LoggingMiddleware
from badge_consensus.api.routes.badges import router as badges_router
from badge_consensus.api.routes.consensus import router as consensus_router
from badge_consensus.api.routes.health import router as health_router
from badge_consensus.api.startup import configure_logging, wire_consensus

app = FastAPI(
    title="Badge Consensus API",
    description="Unanimous multi-voter approval for non-transferable badges",
    version=__version__,
)

app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(consensus_router)
app.include_router(badges_router)


@app.on_event("startup")
async def startup_event() -> None:
    configure_logging()
    wire_consensus()
