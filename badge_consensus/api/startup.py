"""Startup hooks for the badge consensus API.

This module provides startup hooks that:
1. Configure structured logging from ENVIRONMENT
2. Wire the consensus controller from the environment configuration,
   failing startup when the voter list is rejected

Usage in FastAPI:
    @app.on_event("startup")
    async def startup_event():
        configure_logging()
        wire_consensus()
"""

import os

from badge_consensus.bootstrap.consensus import (
    get_consensus_config,
    get_consensus_controller,
)
from badge_consensus.bootstrap.logging import configure_structlog
from badge_consensus.domain.errors import DuplicateVoterError
from badge_consensus.infrastructure.observability import get_logger_for_service

ENVIRONMENT_VAR = "ENVIRONMENT"
DEFAULT_ENVIRONMENT = "development"


def configure_logging() -> None:
    """Configure structlog based on the ENVIRONMENT variable.

    production uses JSON output; anything else uses console output.
    """
    environment = os.getenv(ENVIRONMENT_VAR, DEFAULT_ENVIRONMENT)
    configure_structlog(environment=environment)
    log = get_logger_for_service("startup", component="api")
    log.info("structured_logging_configured", environment=environment)


def wire_consensus() -> None:
    """Build the consensus controller before serving requests.

    Raises:
        DuplicateVoterError: Duplicate voters were configured while
            CONSENSUS_REJECT_DUPLICATE_VOTERS is set.
    """
    log = get_logger_for_service("startup", component="api")
    config = get_consensus_config()
    try:
        controller = get_consensus_controller()
    except DuplicateVoterError as e:
        log.critical(
            "consensus_wiring_failed",
            duplicates=list(e.duplicates),
            message="Startup blocked: voter list repeats identities",
        )
        raise

    if controller.threshold == 0:
        log.warning(
            "consensus_has_no_voters",
            message="No voters configured; every approval will be rejected",
        )

    log.info(
        "consensus_wired",
        threshold=controller.threshold,
        reject_duplicate_voters=config.reject_duplicate_voters,
        registry_name=config.registry_name,
    )
