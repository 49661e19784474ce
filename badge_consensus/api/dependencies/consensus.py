"""Consensus API dependencies.

Dependency injection setup for the consensus controller and the badge
registry it drives. Instances come from the bootstrap singletons so every
request shares one approval state and one ledger.

Tests override these with ``app.dependency_overrides``.
"""

from badge_consensus.application.ports.token_registry import BadgeQueryProtocol
from badge_consensus.application.services.consensus_controller_service import (
    ConsensusControllerService,
)
from badge_consensus.bootstrap.consensus import (
    get_consensus_controller as _get_consensus_controller,
)
from badge_consensus.bootstrap.consensus import (
    get_token_registry as _get_token_registry,
)


def get_consensus_controller() -> ConsensusControllerService:
    """Get the consensus controller singleton."""
    return _get_consensus_controller()


def get_badge_query() -> BadgeQueryProtocol:
    """Get the read side of the badge registry."""
    return _get_token_registry()
