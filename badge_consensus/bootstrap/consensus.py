"""Bootstrap wiring for consensus dependencies.

Singletons are built lazily from ConsensusConfig.from_environment() unless
configure_consensus() installed an explicit configuration first.

Note: The token registry is the in-memory ledger. A persistent ledger would
be swapped in here without touching the controller.
"""

from __future__ import annotations

from badge_consensus.application.services.consensus_controller_service import (
    ConsensusControllerService,
)
from badge_consensus.config.consensus_config import ConsensusConfig
from badge_consensus.infrastructure.stubs.event_publisher_stub import EventPublisherStub
from badge_consensus.infrastructure.stubs.token_registry_stub import TokenRegistryStub

_config: ConsensusConfig | None = None
_event_publisher: EventPublisherStub | None = None
_token_registry: TokenRegistryStub | None = None
_consensus_controller: ConsensusControllerService | None = None


def configure_consensus(config: ConsensusConfig) -> ConsensusControllerService:
    """Install config and rebuild every consensus singleton from it.

    Args:
        config: The configuration to wire.

    Returns:
        The freshly built controller.

    Raises:
        DuplicateVoterError: If config rejects duplicates and has some.
    """
    global _config
    reset_consensus_dependencies()
    _config = config
    return get_consensus_controller()


def reset_consensus_dependencies() -> None:
    """Drop all singletons (next access rebuilds them)."""
    global _config, _event_publisher, _token_registry, _consensus_controller
    _config = None
    _event_publisher = None
    _token_registry = None
    _consensus_controller = None


def get_consensus_config() -> ConsensusConfig:
    """Get the active configuration."""
    global _config
    if _config is None:
        _config = ConsensusConfig.from_environment()
    return _config


def get_event_publisher() -> EventPublisherStub:
    """Get event publisher instance."""
    global _event_publisher
    if _event_publisher is None:
        _event_publisher = EventPublisherStub()
    return _event_publisher


def get_token_registry() -> TokenRegistryStub:
    """Get token registry instance."""
    global _token_registry
    if _token_registry is None:
        config = get_consensus_config()
        _token_registry = TokenRegistryStub(
            name=config.registry_name,
            symbol=config.registry_symbol,
            base_uri=config.base_uri,
            event_publisher=get_event_publisher(),
        )
    return _token_registry


def get_consensus_controller() -> ConsensusControllerService:
    """Get consensus controller instance."""
    global _consensus_controller
    if _consensus_controller is None:
        _consensus_controller = ConsensusControllerService(
            voter_registry=get_consensus_config().build_voter_registry(),
            token_registry=get_token_registry(),
            event_publisher=get_event_publisher(),
        )
    return _consensus_controller
