"""In-memory development stubs for application ports."""

from badge_consensus.infrastructure.stubs.event_publisher_stub import EventPublisherStub
from badge_consensus.infrastructure.stubs.token_registry_stub import TokenRegistryStub

__all__: list[str] = ["EventPublisherStub", "TokenRegistryStub"]
