"""Application ports (interfaces) for badge consensus."""

from badge_consensus.application.ports.consensus_controller import (
    ConsensusControllerProtocol,
    InvalidateApprovalResult,
    MintApprovalResult,
)
from badge_consensus.application.ports.event_publisher import EventPublisherProtocol
from badge_consensus.application.ports.token_registry import (
    BadgeQueryProtocol,
    TokenRegistryProtocol,
)

__all__: list[str] = [
    "BadgeQueryProtocol",
    "ConsensusControllerProtocol",
    "EventPublisherProtocol",
    "InvalidateApprovalResult",
    "MintApprovalResult",
    "TokenRegistryProtocol",
]
