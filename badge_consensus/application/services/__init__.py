"""Application services for badge consensus."""

from badge_consensus.application.services.approval_tracker import (
    ApprovalOutcome,
    ApprovalTracker,
)
from badge_consensus.application.services.consensus_controller_service import (
    ConsensusControllerService,
)

__all__: list[str] = [
    "ApprovalOutcome",
    "ApprovalTracker",
    "ConsensusControllerService",
]
