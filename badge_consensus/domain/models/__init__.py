"""Domain models for badge consensus."""

from badge_consensus.domain.models.approval_round import ApprovalAction, ApprovalRound
from badge_consensus.domain.models.badge import Badge
from badge_consensus.domain.models.voter_registry import VoterRegistry

__all__: list[str] = [
    "ApprovalAction",
    "ApprovalRound",
    "Badge",
    "VoterRegistry",
]
