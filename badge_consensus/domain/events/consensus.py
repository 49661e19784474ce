"""Consensus approval event payloads.

This module defines the informational events the consensus controller
publishes after an approval action commits:
- MintApprovalRecordedEvent: A voter approved issuing a badge to an owner
- InvalidateApprovalRecordedEvent: A voter approved invalidating a badge

Events are not required for correctness. They are published after the action
commits, so a rejected or rolled-back approval never produces one.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

# Event type constants following lowercase.dot.notation convention
MINT_APPROVAL_RECORDED_EVENT_TYPE: str = "consensus.mint_approval.recorded"
INVALIDATE_APPROVAL_RECORDED_EVENT_TYPE: str = "consensus.invalidate_approval.recorded"

# Schema version for consensus events
CONSENSUS_EVENT_SCHEMA_VERSION: str = "1.0.0"


@dataclass(frozen=True, eq=True)
class MintApprovalRecordedEvent:
    """Payload for a recorded mint approval.

    Attributes:
        voter: The approving voter.
        owner: Candidate owner of the badge.
        approval_count: Approvals in the round after this one was recorded.
        threshold: Approvals required to issue.
        threshold_reached: Whether this approval completed the round.
        token_id: Badge issued when the round completed, else None.
        recorded_at: UTC timestamp when the approval was recorded.
    """

    event_type: ClassVar[str] = MINT_APPROVAL_RECORDED_EVENT_TYPE

    voter: str
    owner: str
    approval_count: int
    threshold: int
    threshold_reached: bool
    recorded_at: datetime
    token_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert payload to dict for event storage.

        Returns:
            Dict representation including schema_version.
        """
        return {
            "voter": self.voter,
            "owner": self.owner,
            "approval_count": self.approval_count,
            "threshold": self.threshold,
            "threshold_reached": self.threshold_reached,
            "token_id": self.token_id,
            "recorded_at": self.recorded_at.isoformat(),
            "schema_version": CONSENSUS_EVENT_SCHEMA_VERSION,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MintApprovalRecordedEvent:
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
        """
        return cls(
            voter=data["voter"],
            owner=data["owner"],
            approval_count=data["approval_count"],
            threshold=data["threshold"],
            threshold_reached=data["threshold_reached"],
            token_id=data.get("token_id"),
            recorded_at=datetime.fromisoformat(data["recorded_at"]),
        )


@dataclass(frozen=True, eq=True)
class InvalidateApprovalRecordedEvent:
    """Payload for a recorded invalidate approval.

    Attributes:
        voter: The approving voter.
        token_id: Badge targeted for invalidation.
        approval_count: Approvals in the round after this one was recorded.
        threshold: Approvals required to invalidate.
        threshold_reached: Whether this approval completed the round.
        recorded_at: UTC timestamp when the approval was recorded.
    """

    event_type: ClassVar[str] = INVALIDATE_APPROVAL_RECORDED_EVENT_TYPE

    voter: str
    token_id: int
    approval_count: int
    threshold: int
    threshold_reached: bool
    recorded_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert payload to dict for event storage."""
        return {
            "voter": self.voter,
            "token_id": self.token_id,
            "approval_count": self.approval_count,
            "threshold": self.threshold,
            "threshold_reached": self.threshold_reached,
            "recorded_at": self.recorded_at.isoformat(),
            "schema_version": CONSENSUS_EVENT_SCHEMA_VERSION,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InvalidateApprovalRecordedEvent:
        """Deserialize from dictionary."""
        return cls(
            voter=data["voter"],
            token_id=data["token_id"],
            approval_count=data["approval_count"],
            threshold=data["threshold"],
            threshold_reached=data["threshold_reached"],
            recorded_at=datetime.fromisoformat(data["recorded_at"]),
        )
