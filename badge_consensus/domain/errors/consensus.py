"""Consensus approval errors.

This module provides exception classes for approval actions rejected by the
consensus controller and for voter sets rejected at construction time.

Rejections are all-or-nothing: when one of these errors is raised the
approval state is exactly as it was before the action started.
"""

from __future__ import annotations

from collections.abc import Sequence

from badge_consensus.domain.exceptions import BadgeConsensusError


class ConsensusError(BadgeConsensusError):
    """Base error for consensus approval operations."""

    pass


class NotAVoterError(ConsensusError):
    """Raised when an identity outside the voter registry tries to approve.

    Applies to both mint and invalidate approvals, regardless of target.
    Not retryable: the voter set is fixed at construction.

    HTTP Status: 403 Forbidden

    Attributes:
        identity: The identity that attempted the approval.
        action: The approval action attempted ("mint" or "invalidate").
    """

    def __init__(self, identity: str, action: str) -> None:
        """Initialize the error.

        Args:
            identity: The identity that attempted the approval.
            action: The approval action attempted ("mint" or "invalidate").
        """
        self.identity = identity
        self.action = action
        super().__init__(f"Identity {identity!r} is not a voter ({action} approval)")

    def to_rfc7807_dict(self) -> dict:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary conforming to RFC 7807 problem details.
        """
        return {
            "type": "urn:badge-consensus:consensus:not-a-voter",
            "title": "Not A Voter",
            "status": 403,
            "detail": str(self),
            "identity": self.identity,
            "action": self.action,
        }


class DuplicateApprovalError(ConsensusError):
    """Raised when a voter approves the same target twice in one round.

    The voter must wait until the round completes (every other voter slot
    approves), after which the target starts a fresh round. There is no
    manual reset and no way to withdraw an approval.

    HTTP Status: 409 Conflict

    Attributes:
        voter: The voter attempting the duplicate approval.
        action: The approval action ("mint" or "invalidate").
        target: The owner (mint) or token id (invalidate) being approved.
        approval_count: Approvals already recorded in the current round.
    """

    def __init__(
        self,
        voter: str,
        action: str,
        target: str | int,
        approval_count: int,
    ) -> None:
        """Initialize the error.

        Args:
            voter: The voter attempting the duplicate approval.
            action: The approval action ("mint" or "invalidate").
            target: The owner (mint) or token id (invalidate).
            approval_count: Approvals already recorded in the current round.
        """
        self.voter = voter
        self.action = action
        self.target = target
        self.approval_count = approval_count
        super().__init__(
            f"Voter {voter!r} already approved {action} for {target!r} "
            f"in the current round"
        )

    def to_rfc7807_dict(self) -> dict:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary conforming to RFC 7807 problem details.
        """
        return {
            "type": "urn:badge-consensus:consensus:duplicate-approval",
            "title": "Duplicate Approval",
            "status": 409,
            "detail": str(self),
            "voter": self.voter,
            "action": self.action,
            "target": self.target,
            "approval_count": self.approval_count,
        }


class DuplicateVoterError(ConsensusError):
    """Raised when a strict voter registry is built from a list with repeats.

    Only raised when duplicate rejection is enabled. By default duplicates
    are kept as distinct slots, which makes unanimity unreachable for the
    repeated identity.

    Attributes:
        duplicates: The identities that appear more than once, in first-seen order.
    """

    def __init__(self, duplicates: Sequence[str]) -> None:
        """Initialize the error.

        Args:
            duplicates: The repeated identities.
        """
        self.duplicates = tuple(duplicates)
        super().__init__(
            f"Voter list contains duplicate identities: {', '.join(self.duplicates)}"
        )
