"""Consensus controller protocol.

This module defines the contract for the two approval actions of the
consensus extension and the result objects they return.

Contract:
- Only registered voters may approve (NotAVoterError otherwise)
- A voter approves a target at most once per round (DuplicateApprovalError)
- When the approval count equals the voter registry size the round resets
  and the token registry is called exactly once
- Every action is all-or-nothing; failures leave approval state unchanged
"""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class MintApprovalResult:
    """Result of a successful mint approval.

    Attributes:
        voter: The approving voter.
        owner: Candidate owner of the badge.
        approval_count: Approvals left in the round after this action
            (0 when the round completed and reset).
        threshold: Approvals required to issue.
        threshold_reached: Whether this approval completed the round.
        token_id: The issued badge when threshold_reached, else None.
        recorded_at: When the approval was recorded (UTC).
    """

    voter: str
    owner: str
    approval_count: int
    threshold: int
    threshold_reached: bool
    recorded_at: datetime
    token_id: int | None = None


@dataclass(frozen=True)
class InvalidateApprovalResult:
    """Result of a successful invalidate approval.

    Attributes:
        voter: The approving voter.
        token_id: The badge targeted for invalidation.
        approval_count: Approvals left in the round after this action
            (0 when the round completed and reset).
        threshold: Approvals required to invalidate.
        threshold_reached: Whether this approval completed the round
            (and therefore invalidated the badge).
        recorded_at: When the approval was recorded (UTC).
    """

    voter: str
    token_id: int
    approval_count: int
    threshold: int
    threshold_reached: bool
    recorded_at: datetime


class ConsensusControllerProtocol(Protocol):
    """Protocol for the consensus controller."""

    @abstractmethod
    def voters(self) -> tuple[str, ...]:
        """Ordered voter identities, duplicates included."""
        ...

    @abstractmethod
    async def approve_mint(self, voter: str, owner: str) -> MintApprovalResult:
        """Approve issuing a new badge to owner.

        Raises:
            NotAVoterError: voter is not registered.
            DuplicateApprovalError: voter already approved owner this round.
        """
        ...

    @abstractmethod
    async def approve_invalidate(
        self, voter: str, token_id: int
    ) -> InvalidateApprovalResult:
        """Approve invalidating an existing badge.

        Raises:
            NotAVoterError: voter is not registered.
            DuplicateApprovalError: voter already approved token_id this round.
            UnknownTokenError: the round completed for an unknown token.
            TokenAlreadyInvalidError: the round completed for an invalid token.
        """
        ...

    @abstractmethod
    def supports_interface(self, interface_id: str) -> bool:
        """Whether the controller (or its registry) supports a capability."""
        ...
