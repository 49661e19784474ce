"""Approval round domain model.

An approval round is the per-target record of which voters have approved an
action in the current epoch. A round starts empty, accumulates approvals and
is reset the moment it reaches the unanimity threshold, after which the same
target can be approved again from scratch.

The approval count is derived from the approval set; it cannot drift from
the set because there is no separate counter to mutate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ApprovalAction(Enum):
    """The registry mutation an approval round gates.

    Values:
        MINT: Issue a new badge to a candidate owner.
        INVALIDATE: Invalidate an existing badge.
    """

    MINT = "mint"
    INVALIDATE = "invalidate"


@dataclass
class ApprovalRound:
    """Mutable approval state for one target key.

    Only the approval tracker owning the round mutates it.

    Attributes:
        action: The action this round gates.
        target: Candidate owner (mint) or token id (invalidate).
        approvals: Voters who approved in the current round.
    """

    action: ApprovalAction
    target: str | int
    approvals: set[str] = field(default_factory=set)

    @property
    def count(self) -> int:
        """Number of approvals recorded in the current round."""
        return len(self.approvals)

    @property
    def is_empty(self) -> bool:
        """Whether the round has no approvals."""
        return not self.approvals

    def has_approved(self, voter: str) -> bool:
        """Check whether a voter already approved in the current round."""
        return voter in self.approvals

    def approve(self, voter: str) -> int:
        """Record an approval.

        Args:
            voter: The approving voter. Callers check for duplicates first.

        Returns:
            The approval count after recording.

        Raises:
            ValueError: If the voter already approved in this round.
        """
        if voter in self.approvals:
            raise ValueError(f"voter {voter!r} already approved this round")
        self.approvals.add(voter)
        return self.count

    def reset(self) -> None:
        """Clear every approval, returning the round to its empty state."""
        self.approvals.clear()

    def snapshot(self) -> frozenset[str]:
        """Capture the current approvals for rollback."""
        return frozenset(self.approvals)

    def restore(self, approvals: frozenset[str]) -> None:
        """Restore approvals captured by snapshot()."""
        self.approvals = set(approvals)
