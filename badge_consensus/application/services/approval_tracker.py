"""Approval tracker for one consensus action.

An ApprovalTracker owns the approval rounds of a single action (mint or
invalidate), keyed by target: candidate owner for mint, token id for
invalidate. The two trackers of a controller never share state.

Rounds are created lazily the first time a target is approved and are never
destroyed; a completed round is reset and reused for the next round on the
same target.

Concurrency:
Callers wrap record() and any follow-up side effect in
``serialized(target)`` so that actions on the same target are totally
ordered. Different targets proceed independently. The guard is re-entrant
for the task already holding it: an approval made from inside the side
effect (for example by the token registry during issuance) runs at once
and sees the round as already reset.

A target's lock exists only while some action holds or awaits it, so
rejected or finished actions leave no per-target lock behind.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager
from dataclasses import dataclass

from structlog import get_logger

from badge_consensus.domain.errors import DuplicateApprovalError, NotAVoterError
from badge_consensus.domain.models.approval_round import ApprovalAction, ApprovalRound
from badge_consensus.domain.models.voter_registry import VoterRegistry

logger = get_logger(__name__)


@dataclass(frozen=True)
class ApprovalOutcome:
    """Bookkeeping outcome of a recorded approval.

    Attributes:
        approval_count: Approvals that reached the round, this one included.
        threshold_reached: True when this approval completed the round; the
            round has already been reset when this is True.
        previous: Approvals before this action, for rollback.
    """

    approval_count: int
    threshold_reached: bool
    previous: frozenset[str]


class ApprovalTracker:
    """Per-target approval rounds for one consensus action.

    Attributes:
        action: The action whose rounds this tracker owns.
    """

    def __init__(self, action: ApprovalAction, voter_registry: VoterRegistry) -> None:
        """Initialize an empty tracker.

        Args:
            action: The action gated by this tracker.
            voter_registry: Shared, read-only voter registry.
        """
        self.action = action
        self._voter_registry = voter_registry
        self._rounds: dict[Hashable, ApprovalRound] = {}
        self._locks: dict[Hashable, asyncio.Lock] = {}
        # Tasks holding or awaiting each lock; the lock is dropped at zero
        self._lock_users: dict[Hashable, int] = {}
        self._holders: dict[Hashable, asyncio.Task | None] = {}

    @property
    def threshold(self) -> int:
        """Approvals required to complete a round (voter slots)."""
        return self._voter_registry.size

    @property
    def tracked_lock_count(self) -> int:
        """Targets that currently have a lock (held or awaited)."""
        return len(self._locks)

    def is_tracked(self, target: Hashable) -> bool:
        """Whether any per-target state (round or lock) exists for target."""
        return target in self._rounds or target in self._locks

    @asynccontextmanager
    async def serialized(self, target: Hashable) -> AsyncIterator[None]:
        """Serialize actions on target.

        Re-entrant for the task that already holds target, so an approval
        issued from inside the guarded block does not wait on itself.
        """
        task = asyncio.current_task()
        if task is not None and self._holders.get(target) is task:
            yield
            return

        lock = self._locks.get(target)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[target] = lock
        self._lock_users[target] = self._lock_users.get(target, 0) + 1
        try:
            async with lock:
                self._holders[target] = task
                try:
                    yield
                finally:
                    del self._holders[target]
        finally:
            self._lock_users[target] -= 1
            if self._lock_users[target] == 0:
                del self._lock_users[target]
                del self._locks[target]

    def require_voter(self, voter: str) -> None:
        """Reject non-voters before any per-target state is touched.

        Raises:
            NotAVoterError: voter is not in the voter registry.
        """
        if not self._voter_registry.is_voter(voter):
            raise NotAVoterError(identity=voter, action=self.action.value)

    def approval_count(self, target: Hashable) -> int:
        """Approvals recorded for target in the current round."""
        approval_round = self._rounds.get(target)
        return approval_round.count if approval_round is not None else 0

    def has_approved(self, voter: str, target: Hashable) -> bool:
        """Whether voter approved target in the current round."""
        approval_round = self._rounds.get(target)
        return approval_round is not None and approval_round.has_approved(voter)

    def record(self, voter: str, target: Hashable) -> ApprovalOutcome:
        """Record an approval and reset the round if it completes.

        Preconditions are checked before anything is written, so a rejected
        approval leaves the tracker unchanged.

        Args:
            voter: The approving identity.
            target: Candidate owner or token id.

        Returns:
            ApprovalOutcome describing the new round state.

        Raises:
            NotAVoterError: voter is not in the voter registry.
            DuplicateApprovalError: voter already approved target this round.
        """
        self.require_voter(voter)

        approval_round = self._rounds.get(target)
        if approval_round is None:
            approval_round = ApprovalRound(action=self.action, target=target)
            self._rounds[target] = approval_round

        if approval_round.has_approved(voter):
            raise DuplicateApprovalError(
                voter=voter,
                action=self.action.value,
                target=target,
                approval_count=approval_round.count,
            )

        previous = approval_round.snapshot()
        count = approval_round.approve(voter)

        # Reset before the caller mutates the registry
        threshold_reached = count == self.threshold
        if threshold_reached:
            approval_round.reset()
            logger.debug(
                "approval_round_reset",
                action=self.action.value,
                target=target,
                threshold=self.threshold,
            )

        return ApprovalOutcome(
            approval_count=count,
            threshold_reached=threshold_reached,
            previous=previous,
        )

    def rollback(self, target: Hashable, previous: frozenset[str]) -> None:
        """Undo a completed round whose side effect failed.

        The approvals captured before the action are put back alongside any
        approvals recorded into the fresh round since the reset. If the
        union would complete the round again, the fresh round is left as is.

        Args:
            target: Candidate owner or token id.
            previous: ApprovalOutcome.previous of the action being undone.
        """
        approval_round = self._rounds.get(target)
        if approval_round is None:
            return
        current = approval_round.snapshot()
        merged = previous | current
        if len(merged) >= self.threshold:
            merged = current
        approval_round.restore(merged)
