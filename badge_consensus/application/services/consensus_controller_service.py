"""Consensus controller service.

This module implements ConsensusControllerProtocol: it turns independent,
unordered approvals from a fixed voter set into exactly one call into the
token registry per completed round.

Flow for each approval action:
1. Reject callers that are not voters, before any per-target state exists
2. Take the per-target guard (actions on one target are serialized)
3. Check the caller has not approved this target this round and record
   the approval
4. If the approval count equals the voter registry size, reset the round
   and call the token registry (issue or invalidate)
5. If the registry call fails, put back the approvals the round consumed
   (keeping any recorded since the reset) and re-raise the registry error unchanged
6. Publish the approval-recorded event

The guard is re-entrant for the task that holds it. A registry that approves
the same target again while issuing records into the already reset round
instead of waiting on itself.

The mint and invalidate trackers are independent: approving a mint for an
owner never touches any invalidate round and vice versa.
"""

from __future__ import annotations

from collections.abc import Hashable
from datetime import datetime, timezone
from typing import Any

from structlog import get_logger

from badge_consensus.application.ports.consensus_controller import (
    InvalidateApprovalResult,
    MintApprovalResult,
)
from badge_consensus.application.ports.event_publisher import EventPublisherProtocol
from badge_consensus.application.ports.token_registry import TokenRegistryProtocol
from badge_consensus.application.services.approval_tracker import (
    ApprovalOutcome,
    ApprovalTracker,
)
from badge_consensus.domain.errors import DuplicateApprovalError, NotAVoterError
from badge_consensus.domain.events.consensus import (
    InvalidateApprovalRecordedEvent,
    MintApprovalRecordedEvent,
)
from badge_consensus.domain.models.approval_round import ApprovalAction
from badge_consensus.domain.models.interfaces import (
    BADGE_CONSENSUS_INTERFACE,
    INTROSPECTION_INTERFACE,
)
from badge_consensus.domain.models.voter_registry import VoterRegistry

logger = get_logger(__name__)


class ConsensusControllerService:
    """Unanimous-approval gate in front of a token registry.

    Example:
        >>> controller = ConsensusControllerService(
        ...     voter_registry=VoterRegistry.from_iterable(["0xA", "0xB"]),
        ...     token_registry=token_registry,
        ... )
        >>> await controller.approve_mint("0xA", owner="0xOwner")
        >>> result = await controller.approve_mint("0xB", owner="0xOwner")
        >>> result.token_id
        0
    """

    def __init__(
        self,
        voter_registry: VoterRegistry,
        token_registry: TokenRegistryProtocol,
        event_publisher: EventPublisherProtocol | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            voter_registry: Fixed voter set; its size is the unanimity threshold.
            token_registry: Ledger mutated when a round completes.
            event_publisher: Optional sink for approval-recorded events.
                            If not provided, events are only logged.
        """
        self._voter_registry = voter_registry
        self._token_registry = token_registry
        self._event_publisher = event_publisher
        self._mint_tracker = ApprovalTracker(ApprovalAction.MINT, voter_registry)
        self._invalidate_tracker = ApprovalTracker(
            ApprovalAction.INVALIDATE, voter_registry
        )

        if voter_registry.has_duplicates:
            logger.warning(
                "voter_registry_has_duplicates",
                message="Unanimity is unreachable: a repeated voter cannot fill more than one slot",
                voter_slots=voter_registry.size,
                distinct_voters=voter_registry.distinct_count,
            )

    def voters(self) -> tuple[str, ...]:
        """Ordered voter identities, duplicates included."""
        return self._voter_registry.voters

    @property
    def threshold(self) -> int:
        """Approvals required to complete a round."""
        return self._voter_registry.size

    def mint_approval_count(self, owner: str) -> int:
        """Approvals recorded for issuing to owner in the current round."""
        return self._mint_tracker.approval_count(owner)

    def invalidate_approval_count(self, token_id: int) -> int:
        """Approvals recorded for invalidating token_id in the current round."""
        return self._invalidate_tracker.approval_count(token_id)

    def supported_interfaces(self) -> frozenset[str]:
        """Capabilities of the controller plus those the registry declares."""
        return frozenset(
            {BADGE_CONSENSUS_INTERFACE, INTROSPECTION_INTERFACE}
        ) | self._token_registry.supported_interfaces()

    def supports_interface(self, interface_id: str) -> bool:
        """Whether interface_id is supported by the controller or its registry."""
        return interface_id in self.supported_interfaces()

    async def approve_mint(self, voter: str, owner: str) -> MintApprovalResult:
        """Approve issuing a new badge to owner.

        When this approval completes the round, the round is reset and the
        token registry issues a badge to owner within the same action.

        Args:
            voter: The approving identity.
            owner: Candidate owner of the new badge.

        Returns:
            MintApprovalResult; token_id is set when a badge was issued.

        Raises:
            NotAVoterError: voter is not registered.
            DuplicateApprovalError: voter already approved owner this round.
            Exception: Any token registry failure, propagated unchanged.
        """
        log = logger.bind(action=ApprovalAction.MINT.value, voter=voter, owner=owner)
        self._require_voter(self._mint_tracker, voter, log)

        async with self._mint_tracker.serialized(owner):
            outcome = self._record(self._mint_tracker, voter, owner, log)

            token_id: int | None = None
            if outcome.threshold_reached:
                log.info(
                    "mint_threshold_reached",
                    approval_count=outcome.approval_count,
                    threshold=self.threshold,
                )
                try:
                    token_id = await self._token_registry.issue(owner)
                except Exception as e:
                    self._rollback(self._mint_tracker, owner, outcome, log, e)
                    raise
                log.info("badge_issued_by_consensus", token_id=token_id)

            recorded_at = datetime.now(timezone.utc)
            result = MintApprovalResult(
                voter=voter,
                owner=owner,
                approval_count=self._mint_tracker.approval_count(owner),
                threshold=self.threshold,
                threshold_reached=outcome.threshold_reached,
                token_id=token_id,
                recorded_at=recorded_at,
            )

        await self._publish(
            MintApprovalRecordedEvent(
                voter=voter,
                owner=owner,
                approval_count=outcome.approval_count,
                threshold=self.threshold,
                threshold_reached=outcome.threshold_reached,
                token_id=token_id,
                recorded_at=recorded_at,
            ),
            log,
        )
        return result

    async def approve_invalidate(
        self, voter: str, token_id: int
    ) -> InvalidateApprovalResult:
        """Approve invalidating an existing badge.

        Token existence is not checked here; the token registry rejects
        unknown ids when the round completes, and the completing approval is
        then rolled back.

        Args:
            voter: The approving identity.
            token_id: The badge to invalidate.

        Returns:
            InvalidateApprovalResult; threshold_reached means the badge was
            invalidated.

        Raises:
            NotAVoterError: voter is not registered.
            DuplicateApprovalError: voter already approved token_id this round.
            UnknownTokenError: the round completed for an unknown token.
            TokenAlreadyInvalidError: the round completed for an invalid token.
        """
        log = logger.bind(
            action=ApprovalAction.INVALIDATE.value, voter=voter, token_id=token_id
        )
        self._require_voter(self._invalidate_tracker, voter, log)

        async with self._invalidate_tracker.serialized(token_id):
            outcome = self._record(self._invalidate_tracker, voter, token_id, log)

            if outcome.threshold_reached:
                log.info(
                    "invalidate_threshold_reached",
                    approval_count=outcome.approval_count,
                    threshold=self.threshold,
                )
                try:
                    await self._token_registry.invalidate(token_id)
                except Exception as e:
                    self._rollback(self._invalidate_tracker, token_id, outcome, log, e)
                    raise
                log.info("badge_invalidated_by_consensus")

            recorded_at = datetime.now(timezone.utc)
            result = InvalidateApprovalResult(
                voter=voter,
                token_id=token_id,
                approval_count=self._invalidate_tracker.approval_count(token_id),
                threshold=self.threshold,
                threshold_reached=outcome.threshold_reached,
                recorded_at=recorded_at,
            )

        await self._publish(
            InvalidateApprovalRecordedEvent(
                voter=voter,
                token_id=token_id,
                approval_count=outcome.approval_count,
                threshold=self.threshold,
                threshold_reached=outcome.threshold_reached,
                recorded_at=recorded_at,
            ),
            log,
        )
        return result

    def _require_voter(self, tracker: ApprovalTracker, voter: str, log: Any) -> None:
        """Reject a non-voter before the target is looked at."""
        try:
            tracker.require_voter(voter)
        except NotAVoterError:
            log.warning("approval_rejected_not_a_voter")
            raise

    def _record(
        self,
        tracker: ApprovalTracker,
        voter: str,
        target: Hashable,
        log: Any,
    ) -> ApprovalOutcome:
        """Record an approval on tracker, logging duplicates."""
        try:
            outcome = tracker.record(voter, target)
        except DuplicateApprovalError as e:
            log.warning(
                "approval_rejected_duplicate",
                approval_count=e.approval_count,
            )
            raise

        log.info(
            "approval_recorded",
            approval_count=outcome.approval_count,
            threshold=self.threshold,
        )
        return outcome

    def _rollback(
        self,
        tracker: ApprovalTracker,
        target: Hashable,
        outcome: ApprovalOutcome,
        log: Any,
        error: Exception,
    ) -> None:
        """Undo the completing approval after a registry failure."""
        tracker.rollback(target, outcome.previous)
        log.warning(
            "approval_rolled_back",
            message="Token registry rejected the mutation; round restored",
            approval_count=tracker.approval_count(target),
            error=str(error),
            error_type=type(error).__name__,
        )

    async def _publish(self, event: Any, log: Any) -> None:
        """Publish an informational event after the action committed."""
        log.debug("consensus_event_created", event_type=event.event_type)
        if self._event_publisher is None:
            return
        try:
            await self._event_publisher.publish(event)
        except Exception as e:
            # Action already committed; events are informational
            log.error(
                "consensus_event_publish_failed",
                event_type=event.event_type,
                error=str(e),
                error_type=type(e).__name__,
            )
