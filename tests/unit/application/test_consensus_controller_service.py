"""Unit tests for ConsensusControllerService.

Tests cover:
- Mint and invalidate rounds end to end against the in-memory ledger
- Reset after a completed round
- Rejections (non-voter, duplicate approval) leave state unchanged
- Rollback when the token registry rejects the completing approval
- Event publication order and publish failures
- Per-target serialization under concurrent approvals
- Non-voters leave no per-target state behind
- Token registries that approve again while issuing
- Capability introspection
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from badge_consensus.application.ports.consensus_controller import (
    ConsensusControllerProtocol,
)
from badge_consensus.application.services.consensus_controller_service import (
    ConsensusControllerService,
)
from badge_consensus.domain.errors import (
    DuplicateApprovalError,
    NotAVoterError,
    TokenAlreadyInvalidError,
    UnknownTokenError,
)
from badge_consensus.domain.events import (
    BadgeIssuedEvent,
    InvalidateApprovalRecordedEvent,
    MintApprovalRecordedEvent,
)
from badge_consensus.domain.models.interfaces import (
    ALL_INTERFACES,
    BADGE_CONSENSUS_INTERFACE,
    BADGE_ENUMERABLE_INTERFACE,
    BADGE_METADATA_INTERFACE,
    BADGE_REGISTRY_INTERFACE,
    INTROSPECTION_INTERFACE,
)
from badge_consensus.domain.models.voter_registry import VoterRegistry
from badge_consensus.infrastructure.stubs.event_publisher_stub import EventPublisherStub
from badge_consensus.infrastructure.stubs.token_registry_stub import TokenRegistryStub

OWNER = "0xOwner"


class FailingIssueRegistry(TokenRegistryStub):
    """Ledger whose issue() always fails."""

    async def issue(self, owner: str) -> int:
        raise RuntimeError("ledger unavailable")


class ReentrantIssueRegistry(TokenRegistryStub):
    """Ledger that approves the same owner again while issuing.

    The first issue() call records nested_voter's approval through the
    controller before issuing, or instead of issuing when fail is set.
    """

    def __init__(self, nested_voter: str, fail: bool = False) -> None:
        super().__init__()
        self.controller: ConsensusControllerService | None = None
        self.nested_voter = nested_voter
        self.fail = fail
        self.nested_results: list[Any] = []

    async def issue(self, owner: str) -> int:
        assert self.controller is not None
        if not self.nested_results:
            self.nested_results.append(
                await self.controller.approve_mint(self.nested_voter, owner)
            )
        if self.fail:
            raise RuntimeError("ledger unavailable")
        return await super().issue(owner)


class FailingEventPublisher:
    """Event sink whose publish() always fails."""

    async def publish(self, event: Any) -> None:
        raise RuntimeError("event bus down")


def make_controller(
    voters: list[str],
    token_registry: TokenRegistryStub | None = None,
    event_publisher: Any = None,
) -> ConsensusControllerService:
    return ConsensusControllerService(
        voter_registry=VoterRegistry.from_iterable(voters),
        token_registry=token_registry or TokenRegistryStub(),
        event_publisher=event_publisher,
    )


@pytest.fixture
def event_publisher() -> EventPublisherStub:
    return EventPublisherStub()


@pytest.fixture
def token_registry(event_publisher: EventPublisherStub) -> TokenRegistryStub:
    return TokenRegistryStub(event_publisher=event_publisher)


@pytest.fixture
def controller(
    token_registry: TokenRegistryStub, event_publisher: EventPublisherStub
) -> ConsensusControllerService:
    return make_controller(["0xA", "0xB", "0xC"], token_registry, event_publisher)


class TestVoters:
    def test_voters_in_order(self, controller: ConsensusControllerService) -> None:
        assert controller.voters() == ("0xA", "0xB", "0xC")
        assert controller.threshold == 3

    def test_voters_include_duplicates(self) -> None:
        controller = make_controller(["0xA", "0xA"])

        assert controller.voters() == ("0xA", "0xA")
        assert controller.threshold == 2

    @pytest.mark.asyncio
    async def test_usable_through_protocol(self) -> None:
        controller: ConsensusControllerProtocol = make_controller(["0xA"])

        result = await controller.approve_mint("0xA", OWNER)

        assert result.token_id == 0
        assert controller.voters() == ("0xA",)
        assert controller.supports_interface(BADGE_CONSENSUS_INTERFACE)


class TestApproveMint:
    """Mint rounds with three voters A, B, C."""

    @pytest.mark.asyncio
    async def test_three_voter_round(
        self,
        controller: ConsensusControllerService,
        token_registry: TokenRegistryStub,
    ) -> None:
        first = await controller.approve_mint("0xA", OWNER)
        assert first.approval_count == 1
        assert not first.threshold_reached
        assert first.token_id is None

        second = await controller.approve_mint("0xB", OWNER)
        assert second.approval_count == 2
        assert await token_registry.balance_of(OWNER) == 0

        with pytest.raises(DuplicateApprovalError):
            await controller.approve_mint("0xA", OWNER)
        assert controller.mint_approval_count(OWNER) == 2

        third = await controller.approve_mint("0xC", OWNER)
        assert third.threshold_reached
        assert third.token_id == 0
        assert third.approval_count == 0
        assert await token_registry.balance_of(OWNER) == 1
        assert await token_registry.owner_of(0) == OWNER

        again = await controller.approve_mint("0xA", OWNER)
        assert again.approval_count == 1
        assert not again.threshold_reached

    @pytest.mark.asyncio
    async def test_single_voter_issues_immediately(self) -> None:
        token_registry = TokenRegistryStub()
        controller = make_controller(["0xA"], token_registry)

        result = await controller.approve_mint("0xA", OWNER)

        assert result.threshold_reached
        assert result.token_id == 0
        assert await token_registry.emitted_count() == 1

    @pytest.mark.asyncio
    async def test_each_completed_round_issues_a_new_badge(self) -> None:
        token_registry = TokenRegistryStub()
        controller = make_controller(["0xA", "0xB"], token_registry)

        for _ in range(3):
            await controller.approve_mint("0xA", OWNER)
            await controller.approve_mint("0xB", OWNER)

        assert await token_registry.tokens_of_owner(OWNER) == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_non_voter_rejected(
        self,
        controller: ConsensusControllerService,
        token_registry: TokenRegistryStub,
        event_publisher: EventPublisherStub,
    ) -> None:
        await controller.approve_mint("0xA", OWNER)

        with pytest.raises(NotAVoterError):
            await controller.approve_mint("0xEVE", OWNER)

        assert controller.mint_approval_count(OWNER) == 1
        assert await token_registry.emitted_count() == 0
        assert len(event_publisher.events) == 1

    @pytest.mark.asyncio
    async def test_no_voters_rejects_everyone(self) -> None:
        controller = make_controller([])

        assert controller.threshold == 0
        with pytest.raises(NotAVoterError):
            await controller.approve_mint("0xA", OWNER)
        with pytest.raises(NotAVoterError):
            await controller.approve_invalidate("0xA", 0)

    @pytest.mark.asyncio
    async def test_duplicate_voter_round_is_stuck(self) -> None:
        """A voter listed twice fills one slot; unanimity is unreachable."""
        token_registry = TokenRegistryStub()
        controller = make_controller(["0xA", "0xA"], token_registry)

        result = await controller.approve_mint("0xA", OWNER)

        assert result.approval_count == 1
        assert result.threshold == 2
        assert not result.threshold_reached
        with pytest.raises(DuplicateApprovalError):
            await controller.approve_mint("0xA", OWNER)
        assert controller.mint_approval_count(OWNER) == 1
        assert await token_registry.emitted_count() == 0

    @pytest.mark.asyncio
    async def test_owners_have_independent_rounds(
        self, controller: ConsensusControllerService
    ) -> None:
        await controller.approve_mint("0xA", "0xOwner1")
        await controller.approve_mint("0xB", "0xOwner1")

        result = await controller.approve_mint("0xA", "0xOwner2")

        assert result.approval_count == 1
        assert controller.mint_approval_count("0xOwner1") == 2

    @pytest.mark.asyncio
    async def test_registry_failure_rolls_back_completing_approval(self) -> None:
        controller = make_controller(["0xA", "0xB"], FailingIssueRegistry())
        await controller.approve_mint("0xA", OWNER)

        with pytest.raises(RuntimeError, match="ledger unavailable"):
            await controller.approve_mint("0xB", OWNER)

        assert controller.mint_approval_count(OWNER) == 1
        with pytest.raises(DuplicateApprovalError):
            await controller.approve_mint("0xA", OWNER)
        with pytest.raises(RuntimeError):
            await controller.approve_mint("0xB", OWNER)


class TestApproveInvalidate:
    """Invalidate rounds against the in-memory ledger."""

    @pytest.fixture
    async def issued_token(self, token_registry: TokenRegistryStub) -> int:
        return await token_registry.issue(OWNER)

    @pytest.mark.asyncio
    async def test_unanimous_invalidation(
        self,
        controller: ConsensusControllerService,
        token_registry: TokenRegistryStub,
        issued_token: int,
    ) -> None:
        await controller.approve_invalidate("0xA", issued_token)
        await controller.approve_invalidate("0xB", issued_token)
        assert await token_registry.is_valid(issued_token)

        result = await controller.approve_invalidate("0xC", issued_token)

        assert result.threshold_reached
        assert result.approval_count == 0
        assert not await token_registry.is_valid(issued_token)
        assert not await token_registry.has_valid(OWNER)
        assert await token_registry.balance_of(OWNER) == 1

    @pytest.mark.asyncio
    async def test_unknown_token_rolls_back(
        self, controller: ConsensusControllerService
    ) -> None:
        await controller.approve_invalidate("0xA", 99)
        await controller.approve_invalidate("0xB", 99)

        with pytest.raises(UnknownTokenError):
            await controller.approve_invalidate("0xC", 99)

        assert controller.invalidate_approval_count(99) == 2
        with pytest.raises(DuplicateApprovalError):
            await controller.approve_invalidate("0xA", 99)

    @pytest.mark.asyncio
    async def test_non_voter_cannot_touch_existing_round(
        self,
        controller: ConsensusControllerService,
        token_registry: TokenRegistryStub,
        issued_token: int,
    ) -> None:
        await controller.approve_invalidate("0xA", issued_token)
        await controller.approve_invalidate("0xB", issued_token)

        with pytest.raises(NotAVoterError) as exc_info:
            await controller.approve_invalidate("0xEVE", issued_token)

        assert exc_info.value.identity == "0xEVE"
        assert exc_info.value.action == "invalidate"
        assert controller.invalidate_approval_count(issued_token) == 2
        assert await token_registry.is_valid(issued_token)

    @pytest.mark.asyncio
    async def test_already_invalid_token_rolls_back(
        self,
        controller: ConsensusControllerService,
        issued_token: int,
    ) -> None:
        for voter in ("0xA", "0xB", "0xC"):
            await controller.approve_invalidate(voter, issued_token)

        await controller.approve_invalidate("0xA", issued_token)
        await controller.approve_invalidate("0xB", issued_token)
        with pytest.raises(TokenAlreadyInvalidError):
            await controller.approve_invalidate("0xC", issued_token)

        assert controller.invalidate_approval_count(issued_token) == 2

    @pytest.mark.asyncio
    async def test_mint_and_invalidate_rounds_are_independent(
        self,
        controller: ConsensusControllerService,
        issued_token: int,
    ) -> None:
        await controller.approve_mint("0xA", OWNER)

        result = await controller.approve_invalidate("0xA", issued_token)

        assert result.approval_count == 1
        assert controller.mint_approval_count(OWNER) == 1


class TestEvents:
    @pytest.mark.asyncio
    async def test_every_recorded_approval_publishes(
        self,
        controller: ConsensusControllerService,
        event_publisher: EventPublisherStub,
    ) -> None:
        await controller.approve_mint("0xA", OWNER)
        await controller.approve_mint("0xB", OWNER)
        await controller.approve_mint("0xC", OWNER)

        recorded = event_publisher.events_of_type(MintApprovalRecordedEvent.event_type)
        assert [e.approval_count for e in recorded] == [1, 2, 3]
        assert recorded[-1].threshold_reached
        assert recorded[-1].token_id == 0

    @pytest.mark.asyncio
    async def test_issued_event_precedes_approval_event(
        self,
        event_publisher: EventPublisherStub,
        token_registry: TokenRegistryStub,
    ) -> None:
        controller = make_controller(["0xA"], token_registry, event_publisher)

        await controller.approve_mint("0xA", OWNER)

        assert [type(e) for e in event_publisher.events] == [
            BadgeIssuedEvent,
            MintApprovalRecordedEvent,
        ]

    @pytest.mark.asyncio
    async def test_rolled_back_approval_publishes_nothing(
        self, event_publisher: EventPublisherStub
    ) -> None:
        controller = make_controller(["0xA"], event_publisher=event_publisher)

        with pytest.raises(UnknownTokenError):
            await controller.approve_invalidate("0xA", 5)

        assert event_publisher.events_of_type(
            InvalidateApprovalRecordedEvent.event_type
        ) == []

    @pytest.mark.asyncio
    async def test_publish_failure_does_not_fail_approval(self) -> None:
        token_registry = TokenRegistryStub()
        controller = make_controller(
            ["0xA"], token_registry, event_publisher=FailingEventPublisher()
        )

        result = await controller.approve_mint("0xA", OWNER)

        assert result.token_id == 0
        assert await token_registry.balance_of(OWNER) == 1

    @pytest.mark.asyncio
    async def test_publisher_receives_event_objects(self) -> None:
        publisher = AsyncMock()
        controller = make_controller(["0xA", "0xB"], event_publisher=publisher)

        await controller.approve_mint("0xA", OWNER)

        publisher.publish.assert_awaited_once()
        event = publisher.publish.await_args.args[0]
        assert isinstance(event, MintApprovalRecordedEvent)
        assert event.voter == "0xA"


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_concurrent_round_issues_exactly_once(self) -> None:
        token_registry = TokenRegistryStub()
        voters = [f"0xV{i}" for i in range(10)]
        controller = make_controller(voters, token_registry)

        results = await asyncio.gather(
            *(controller.approve_mint(voter, OWNER) for voter in voters)
        )

        assert sum(r.threshold_reached for r in results) == 1
        assert await token_registry.balance_of(OWNER) == 1
        assert controller.mint_approval_count(OWNER) == 0

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_counts_once(
        self, controller: ConsensusControllerService
    ) -> None:
        results = await asyncio.gather(
            controller.approve_mint("0xA", OWNER),
            controller.approve_mint("0xA", OWNER),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], DuplicateApprovalError)
        assert controller.mint_approval_count(OWNER) == 1


class TestNonVoterFootprint:
    @pytest.mark.asyncio
    async def test_rejected_mints_leave_no_per_owner_state(
        self, controller: ConsensusControllerService
    ) -> None:
        for i in range(1000):
            with pytest.raises(NotAVoterError):
                await controller.approve_mint("0xEVE", f"0xOwner{i}")

        tracker = controller._mint_tracker
        assert tracker.tracked_lock_count == 0
        assert not any(tracker.is_tracked(f"0xOwner{i}") for i in range(1000))

    @pytest.mark.asyncio
    async def test_rejected_invalidations_leave_no_per_token_state(
        self, controller: ConsensusControllerService
    ) -> None:
        for token_id in range(1000):
            with pytest.raises(NotAVoterError):
                await controller.approve_invalidate("0xEVE", token_id)

        tracker = controller._invalidate_tracker
        assert tracker.tracked_lock_count == 0
        assert not any(tracker.is_tracked(token_id) for token_id in range(1000))

    @pytest.mark.asyncio
    async def test_completed_rounds_release_locks(
        self, controller: ConsensusControllerService
    ) -> None:
        for voter in ("0xA", "0xB", "0xC"):
            await controller.approve_mint(voter, OWNER)

        assert controller._mint_tracker.tracked_lock_count == 0


class TestReentrantRegistry:
    @pytest.mark.asyncio
    async def test_nested_approval_lands_in_fresh_round(self) -> None:
        token_registry = ReentrantIssueRegistry(nested_voter="0xA")
        controller = make_controller(["0xA", "0xB"], token_registry)
        token_registry.controller = controller
        await controller.approve_mint("0xA", OWNER)

        result = await asyncio.wait_for(
            controller.approve_mint("0xB", OWNER), timeout=2
        )

        assert result.threshold_reached
        assert result.token_id == 0
        assert await token_registry.balance_of(OWNER) == 1
        [nested] = token_registry.nested_results
        assert nested.approval_count == 1
        assert not nested.threshold_reached
        assert controller.mint_approval_count(OWNER) == 1
        with pytest.raises(DuplicateApprovalError):
            await controller.approve_mint("0xA", OWNER)

    @pytest.mark.asyncio
    async def test_failed_issue_keeps_nested_approval(self) -> None:
        token_registry = ReentrantIssueRegistry(nested_voter="0xA", fail=True)
        controller = make_controller(["0xA", "0xB", "0xC"], token_registry)
        token_registry.controller = controller
        await controller.approve_mint("0xA", OWNER)
        await controller.approve_mint("0xB", OWNER)

        with pytest.raises(RuntimeError, match="ledger unavailable"):
            await asyncio.wait_for(controller.approve_mint("0xC", OWNER), timeout=2)

        assert await token_registry.balance_of(OWNER) == 0
        assert controller.mint_approval_count(OWNER) == 2
        with pytest.raises(DuplicateApprovalError):
            await controller.approve_mint("0xB", OWNER)
        assert controller._mint_tracker.tracked_lock_count == 0

    @pytest.mark.asyncio
    async def test_failed_issue_with_completing_voter_nested(self) -> None:
        token_registry = ReentrantIssueRegistry(nested_voter="0xB", fail=True)
        controller = make_controller(["0xA", "0xB"], token_registry)
        token_registry.controller = controller
        await controller.approve_mint("0xA", OWNER)

        with pytest.raises(RuntimeError, match="ledger unavailable"):
            await asyncio.wait_for(controller.approve_mint("0xB", OWNER), timeout=2)

        assert controller.mint_approval_count(OWNER) == 1
        assert await token_registry.emitted_count() == 0


class TestSupportsInterface:
    def test_controller_and_registry_capabilities(
        self, controller: ConsensusControllerService
    ) -> None:
        for interface_id in (
            INTROSPECTION_INTERFACE,
            BADGE_CONSENSUS_INTERFACE,
            BADGE_REGISTRY_INTERFACE,
            BADGE_METADATA_INTERFACE,
            BADGE_ENUMERABLE_INTERFACE,
        ):
            assert controller.supports_interface(interface_id)

    def test_in_memory_stack_declares_every_capability(
        self, controller: ConsensusControllerService
    ) -> None:
        assert controller.supported_interfaces() == ALL_INTERFACES

    def test_unknown_capability(self, controller: ConsensusControllerService) -> None:
        assert not controller.supports_interface("badge.delegate.v1")
        assert not controller.supports_interface("")
