"""In-memory token registry (badge ledger).

Implements TokenRegistryProtocol and BadgeQueryProtocol for development and
testing. Follows the DEV_MODE_WATERMARK pattern for dev stubs.

Ledger rules:
- Token ids are sequential, starting at 0
- Badges are issued valid, never change owner and are never deleted
- Invalidation fails for unknown ids and for already-invalid badges
- Content lives off-system; token_uri() is base_uri + token id

WARNING: This is a development stub. Not for production use.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from structlog import get_logger

from badge_consensus.application.ports.event_publisher import EventPublisherProtocol
from badge_consensus.application.ports.token_registry import (
    BadgeQueryProtocol,
    TokenRegistryProtocol,
)
from badge_consensus.domain.errors import TokenAlreadyInvalidError, UnknownTokenError
from badge_consensus.domain.events.badge import BadgeInvalidatedEvent, BadgeIssuedEvent
from badge_consensus.domain.models.badge import Badge
from badge_consensus.domain.models.interfaces import (
    BADGE_ENUMERABLE_INTERFACE,
    BADGE_METADATA_INTERFACE,
    BADGE_REGISTRY_INTERFACE,
    INTROSPECTION_INTERFACE,
)

# DEV_MODE_WATERMARK per dev stub convention
DEV_MODE_WATERMARK: str = "DEV_STUB:TokenRegistryStub:v1"

logger = get_logger(__name__)


class TokenRegistryStub(TokenRegistryProtocol, BadgeQueryProtocol):
    """In-memory badge ledger.

    Thread-safety: Uses an asyncio Lock for mutations.

    Attributes:
        _badges: Badges in issuance order; index == token id.
        _owned: Token ids per owner in issuance order.
        _lock: Async lock guarding mutations.
    """

    def __init__(
        self,
        name: str = "Badge Registry",
        symbol: str = "BADGE",
        base_uri: str = "",
        event_publisher: EventPublisherProtocol | None = None,
    ) -> None:
        """Initialize an empty ledger.

        Args:
            name: Registry display name.
            symbol: Registry symbol.
            base_uri: Prefix of badge content locators.
            event_publisher: Optional sink for issued/invalidated events.
        """
        self._name = name
        self._symbol = symbol
        self._base_uri = base_uri
        self._event_publisher = event_publisher
        self._badges: list[Badge] = []
        self._owned: dict[str, list[int]] = {}
        self._lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    def supported_interfaces(self) -> frozenset[str]:
        """Capabilities of the in-memory ledger."""
        return frozenset(
            {
                INTROSPECTION_INTERFACE,
                BADGE_REGISTRY_INTERFACE,
                BADGE_METADATA_INTERFACE,
                BADGE_ENUMERABLE_INTERFACE,
            }
        )

    async def issue(self, owner: str) -> int:
        """Create a new valid badge owned by owner.

        Args:
            owner: Identity receiving the badge.

        Returns:
            The new token id.

        Raises:
            ValueError: If owner is empty.
        """
        if not owner:
            raise ValueError("owner must not be empty")

        async with self._lock:
            token_id = len(self._badges)
            issued_at = datetime.now(timezone.utc)
            self._badges.append(
                Badge(token_id=token_id, owner=owner, issued_at=issued_at)
            )
            self._owned.setdefault(owner, []).append(token_id)

        logger.info("badge_issued", token_id=token_id, owner=owner)
        await self._publish(
            BadgeIssuedEvent(token_id=token_id, owner=owner, issued_at=issued_at)
        )
        return token_id

    async def invalidate(self, token_id: int) -> None:
        """Mark an existing badge invalid.

        Args:
            token_id: The badge to invalidate.

        Raises:
            UnknownTokenError: If token_id does not exist.
            TokenAlreadyInvalidError: If the badge is already invalid.
        """
        async with self._lock:
            badge = self._get(token_id)
            if not badge.valid:
                raise TokenAlreadyInvalidError(token_id)
            invalidated_at = datetime.now(timezone.utc)
            self._badges[token_id] = badge.invalidated(invalidated_at)

        logger.info("badge_invalidated", token_id=token_id, owner=badge.owner)
        await self._publish(
            BadgeInvalidatedEvent(
                token_id=token_id,
                owner=badge.owner,
                invalidated_at=invalidated_at,
            )
        )

    async def get_badge(self, token_id: int) -> Badge:
        """Get a badge by id.

        Raises:
            UnknownTokenError: If token_id does not exist.
        """
        return self._get(token_id)

    async def owner_of(self, token_id: int) -> str:
        """Owner of a badge.

        Raises:
            UnknownTokenError: If token_id does not exist.
        """
        return self._get(token_id).owner

    async def is_valid(self, token_id: int) -> bool:
        """Whether a badge is still valid.

        Raises:
            UnknownTokenError: If token_id does not exist.
        """
        return self._get(token_id).valid

    async def balance_of(self, owner: str) -> int:
        """Number of badges (valid or not) held by owner."""
        return len(self._owned.get(owner, []))

    async def has_valid(self, owner: str) -> bool:
        """Whether owner holds at least one valid badge."""
        return any(self._badges[t].valid for t in self._owned.get(owner, []))

    async def token_uri(self, token_id: int) -> str:
        """Locator of the off-system badge content.

        Raises:
            UnknownTokenError: If token_id does not exist.
        """
        self._get(token_id)
        return f"{self._base_uri}{token_id}"

    async def tokens_of_owner(self, owner: str) -> list[int]:
        """Token ids held by owner in issuance order."""
        return list(self._owned.get(owner, []))

    async def token_of_owner_by_index(self, owner: str, index: int) -> int:
        """The index-th badge of owner.

        Raises:
            IndexError: If owner holds no badge at index.
        """
        owned = self._owned.get(owner, [])
        if not 0 <= index < len(owned):
            raise IndexError(f"{owner!r} has no badge at index {index}")
        return owned[index]

    async def token_by_index(self, index: int) -> int:
        """The index-th badge ever issued.

        Raises:
            IndexError: If fewer than index + 1 badges were issued.
        """
        if not 0 <= index < len(self._badges):
            raise IndexError(f"no badge at index {index}")
        return self._badges[index].token_id

    async def emitted_count(self) -> int:
        """Total badges ever issued."""
        return len(self._badges)

    async def holders_count(self) -> int:
        """Number of distinct identities holding at least one badge."""
        return len(self._owned)

    def _get(self, token_id: int) -> Badge:
        if not 0 <= token_id < len(self._badges):
            raise UnknownTokenError(token_id)
        return self._badges[token_id]

    async def _publish(self, event: BadgeIssuedEvent | BadgeInvalidatedEvent) -> None:
        if self._event_publisher is None:
            return
        try:
            await self._event_publisher.publish(event)
        except Exception as e:
            # Ledger already mutated; events are informational
            logger.error(
                "badge_event_publish_failed",
                event_type=event.event_type,
                error=str(e),
                error_type=type(e).__name__,
            )
