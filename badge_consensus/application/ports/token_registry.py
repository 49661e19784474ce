"""Token registry port interface.

Defines the protocols for the badge ledger the consensus controller drives.
Follows hexagonal architecture with port/adapter pattern: the controller only
depends on TokenRegistryProtocol, the HTTP read endpoints on
BadgeQueryProtocol.

Contract:
- issue() creates a new valid badge and is safe to call repeatedly for the
  same owner (each call yields a distinct token id)
- invalidate() fails loudly for unknown ids instead of silently succeeding
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from badge_consensus.domain.models.badge import Badge


class TokenRegistryProtocol(Protocol):
    """Protocol for the badge ledger mutations gated by consensus.

    Methods:
        issue: Create a new badge for an owner.
        invalidate: Mark an existing badge invalid.
        supported_interfaces: Capability identifiers the ledger declares.
    """

    @abstractmethod
    async def issue(self, owner: str) -> int:
        """Create a new valid badge owned by owner.

        Args:
            owner: Identity receiving the badge.

        Returns:
            The new token id.
        """
        ...

    @abstractmethod
    async def invalidate(self, token_id: int) -> None:
        """Mark an existing badge invalid.

        Args:
            token_id: The badge to invalidate.

        Raises:
            UnknownTokenError: If token_id does not exist.
            TokenAlreadyInvalidError: If the badge is already invalid.
        """
        ...

    @abstractmethod
    def supported_interfaces(self) -> frozenset[str]:
        """Capability identifiers the ledger supports."""
        ...


class BadgeQueryProtocol(Protocol):
    """Read-only protocol over the badge ledger."""

    @property
    def name(self) -> str:
        """Registry display name."""
        ...

    @property
    def symbol(self) -> str:
        """Registry symbol."""
        ...

    async def get_badge(self, token_id: int) -> Badge:
        """Get a badge by id.

        Raises:
            UnknownTokenError: If token_id does not exist.
        """
        ...

    async def balance_of(self, owner: str) -> int:
        """Number of badges (valid or not) held by owner."""
        ...

    async def has_valid(self, owner: str) -> bool:
        """Whether owner holds at least one valid badge."""
        ...

    async def token_uri(self, token_id: int) -> str:
        """Locator of the off-system badge content.

        Raises:
            UnknownTokenError: If token_id does not exist.
        """
        ...

    async def tokens_of_owner(self, owner: str) -> list[int]:
        """Token ids held by owner in issuance order."""
        ...

    async def emitted_count(self) -> int:
        """Total badges ever issued."""
        ...

    async def holders_count(self) -> int:
        """Number of distinct identities holding at least one badge."""
        ...
