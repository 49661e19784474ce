"""Token registry errors.

Raised by the badge ledger when a mutation targets a token it cannot act on.
The consensus controller never catches these; they propagate to the caller
unchanged and the approval that triggered the call is rolled back.
"""

from __future__ import annotations

from badge_consensus.domain.exceptions import BadgeConsensusError


class TokenRegistryError(BadgeConsensusError):
    """Base error for badge ledger operations."""

    pass


class UnknownTokenError(TokenRegistryError):
    """Raised when a token identifier does not exist in the registry.

    HTTP Status: 404 Not Found

    Attributes:
        token_id: The identifier that was not found.
    """

    def __init__(self, token_id: int) -> None:
        """Initialize the error.

        Args:
            token_id: The identifier that was not found.
        """
        self.token_id = token_id
        super().__init__(f"Token {token_id} does not exist")

    def to_rfc7807_dict(self) -> dict:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary conforming to RFC 7807 problem details.
        """
        return {
            "type": "urn:badge-consensus:registry:unknown-token",
            "title": "Unknown Token",
            "status": 404,
            "detail": str(self),
            "token_id": self.token_id,
        }


class TokenAlreadyInvalidError(TokenRegistryError):
    """Raised when invalidating a token that is already invalid.

    HTTP Status: 409 Conflict

    Attributes:
        token_id: The token that is already invalid.
    """

    def __init__(self, token_id: int) -> None:
        """Initialize the error.

        Args:
            token_id: The token that is already invalid.
        """
        self.token_id = token_id
        super().__init__(f"Token {token_id} is already invalid")

    def to_rfc7807_dict(self) -> dict:
        """Serialize to RFC 7807 problem details format.

        Returns:
            Dictionary conforming to RFC 7807 problem details.
        """
        return {
            "type": "urn:badge-consensus:registry:already-invalid",
            "title": "Token Already Invalid",
            "status": 409,
            "detail": str(self),
            "token_id": self.token_id,
        }
