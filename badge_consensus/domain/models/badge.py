"""Badge domain model.

A badge is a non-transferable record owned by exactly one identity. It is
created valid by issuance and can only move to the invalid state; badges are
never deleted and never change owner.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime


@dataclass(frozen=True, eq=True)
class Badge:
    """A badge record in the token registry.

    Attributes:
        token_id: Sequential identifier assigned at issuance.
        owner: Identity holding the badge.
        valid: False once the badge has been invalidated.
        issued_at: UTC timestamp of issuance.
        invalidated_at: UTC timestamp of invalidation, if any.
    """

    token_id: int
    owner: str
    valid: bool = True
    issued_at: datetime | None = None
    invalidated_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate badge fields.

        Raises:
            ValueError: If token_id is negative or owner is empty.
        """
        if self.token_id < 0:
            raise ValueError(f"token_id must be non-negative, got {self.token_id}")
        if not self.owner:
            raise ValueError("owner must not be empty")

    def invalidated(self, at: datetime) -> Badge:
        """Return the invalidated copy of this badge."""
        return replace(self, valid=False, invalidated_at=at)
