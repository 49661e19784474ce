"""Badge ledger event payloads.

Published by the token registry when it mutates the ledger:
- BadgeIssuedEvent: A new valid badge was created for an owner
- BadgeInvalidatedEvent: An existing badge moved to the invalid state
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

BADGE_ISSUED_EVENT_TYPE: str = "badge.issued"
BADGE_INVALIDATED_EVENT_TYPE: str = "badge.invalidated"

BADGE_EVENT_SCHEMA_VERSION: str = "1.0.0"


@dataclass(frozen=True, eq=True)
class BadgeIssuedEvent:
    """Payload for badge issuance.

    Attributes:
        token_id: Identifier of the new badge.
        owner: Identity holding the badge.
        issued_at: UTC timestamp of issuance.
    """

    event_type: ClassVar[str] = BADGE_ISSUED_EVENT_TYPE

    token_id: int
    owner: str
    issued_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert payload to dict for event storage."""
        return {
            "token_id": self.token_id,
            "owner": self.owner,
            "issued_at": self.issued_at.isoformat(),
            "schema_version": BADGE_EVENT_SCHEMA_VERSION,
        }


@dataclass(frozen=True, eq=True)
class BadgeInvalidatedEvent:
    """Payload for badge invalidation.

    Attributes:
        token_id: Identifier of the invalidated badge.
        owner: Identity holding the badge.
        invalidated_at: UTC timestamp of invalidation.
    """

    event_type: ClassVar[str] = BADGE_INVALIDATED_EVENT_TYPE

    token_id: int
    owner: str
    invalidated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert payload to dict for event storage."""
        return {
            "token_id": self.token_id,
            "owner": self.owner,
            "invalidated_at": self.invalidated_at.isoformat(),
            "schema_version": BADGE_EVENT_SCHEMA_VERSION,
        }
