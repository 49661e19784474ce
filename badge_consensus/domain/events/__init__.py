"""
Domain events for badge consensus.

Informational events published after approval actions and ledger
mutations commit. All events are immutable and timestamped.
"""

from badge_consensus.domain.events.badge import BadgeInvalidatedEvent, BadgeIssuedEvent
from badge_consensus.domain.events.consensus import (
    InvalidateApprovalRecordedEvent,
    MintApprovalRecordedEvent,
)

__all__: list[str] = [
    "BadgeInvalidatedEvent",
    "BadgeIssuedEvent",
    "InvalidateApprovalRecordedEvent",
    "MintApprovalRecordedEvent",
]
