"""Consensus API request/response models.

Pydantic models for the approval endpoints and the voter listing.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, PlainSerializer

# ISO 8601 with Z suffix
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class VotersResponse(BaseModel):
    """Registered voters and the unanimity threshold.

    Attributes:
        voters: Voter identities in enumeration order (duplicates included).
        threshold: Approvals required to complete a round.
    """

    voters: list[str]
    threshold: int


class MintApprovalRequest(BaseModel):
    """Request to approve issuing a badge.

    Attributes:
        voter: Identity of the approving caller.
        owner: Candidate owner of the new badge.
    """

    voter: str = Field(..., min_length=1, description="Approving caller identity")
    owner: str = Field(..., min_length=1, description="Candidate badge owner")


class MintApprovalResponse(BaseModel):
    """Response after a recorded mint approval.

    Attributes:
        voter: The approving voter.
        owner: Candidate owner of the badge.
        approval_count: Approvals in the current round after this action
            (0 when the round completed).
        threshold: Approvals required to issue.
        threshold_reached: Whether this approval issued a badge.
        token_id: The issued badge, if any.
        recorded_at: When the approval was recorded.
    """

    voter: str
    owner: str
    approval_count: int
    threshold: int
    threshold_reached: bool
    token_id: int | None = None
    recorded_at: DateTimeWithZ


class InvalidateApprovalRequest(BaseModel):
    """Request to approve invalidating a badge.

    Attributes:
        voter: Identity of the approving caller.
        token_id: The badge to invalidate.
    """

    voter: str = Field(..., min_length=1, description="Approving caller identity")
    token_id: int = Field(..., ge=0, description="Badge to invalidate")


class InvalidateApprovalResponse(BaseModel):
    """Response after a recorded invalidate approval."""

    voter: str
    token_id: int
    approval_count: int
    threshold: int
    threshold_reached: bool
    recorded_at: DateTimeWithZ


class ApprovalCountResponse(BaseModel):
    """Progress of the current round for one target.

    Attributes:
        target: Candidate owner or token id.
        approval_count: Approvals recorded in the current round.
        threshold: Approvals required to complete the round.
    """

    target: str | int
    approval_count: int
    threshold: int


class ConsensusErrorResponse(BaseModel):
    """RFC 7807 error response for consensus endpoints."""

    type: str
    title: str
    status: int
    detail: str
    instance: str | None = None
