"""Consensus API routes.

FastAPI router for unanimous mint and invalidate approvals.

Every registered voter must approve the same target within one round
before the badge registry is touched. The completing approval triggers the
registry call inside the same request; the response reports whether it did.

Error mapping (RFC 7807 bodies):
- NotAVoterError -> 403
- DuplicateApprovalError -> 409
- UnknownTokenError -> 404 (invalidate round completed for an unknown id)
- TokenAlreadyInvalidError -> 409 (invalidate round completed for an
  invalid badge)
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from badge_consensus.api.dependencies.consensus import get_consensus_controller
from badge_consensus.api.models.consensus import (
    ApprovalCountResponse,
    ConsensusErrorResponse,
    InvalidateApprovalRequest,
    InvalidateApprovalResponse,
    MintApprovalRequest,
    MintApprovalResponse,
    VotersResponse,
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

router = APIRouter(prefix="/v1/consensus", tags=["consensus"])


def _problem(error: Exception, request: Request) -> HTTPException:
    """Build an HTTPException carrying the error's RFC 7807 body."""
    detail = error.to_rfc7807_dict()
    detail["instance"] = str(request.url)
    return HTTPException(status_code=detail["status"], detail=detail)


@router.get(
    "/voters",
    response_model=VotersResponse,
    summary="List voters",
    description="Registered voter identities in order, duplicates included.",
)
async def list_voters(
    controller: ConsensusControllerService = Depends(get_consensus_controller),
) -> VotersResponse:
    """List voters and the unanimity threshold."""
    return VotersResponse(
        voters=list(controller.voters()),
        threshold=controller.threshold,
    )


@router.post(
    "/mint-approvals",
    response_model=MintApprovalResponse,
    status_code=201,
    responses={
        403: {"model": ConsensusErrorResponse, "description": "Caller is not a voter"},
        409: {
            "model": ConsensusErrorResponse,
            "description": "Voter already approved this owner in the current round",
        },
    },
    summary="Approve issuing a badge",
)
async def approve_mint(
    request_data: MintApprovalRequest,
    request: Request,
    controller: ConsensusControllerService = Depends(get_consensus_controller),
) -> MintApprovalResponse:
    """Record a mint approval for an owner.

    Args:
        request_data: Voter and candidate owner.
        request: FastAPI request for error context.
        controller: Injected consensus controller.

    Returns:
        MintApprovalResponse; token_id is set when this approval issued a badge.

    Raises:
        HTTPException 403: Caller is not a voter
        HTTPException 409: Duplicate approval in the current round
    """
    try:
        result = await controller.approve_mint(
            voter=request_data.voter,
            owner=request_data.owner,
        )
    except (NotAVoterError, DuplicateApprovalError) as e:
        raise _problem(e, request) from None

    return MintApprovalResponse(
        voter=result.voter,
        owner=result.owner,
        approval_count=result.approval_count,
        threshold=result.threshold,
        threshold_reached=result.threshold_reached,
        token_id=result.token_id,
        recorded_at=result.recorded_at,
    )


@router.get(
    "/mint-approvals/{owner}",
    response_model=ApprovalCountResponse,
    summary="Mint round progress",
)
async def get_mint_approvals(
    owner: str,
    controller: ConsensusControllerService = Depends(get_consensus_controller),
) -> ApprovalCountResponse:
    """Approvals recorded for issuing to owner in the current round."""
    return ApprovalCountResponse(
        target=owner,
        approval_count=controller.mint_approval_count(owner),
        threshold=controller.threshold,
    )


@router.post(
    "/invalidate-approvals",
    response_model=InvalidateApprovalResponse,
    status_code=201,
    responses={
        403: {"model": ConsensusErrorResponse, "description": "Caller is not a voter"},
        404: {
            "model": ConsensusErrorResponse,
            "description": "Round completed for a badge that does not exist",
        },
        409: {
            "model": ConsensusErrorResponse,
            "description": "Duplicate approval, or badge already invalid",
        },
    },
    summary="Approve invalidating a badge",
)
async def approve_invalidate(
    request_data: InvalidateApprovalRequest,
    request: Request,
    controller: ConsensusControllerService = Depends(get_consensus_controller),
) -> InvalidateApprovalResponse:
    """Record an invalidate approval for a badge.

    When the completing approval is rejected by the registry, the approval
    is not recorded and the round keeps its earlier approvals.

    Raises:
        HTTPException 403: Caller is not a voter
        HTTPException 404: Unknown badge (on the completing approval)
        HTTPException 409: Duplicate approval, or badge already invalid
    """
    try:
        result = await controller.approve_invalidate(
            voter=request_data.voter,
            token_id=request_data.token_id,
        )
    except (
        NotAVoterError,
        DuplicateApprovalError,
        UnknownTokenError,
        TokenAlreadyInvalidError,
    ) as e:
        raise _problem(e, request) from None

    return InvalidateApprovalResponse(
        voter=result.voter,
        token_id=result.token_id,
        approval_count=result.approval_count,
        threshold=result.threshold,
        threshold_reached=result.threshold_reached,
        recorded_at=result.recorded_at,
    )


@router.get(
    "/invalidate-approvals/{token_id}",
    response_model=ApprovalCountResponse,
    summary="Invalidate round progress",
)
async def get_invalidate_approvals(
    token_id: int,
    controller: ConsensusControllerService = Depends(get_consensus_controller),
) -> ApprovalCountResponse:
    """Approvals recorded for invalidating token_id in the current round."""
    return ApprovalCountResponse(
        target=token_id,
        approval_count=controller.invalidate_approval_count(token_id),
        threshold=controller.threshold,
    )
