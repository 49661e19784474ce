"""Badge registry read routes.

Read-only views of the ledger plus capability introspection. Badges are
only ever created or invalidated through the consensus routes.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from badge_consensus.api.dependencies.consensus import (
    get_badge_query,
    get_consensus_controller,
)
from badge_consensus.api.models.badge import (
    BadgeResponse,
    InterfaceSupportResponse,
    OwnerBadgesResponse,
    RegistryResponse,
)
from badge_consensus.api.models.consensus import ConsensusErrorResponse
from badge_consensus.application.ports.token_registry import BadgeQueryProtocol
from badge_consensus.application.services.consensus_controller_service import (
    ConsensusControllerService,
)
from badge_consensus.domain.errors import UnknownTokenError

router = APIRouter(prefix="/v1", tags=["badges"])


@router.get(
    "/badges/{token_id}",
    response_model=BadgeResponse,
    responses={404: {"model": ConsensusErrorResponse, "description": "Unknown badge"}},
    summary="Get a badge",
)
async def get_badge(
    token_id: int,
    request: Request,
    registry: BadgeQueryProtocol = Depends(get_badge_query),
) -> BadgeResponse:
    """Get a badge with its validity and content locator.

    Raises:
        HTTPException 404: No badge with this id
    """
    try:
        badge = await registry.get_badge(token_id)
        token_uri = await registry.token_uri(token_id)
    except UnknownTokenError as e:
        detail = e.to_rfc7807_dict()
        detail["instance"] = str(request.url)
        raise HTTPException(status_code=404, detail=detail) from None

    return BadgeResponse(
        token_id=badge.token_id,
        owner=badge.owner,
        valid=badge.valid,
        token_uri=token_uri,
    )


@router.get(
    "/owners/{owner}/badges",
    response_model=OwnerBadgesResponse,
    summary="Badges of an owner",
)
async def get_owner_badges(
    owner: str,
    registry: BadgeQueryProtocol = Depends(get_badge_query),
) -> OwnerBadgesResponse:
    """Balance, validity and badge ids of owner. Unknown owners hold nothing."""
    return OwnerBadgesResponse(
        owner=owner,
        balance=await registry.balance_of(owner),
        has_valid=await registry.has_valid(owner),
        token_ids=await registry.tokens_of_owner(owner),
    )


@router.get("/registry", response_model=RegistryResponse, summary="Registry metadata")
async def get_registry(
    registry: BadgeQueryProtocol = Depends(get_badge_query),
) -> RegistryResponse:
    return RegistryResponse(
        name=registry.name,
        symbol=registry.symbol,
        emitted_count=await registry.emitted_count(),
        holders_count=await registry.holders_count(),
    )


@router.get(
    "/interfaces/{interface_id}",
    response_model=InterfaceSupportResponse,
    summary="Capability query",
)
async def supports_interface(
    interface_id: str,
    controller: ConsensusControllerService = Depends(get_consensus_controller),
) -> InterfaceSupportResponse:
    """Whether the controller or its registry supports interface_id."""
    return InterfaceSupportResponse(
        interface_id=interface_id,
        supported=controller.supports_interface(interface_id),
    )
