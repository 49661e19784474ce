"""Badge registry API response models."""

from pydantic import BaseModel


class BadgeResponse(BaseModel):
    """A single badge.

    Attributes:
        token_id: Badge identifier.
        owner: Identity holding the badge.
        valid: False once invalidated.
        token_uri: Locator of the off-system badge content.
    """

    token_id: int
    owner: str
    valid: bool
    token_uri: str


class OwnerBadgesResponse(BaseModel):
    """Badges held by one identity.

    Attributes:
        owner: The identity queried.
        balance: Number of badges held, valid or not.
        has_valid: Whether at least one badge is valid.
        token_ids: Badge ids in issuance order.
    """

    owner: str
    balance: int
    has_valid: bool
    token_ids: list[int]


class RegistryResponse(BaseModel):
    """Registry metadata and enumeration counters."""

    name: str
    symbol: str
    emitted_count: int
    holders_count: int


class InterfaceSupportResponse(BaseModel):
    """Capability query result."""

    interface_id: str
    supported: bool
