"""Domain errors for badge consensus.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from BadgeConsensusError.
"""

from badge_consensus.domain.errors.configuration import ConfigurationError
from badge_consensus.domain.errors.consensus import (
    ConsensusError,
    DuplicateApprovalError,
    DuplicateVoterError,
    NotAVoterError,
)
from badge_consensus.domain.errors.token_registry import (
    TokenAlreadyInvalidError,
    TokenRegistryError,
    UnknownTokenError,
)

__all__: list[str] = [
    "ConfigurationError",
    "ConsensusError",
    "DuplicateApprovalError",
    "DuplicateVoterError",
    "NotAVoterError",
    "TokenAlreadyInvalidError",
    "TokenRegistryError",
    "UnknownTokenError",
]
