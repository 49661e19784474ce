"""Consensus service configuration.

This module defines the voter set and badge registry settings with
environment variable overrides.

Environment Variables:
- CONSENSUS_VOTERS: Comma-separated voter identities in enumeration order
  (default: empty, which leaves the registry inert)
- CONSENSUS_REJECT_DUPLICATE_VOTERS: Refuse voter lists with repeated
  identities instead of keeping every entry as a slot (default: false)
- BADGE_REGISTRY_NAME: Registry display name (default: "Badge Registry")
- BADGE_REGISTRY_SYMBOL: Registry symbol (default: "BADGE")
- BADGE_BASE_URI: Prefix of badge content locators (default: empty)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from badge_consensus.domain.errors import ConfigurationError
from badge_consensus.domain.models.voter_registry import VoterRegistry

DEFAULT_REGISTRY_NAME = "Badge Registry"
DEFAULT_REGISTRY_SYMBOL = "BADGE"

# Values accepted as true for boolean environment variables
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set.

    Returns:
        Parsed boolean value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def _get_list_env(key: str) -> tuple[str, ...]:
    """Get comma-separated environment variable as a tuple.

    Blank entries are dropped; order and repeats are kept.

    Args:
        key: Environment variable name.

    Returns:
        Tuple of stripped, non-empty entries.
    """
    value = os.environ.get(key, "")
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class ConsensusConfig:
    """Configuration for the consensus controller and badge registry.

    Attributes:
        voters: Voter identities in enumeration order, one entry per slot.
        reject_duplicate_voters: Refuse repeated identities at startup.
                                Default: False (repeats become extra slots
                                and make unanimity unreachable).
        registry_name: Registry display name.
        registry_symbol: Registry symbol.
        base_uri: Prefix of badge content locators.
    """

    voters: tuple[str, ...] = ()
    reject_duplicate_voters: bool = False
    registry_name: str = DEFAULT_REGISTRY_NAME
    registry_symbol: str = DEFAULT_REGISTRY_SYMBOL
    base_uri: str = ""

    def __post_init__(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigurationError: If any value is invalid.
        """
        if not isinstance(self.voters, tuple):
            raise ConfigurationError(
                f"voters must be a tuple, got {type(self.voters).__name__}"
            )
        if any(not voter for voter in self.voters):
            raise ConfigurationError("voter identities must not be empty")
        if not self.registry_name:
            raise ConfigurationError("registry_name must not be empty")
        if not self.registry_symbol:
            raise ConfigurationError("registry_symbol must not be empty")

    def build_voter_registry(self) -> VoterRegistry:
        """Build the voter registry this configuration describes.

        Returns:
            A VoterRegistry over voters.

        Raises:
            DuplicateVoterError: If reject_duplicate_voters is set and voters
                repeats an identity.
        """
        return VoterRegistry.from_iterable(
            self.voters, reject_duplicates=self.reject_duplicate_voters
        )

    @classmethod
    def from_environment(cls) -> ConsensusConfig:
        """Create config from environment variables with defaults.

        Returns:
            ConsensusConfig with values from environment or defaults.

        Raises:
            ConfigurationError: If a value is invalid.
        """
        return cls(
            voters=_get_list_env("CONSENSUS_VOTERS"),
            reject_duplicate_voters=_get_bool_env(
                "CONSENSUS_REJECT_DUPLICATE_VOTERS", False
            ),
            registry_name=os.environ.get("BADGE_REGISTRY_NAME", DEFAULT_REGISTRY_NAME),
            registry_symbol=os.environ.get(
                "BADGE_REGISTRY_SYMBOL", DEFAULT_REGISTRY_SYMBOL
            ),
            base_uri=os.environ.get("BADGE_BASE_URI", ""),
        )


# Pre-defined configurations for common use cases

# Inert default: no voters, nothing can ever be approved
DEFAULT_CONSENSUS_CONFIG = ConsensusConfig()

# Three distinct voters for tests and local development
TEST_CONSENSUS_CONFIG = ConsensusConfig(
    voters=("0xA11CE", "0xB0B", "0xCA201"),
    reject_duplicate_voters=True,
    base_uri="https://badges.example/",
)
