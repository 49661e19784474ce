"""Capability identifiers.

Integrators detect which extensions a registry supports by querying these
identifiers instead of attempting a call first.
"""

from __future__ import annotations

# Capability query itself
INTROSPECTION_INTERFACE: str = "capability.introspection.v1"

# Base badge ledger: balance, owner, validity
BADGE_REGISTRY_INTERFACE: str = "badge.registry.v1"

# Name, symbol and content locator
BADGE_METADATA_INTERFACE: str = "badge.metadata.v1"

# Emitted/holder counts and index lookups
BADGE_ENUMERABLE_INTERFACE: str = "badge.enumerable.v1"

# Unanimous approval of issuance and invalidation
BADGE_CONSENSUS_INTERFACE: str = "badge.consensus.v1"

ALL_INTERFACES: frozenset[str] = frozenset(
    {
        INTROSPECTION_INTERFACE,
        BADGE_REGISTRY_INTERFACE,
        BADGE_METADATA_INTERFACE,
        BADGE_ENUMERABLE_INTERFACE,
        BADGE_CONSENSUS_INTERFACE,
    }
)
