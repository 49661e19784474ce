"""Configuration module for badge consensus.

Available Configurations:
- ConsensusConfig: Voter set and badge registry settings
"""

from badge_consensus.config.consensus_config import (
    DEFAULT_CONSENSUS_CONFIG,
    TEST_CONSENSUS_CONFIG,
    ConsensusConfig,
)

__all__ = [
    "ConsensusConfig",
    "DEFAULT_CONSENSUS_CONFIG",
    "TEST_CONSENSUS_CONFIG",
]
