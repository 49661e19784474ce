"""Configuration errors."""

from badge_consensus.domain.exceptions import BadgeConsensusError


class ConfigurationError(BadgeConsensusError):
    """Raised when service configuration is invalid.

    Startup fails rather than running with a misconfigured voter set.
    """

    pass
