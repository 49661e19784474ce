"""Base exception classes for the badge consensus domain layer."""


class BadgeConsensusError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the application.

    Subclasses:
    - NotAVoterError
    - DuplicateApprovalError
    - DuplicateVoterError
    - UnknownTokenError
    - TokenAlreadyInvalidError
    - ConfigurationError
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
