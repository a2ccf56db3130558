"""Base exception classes for the tech radar domain layer."""


class RadarError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so that
    the service and API layers can tell rule violations apart from
    collaborator failures.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
