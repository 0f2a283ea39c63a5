"""Custom exceptions for the Sanctify AI proxy."""


class SanctifyError(Exception):
    """Base exception for all proxy errors."""

    def __init__(self, message: str = "An error occurred") -> None:
        """Initialize exception with message.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(self.message)


class ValidationError(SanctifyError):
    """Request or configuration data failed validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize validation error.

        Args:
            message: Validation error message
            field: Optional field name that failed validation
        """
        self.field = field
        super().__init__(message)


class ConfigurationError(SanctifyError):
    """Configuration or environment error."""

    def __init__(self, message: str, config_key: str | None = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Optional configuration key that caused the error
        """
        self.config_key = config_key
        super().__init__(message)


class ModelResponseError(SanctifyError):
    """The model call succeeded but produced no usable answer."""
