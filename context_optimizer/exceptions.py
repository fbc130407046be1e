"""Custom exceptions for the context optimizer."""


class ContextOptimizerError(Exception):
    """Base exception for all context optimizer errors."""

    pass


class InvalidRuleError(ContextOptimizerError, ValueError):
    """Exception raised when a rule record cannot be turned into a usable rule."""

    def __init__(self, message: str, errors: list[str] | None = None):
        """
        Initialize invalid rule error.

        Args:
            message: Error message
            errors: Individual validation problems
        """
        super().__init__(message)
        self.errors = errors or [message]


class ContentTooLargeError(ContextOptimizerError):
    """Exception raised when submitted content exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Content is {size} bytes; the limit is {limit} bytes")
        self.size = size
        self.limit = limit
