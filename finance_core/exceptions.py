"""Domain-specific exceptions for the finance tracker core services."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class MissingFieldError(ValidationError):
    """Raised when a required field such as category or date is absent."""


class NotFoundError(LookupError):
    """Raised when a category or date filter matches no expenses."""


class ExportError(IOError):
    """Raised when a spreadsheet export cannot be written to disk."""
