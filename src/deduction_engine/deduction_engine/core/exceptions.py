class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class SourceReadError(DomainError):
    """Raised when one of the source tables cannot be read; aborts the whole run."""


class MailDeliveryError(DomainError):
    """Raised when the mail service rejects or cannot receive a message."""
