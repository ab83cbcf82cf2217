"""Custom domain exceptions for the application."""

from premium_service.domain.transfer_eligibility import RejectionReason

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
MALFORMED_IDENTIFIER = "MALFORMED_IDENTIFIER"
STORE_FAILURE = "STORE_FAILURE"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when attempting to create a resource that already exists."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail."""

    pass


class MalformedIdentifierError(DomainValidationError):
    """Raised when a guild identifier is not an unsigned decimal integer."""

    def __init__(self, value: str):
        super().__init__(f"Invalid guild id: {value!r}")
        self.value = value


class TransferRejectedError(DomainError):
    """Raised when a premium transfer or grant fails an eligibility rule.

    The rejection reason is kept on the exception so callers can branch on it
    without parsing the message.
    """

    def __init__(self, reason: RejectionReason):
        super().__init__(reason.message)
        self.reason = reason
