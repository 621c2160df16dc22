class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class EnrollmentConflictError(ValidationError):
    """Raised when a student is already in the target class roster."""


class NotFoundError(DomainError):
    """Raised when an operation references an id that no longer exists."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class StoreError(DomainError):
    """Raised when the external data store rejects or fails a call."""
