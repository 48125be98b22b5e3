class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced student, assignment or user does not exist."""


class ConflictError(DomainError):
    """Raised when a write would break a repair-only rule.

    Services treat this as a no-op, not as a failure.
    """


class StoreError(DomainError):
    """Raised when the underlying database fails."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
