class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when no principal is present or login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when a write would violate a uniqueness rule."""


class AlreadyExistsError(ConflictError):
    """Raised when a per-student record (e.g. a submission) already exists."""
