class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthFailure(DomainError):
    """Raised when credentials are invalid or an email is already registered."""


class AuthorizationError(DomainError):
    """Raised when a principal lacks permission for an action."""


class RoleMismatch(AuthorizationError):
    """Raised when the stored role differs from the role requested at sign-in."""


class OrphanedCredential(AuthorizationError):
    """Raised when a credential has no principal document behind it."""


class PermissionDenied(AuthorizationError):
    """Raised when the caller may not access a student's records."""


class ProfileNotFound(DomainError):
    """Raised when a student profile document does not exist."""


class StoreError(DomainError):
    """Base class for failures reported by the document store."""

    retryable = False


class IndexRequired(StoreError):
    """Raised when an ordered query cannot run until the store is set up for it."""

    retryable = True


class StoreWriteFailure(StoreError):
    """Raised when a create, replace or delete did not reach the store."""


class StoreReadFailure(StoreError):
    """Raised when a read did not reach the store; loading again may succeed."""

    retryable = True
