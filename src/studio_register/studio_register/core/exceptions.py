class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(ValidationError):
    """Raised when a referenced class, student, session or point is unknown."""


class StorageError(DomainError):
    """Raised when the local store cannot persist a collection."""


class RemoteStoreError(DomainError):
    """Raised by remote store adapters on connection or query failures.

    The sync manager catches this; it never reaches user-facing code.
    """
