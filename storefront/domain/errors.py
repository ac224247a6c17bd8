# storefront/domain/errors.py


class StorageError(Exception):
    """Backend fault raised by a storage adapter (never plain not-found)."""


class TransientStorageError(StorageError):
    """Connectivity-flavoured fault; the same call may succeed if retried."""


class ConflictError(StorageError):
    """A unique constraint rejected the write (duplicate email, second cart, ...)."""
