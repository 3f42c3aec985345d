"""
Cart storage exceptions.

Both are recoverable: the cart engine logs them and carries on with an
in-memory (or empty) cart.
"""

from .base import FoodHubException


class StorageException(FoodHubException):
    """Base exception for cart storage errors."""
    pass


class StorageUnavailableException(StorageException):
    """Raised when the local or remote cart store cannot be written."""

    def __init__(self, store: str, reason: str):
        super().__init__(
            f"Cart storage '{store}' unavailable: {reason}",
            details={'store': store, 'reason': reason}
        )
        self.store = store
        self.reason = reason


class RemoteFetchException(StorageException):
    """Raised when the remote cart of a user cannot be read."""

    def __init__(self, user_id: str, reason: str):
        super().__init__(
            f"Could not fetch remote cart for user {user_id}: {reason}",
            details={'user_id': user_id, 'reason': reason}
        )
        self.user_id = user_id
        self.reason = reason
