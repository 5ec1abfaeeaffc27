"""
Domain exceptions package.
"""

# Auth exceptions
from gardien.domain.exceptions.auth import (
    AuthenticationError,
    FormatError,
    InvalidIdentityError,
    NonceError,
    NonceExpiredError,
    NonceMismatchError,
    NonceNotFoundError,
)

# Base exceptions
from gardien.domain.exceptions.base import (
    GardienException,
    InvalidSessionStateError,
    StorageUnavailableError,
)

__all__ = [
    # Base
    "GardienException",
    "InvalidSessionStateError",
    "StorageUnavailableError",
    # Auth
    "AuthenticationError",
    "FormatError",
    "InvalidIdentityError",
    "NonceError",
    "NonceExpiredError",
    "NonceMismatchError",
    "NonceNotFoundError",
]
