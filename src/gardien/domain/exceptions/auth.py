"""
Authentication domain exceptions.

Every exception here is an expected outcome of a sign-in attempt and
carries the FailureReason it maps to.
"""

from gardien.domain.exceptions.base import GardienException
from gardien.domain.value_objects.failure_reason import FailureReason


class AuthenticationError(GardienException):
    """Raised when a sign-in check fails."""

    reason: FailureReason = FailureReason.SIGNATURE_INVALID

    def __init__(self, message: str = "Authentication failed", code: str | None = None):
        super().__init__(message, code=code or "AUTHENTICATION_ERROR")


class InvalidIdentityError(AuthenticationError):
    """Raised when an identity is not a well-formed public key."""

    reason = FailureReason.INVALID_IDENTITY

    def __init__(self, detail: str):
        super().__init__(f"Invalid identity: {detail}", code="INVALID_IDENTITY")


class FormatError(AuthenticationError):
    """Raised when a message, signature or wallet payload is malformed."""

    reason = FailureReason.FORMAT_ERROR

    def __init__(self, detail: str):
        super().__init__(f"Malformed input: {detail}", code="FORMAT_ERROR")


class NonceError(AuthenticationError):
    """Base class for nonce lifecycle failures."""


class NonceNotFoundError(NonceError):
    """Raised when no unconsumed nonce exists for an identity."""

    reason = FailureReason.NONCE_NOT_FOUND

    def __init__(self):
        super().__init__("No active nonce for identity", code="NONCE_NOT_FOUND")


class NonceExpiredError(NonceError):
    """Raised when the active nonce is past its expiry."""

    reason = FailureReason.NONCE_EXPIRED

    def __init__(self):
        super().__init__("Nonce has expired", code="NONCE_EXPIRED")


class NonceMismatchError(NonceError):
    """Raised when a presented nonce is not the active one."""

    reason = FailureReason.NONCE_MISMATCH

    def __init__(self):
        super().__init__("Nonce does not match active nonce", code="NONCE_MISMATCH")
