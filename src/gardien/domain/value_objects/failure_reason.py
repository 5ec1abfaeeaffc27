"""
FailureReason - why a sign-in attempt was rejected.
"""

from enum import Enum


class FailureReason(str, Enum):
    """Taxonomy of rejection reasons for a sign-in attempt."""

    INVALID_IDENTITY = "InvalidIdentity"
    NONCE_NOT_FOUND = "NonceNotFound"
    NONCE_EXPIRED = "NonceExpired"
    NONCE_MISMATCH = "NonceMismatch"
    SIGNATURE_INVALID = "SignatureInvalid"
    ADDRESS_MISMATCH = "AddressMismatch"
    FORMAT_ERROR = "FormatError"
    WALLET_DECLINED = "WalletDeclined"
    WALLET_TIMEOUT = "WalletTimeout"

    @property
    def public_reason(self) -> str:
        """
        Coarse reason safe to show an unauthenticated caller.

        Never distinguishes a wrong key from a stale nonce.
        """
        if self in (FailureReason.FORMAT_ERROR, FailureReason.INVALID_IDENTITY):
            return "invalid_request"
        if self is FailureReason.WALLET_DECLINED:
            return "wallet_declined"
        if self is FailureReason.WALLET_TIMEOUT:
            return "wallet_timeout"
        return "authentication_failed"
