"""
Ed25519 signature verifier.

Implements Solana wallet signature verification using PyNaCl.
"""

from nacl.exceptions import CryptoError
from nacl.signing import VerifyKey

from gardien.domain.services.i_signature_verifier import ISignatureVerifier

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


class Ed25519SignatureVerifier(ISignatureVerifier):
    """
    Ed25519 verification of detached signatures.

    Total over its input: wrong lengths, wrong types, invalid curve points
    and bad signatures all return False.
    """

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """
        Verify Ed25519 signature.

        Args:
            public_key: 32-byte public key
            message: Signed message bytes
            signature: 64-byte detached signature

        Returns:
            True if signature is valid, False otherwise
        """
        if not isinstance(public_key, bytes) or len(public_key) != PUBLIC_KEY_LENGTH:
            return False
        if not isinstance(signature, bytes) or len(signature) != SIGNATURE_LENGTH:
            return False
        if not isinstance(message, bytes):
            return False

        try:
            VerifyKey(public_key).verify(message, signature)
            return True
        except (CryptoError, ValueError, TypeError):
            return False
