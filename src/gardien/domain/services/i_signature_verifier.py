"""
Signature verifier service interface.
"""

from abc import ABC, abstractmethod


class ISignatureVerifier(ABC):
    """
    Abstract signature verification for wallet sign-in.

    Implementations must be total: malformed keys or signatures return
    False rather than raising, and no state is shared between calls.
    """

    @abstractmethod
    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """
        Verify signature over message.

        Args:
            public_key: Raw public key bytes
            message: Exact bytes that were signed
            signature: Raw signature bytes

        Returns:
            True only if the signature is valid for the key
        """
