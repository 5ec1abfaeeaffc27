"""
Unit tests for Ed25519SignatureVerifier.

Tests valid signatures, tampering and malformed inputs.
"""

import pytest

from gardien.infrastructure.auth import Ed25519SignatureVerifier

MESSAGE = b"bits.app wants you to sign in with your Solana account:"


def _flip(data: bytes, index: int) -> bytes:
    mutated = bytearray(data)
    mutated[index] ^= 0x01
    return bytes(mutated)


class TestEd25519SignatureVerifier:
    """Unit tests for Ed25519SignatureVerifier."""

    # ================================================================
    # Valid signatures
    # ================================================================

    def test_valid_signature(self, verifier, wallet):
        """Test signature from the holder verifies."""
        signature = wallet.sign(MESSAGE)
        assert verifier.verify(wallet.identity.public_key, MESSAGE, signature)

    def test_other_key_rejected(self, verifier, wallet, other_wallet):
        """Test signature does not verify under another key."""
        signature = wallet.sign(MESSAGE)
        assert not verifier.verify(other_wallet.identity.public_key, MESSAGE, signature)

    # ================================================================
    # Tampering
    # ================================================================

    @pytest.mark.parametrize("index", [0, 10, len(MESSAGE) - 1])
    def test_flipped_message_bit(self, verifier, wallet, index):
        """Test any change to the message invalidates the signature."""
        signature = wallet.sign(MESSAGE)
        assert not verifier.verify(
            wallet.identity.public_key, _flip(MESSAGE, index), signature
        )

    @pytest.mark.parametrize("index", [0, 31, 32, 63])
    def test_flipped_signature_bit(self, verifier, wallet, index):
        """Test any change to the signature invalidates it."""
        signature = wallet.sign(MESSAGE)
        assert not verifier.verify(
            wallet.identity.public_key, MESSAGE, _flip(signature, index)
        )

    # ================================================================
    # Malformed inputs
    # ================================================================

    @pytest.mark.parametrize("length", [0, 31, 33])
    def test_wrong_key_length(self, verifier, wallet, length):
        """Test keys that are not 32 bytes return False."""
        signature = wallet.sign(MESSAGE)
        assert not verifier.verify(b"\x01" * length, MESSAGE, signature)

    @pytest.mark.parametrize("length", [0, 63, 65])
    def test_wrong_signature_length(self, verifier, wallet, length):
        """Test signatures that are not 64 bytes return False."""
        assert not verifier.verify(wallet.identity.public_key, MESSAGE, b"\x01" * length)

    def test_non_bytes_inputs(self, verifier, wallet):
        """Test text inputs return False instead of raising."""
        signature = wallet.sign(MESSAGE)
        assert not verifier.verify(wallet.address, MESSAGE, signature)
        assert not verifier.verify(wallet.identity.public_key, MESSAGE.decode(), signature)

    def test_garbage_key(self, verifier, wallet):
        """Test arbitrary 32 bytes as a key return False."""
        signature = wallet.sign(MESSAGE)
        assert not verifier.verify(b"\xff" * 32, MESSAGE, signature)
