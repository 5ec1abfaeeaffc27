"""
Authentication infrastructure.
"""

from gardien.infrastructure.auth.ed25519_signature_verifier import (
    Ed25519SignatureVerifier,
)

__all__ = ["Ed25519SignatureVerifier"]
