"""
Authentication API schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

# ================================================================
# Request Nonce Schemas
# ================================================================


class RequestNonceRequest(BaseModel):
    """Request a sign-in challenge."""

    identity: str = Field(..., description="Solana public key (base58)")


class RequestNonceResponse(BaseModel):
    """Challenge fields to pass to the wallet."""

    nonce: str = Field(..., description="Single-use nonce")
    domain: str = Field(..., description="Requesting domain")
    statement: str = Field(..., description="Human-readable statement")
    uri: str = Field(..., description="Resource URI")
    chain_identifier: str = Field(..., description="Chain the sign-in is for")
    issued_at: str = Field(..., description="Issue time (ISO-8601, ms, UTC)")
    expires_at: str = Field(..., description="Expiry time (ISO-8601, ms, UTC)")
    message: str = Field(..., description="Exact text the wallet must sign")
    user_exists: bool = Field(..., description="Identity was already registered")


# ================================================================
# Verify Sign-In Schemas
# ================================================================


class VerifySignInRequest(BaseModel):
    """Submit a signed challenge."""

    identity: str = Field(..., description="Solana public key (base58)")
    signature: str = Field(..., description="Detached signature (base64)")
    signed_message: str = Field(..., description="Message the wallet signed (base64)")
    address: Optional[str] = Field(
        None,
        description="Signer address reported by the wallet (defaults to identity)",
    )


class VerifySignInResponse(BaseModel):
    """Result of sign-in verification."""

    authenticated: bool = Field(..., description="Sign-in succeeded")
    identity: Optional[str] = Field(None, description="Authenticated identity")
    reason: Optional[str] = Field(None, description="Why sign-in was rejected")
