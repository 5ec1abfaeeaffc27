"""
Authentication API routes.

Provides the challenge-response sign-in flow:
- POST /auth/nonce - Issue a sign-in challenge
- POST /auth/verify - Verify a signed challenge
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from gardien.application.use_cases.request_nonce import RequestNonce
from gardien.application.use_cases.verify_sign_in import VerifySignIn
from gardien.config.settings import Settings
from gardien.di.dependencies import (
    get_app_settings,
    get_message_codec,
    get_request_nonce,
    get_verify_sign_in,
)
from gardien.domain.services.message_codec import MessageCodec, format_timestamp
from gardien.presentation.schemas.auth_schemas import (
    RequestNonceRequest,
    RequestNonceResponse,
    VerifySignInRequest,
    VerifySignInResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ================================================================
# Request Nonce Endpoint
# ================================================================


@router.post(
    "/nonce",
    response_model=RequestNonceResponse,
    status_code=status.HTTP_200_OK,
    summary="Request sign-in challenge",
    description="Issue a single-use nonce for a wallet identity",
)
async def request_nonce(
    request: RequestNonceRequest,
    use_case: RequestNonce = Depends(get_request_nonce),
    codec: MessageCodec = Depends(get_message_codec),
) -> RequestNonceResponse:
    """
    Issue a sign-in challenge.

    Supersedes any earlier nonce for the same identity. Malformed
    identities are rejected with 400 by the domain exception handler.
    """
    challenge = await use_case.execute(identity=request.identity)
    message = codec.encode(challenge.to_message())

    return RequestNonceResponse(
        nonce=challenge.nonce,
        domain=challenge.domain,
        statement=challenge.statement,
        uri=challenge.uri,
        chain_identifier=challenge.chain_identifier,
        issued_at=format_timestamp(challenge.issued_at),
        expires_at=format_timestamp(challenge.expires_at),
        message=message.decode("utf-8"),
        user_exists=challenge.user_exists,
    )


# ================================================================
# Verify Sign-In Endpoint
# ================================================================


@router.post(
    "/verify",
    response_model=VerifySignInResponse,
    status_code=status.HTTP_200_OK,
    summary="Verify signed challenge",
    description="Verify wallet signature over the issued challenge",
    responses={status.HTTP_401_UNAUTHORIZED: {"model": VerifySignInResponse}},
)
async def verify_sign_in(
    request: VerifySignInRequest,
    use_case: VerifySignIn = Depends(get_verify_sign_in),
    settings: Settings = Depends(get_app_settings),
):
    """
    Verify a signed challenge.

    Flow:
    1. Rebuild the expected message from the stored nonce
    2. Cross-check the echoed message and verify the signature
    3. Consume the nonce

    Rejections return 401 with a coarse reason; the precise reason is
    only logged.
    """
    result = await use_case.execute(
        identity=request.identity,
        signature=request.signature,
        signed_message=request.signed_message,
        address=request.address,
    )

    if result.authenticated:
        return VerifySignInResponse(authenticated=True, identity=request.identity)

    reason = (
        result.reason.value
        if settings.EXPOSE_FAILURE_REASONS
        else result.reason.public_reason
    )
    body = VerifySignInResponse(authenticated=False, reason=reason)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=body.model_dump(),
    )
