"""
Verify Sign-In use case.
"""

from typing import Optional

from gardien.application.auth_session import AuthComponents, AuthSession
from gardien.domain.exceptions import FormatError, InvalidIdentityError
from gardien.domain.value_objects.signed_assertion import SignedAssertion
from gardien.domain.value_objects.verification_result import VerificationResult
from gardien.infrastructure.monitoring import get_logger
from gardien.infrastructure.monitoring.metrics import record_sign_in

logger = get_logger(__name__)


class VerifySignIn:
    """
    Verify a signed challenge submitted over the API.

    The echoed message is only cross-checked; the message that is
    verified is rebuilt from the stored nonce.
    """

    def __init__(self, components: AuthComponents):
        """
        Initialize use case with dependencies.

        Args:
            components: Shared sign-in collaborators
        """
        self.components = components

    async def execute(
        self,
        identity: str,
        signature: str,
        signed_message: str,
        address: Optional[str] = None,
    ) -> VerificationResult:
        """
        Execute sign-in verification.

        Args:
            identity: Base58 public key claiming to sign in
            signature: Base64 detached signature
            signed_message: Base64 echo of the message the wallet signed
            address: Base58 signer address reported by the wallet
                (defaults to identity)

        Returns:
            VerificationResult; malformed input is a rejection, not an error

        Raises:
            StorageUnavailableError: If the directory cannot be reached
        """
        c = self.components

        try:
            session = AuthSession.resume(c, identity)
        except InvalidIdentityError as e:
            logger.warning(f"Sign-in rejected: {e.message}")
            return self._reject_early(e.reason)

        try:
            assertion = SignedAssertion.from_wire(
                {
                    "address": address if address is not None else identity,
                    "signature": signature,
                    "signedMessage": signed_message,
                },
                c.identity_encoding,
                c.bytes_encoding,
            )
        except FormatError as e:
            logger.warning(f"Sign-in rejected: {e.message}")
            return self._reject_early(e.reason)

        return await session.submit(assertion)

    @staticmethod
    def _reject_early(reason) -> VerificationResult:
        record_sign_in(reason.value, 0.0)
        return VerificationResult.rejected(reason)
