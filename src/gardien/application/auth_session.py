"""
AuthSession - challenge-response state machine for one sign-in attempt.

States:
    START --request()--> NONCE_ISSUED --submit()--> VERIFYING
    VERIFYING --> AUTHENTICATED | REJECTED

AUTHENTICATED and REJECTED are terminal. A new attempt needs a new
session and a fresh nonce.
"""

import asyncio
import hmac
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gardien.domain.exceptions import (
    FormatError,
    InvalidSessionStateError,
    NonceError,
)
from gardien.domain.entities.nonce_record import NonceRecord
from gardien.domain.repositories.i_user_directory import IUserDirectory
from gardien.domain.services.i_byte_encoding import IByteEncoding
from gardien.domain.services.i_signature_verifier import ISignatureVerifier
from gardien.domain.services.i_wallet import (
    IWallet,
    WalletOutcome,
    WalletSignInRequest,
)
from gardien.domain.services.message_codec import MessageCodec
from gardien.domain.services.nonce_store import NonceStore
from gardien.domain.value_objects.challenge import Challenge
from gardien.domain.value_objects.failure_reason import FailureReason
from gardien.domain.value_objects.identity import Identity
from gardien.domain.value_objects.sign_in_config import SignInConfig
from gardien.domain.value_objects.sign_in_message import SignInMessage
from gardien.domain.value_objects.signed_assertion import SignedAssertion
from gardien.domain.value_objects.verification_result import VerificationResult
from gardien.infrastructure.monitoring import get_logger
from gardien.infrastructure.monitoring.metrics import (
    nonces_issued_total,
    record_sign_in,
)

logger = get_logger(__name__)


class SessionState(str, Enum):
    """Lifecycle states of a sign-in attempt."""

    START = "start"
    NONCE_ISSUED = "nonce_issued"
    VERIFYING = "verifying"
    AUTHENTICATED = "authenticated"
    REJECTED = "rejected"


@dataclass(frozen=True)
class AuthComponents:
    """Shared, stateless collaborators of every AuthSession."""

    nonce_store: NonceStore
    directory: IUserDirectory
    codec: MessageCodec
    verifier: ISignatureVerifier
    config: SignInConfig
    identity_encoding: IByteEncoding
    bytes_encoding: IByteEncoding
    wallet_timeout_seconds: float = 120.0


class AuthSession:
    """
    One sign-in attempt.

    Business rules:
    - The verified message is always rebuilt from the stored nonce
    - Signature, signer address and nonce consumption must all pass
    - Any rejection burns the nonce; nothing is retried internally
    - Expected failures come back as VerificationResult, only storage
      failures raise
    """

    def __init__(self, components: AuthComponents):
        self.components = components
        self.state = SessionState.START
        self.identity: Optional[Identity] = None
        self.challenge: Optional[Challenge] = None
        self.result: Optional[VerificationResult] = None

    @classmethod
    def resume(cls, components: AuthComponents, identity_text: str) -> "AuthSession":
        """
        Continue an attempt whose nonce was issued by an earlier request.

        Args:
            components: Shared collaborators
            identity_text: Canonical text of the claimed identity

        Returns:
            Session in NONCE_ISSUED state

        Raises:
            InvalidIdentityError: If identity_text is malformed
        """
        session = cls(components)
        session.identity = Identity.from_text(identity_text, components.identity_encoding)
        session.state = SessionState.NONCE_ISSUED
        return session

    # ================================================================
    # Transitions
    # ================================================================

    async def request(self, identity_text: str) -> Challenge:
        """
        Issue a challenge for identity (START -> NONCE_ISSUED).

        Args:
            identity_text: Canonical text of the identity

        Returns:
            Challenge to hand to the wallet

        Raises:
            InvalidIdentityError: If identity_text is malformed
        """
        self._require("request", SessionState.START)
        c = self.components

        identity = Identity.from_text(identity_text, c.identity_encoding)
        user_exists = await c.directory.ensure_user(identity)
        record = await c.nonce_store.issue(identity)

        self.identity = identity
        self.challenge = Challenge.from_record(record, c.config, user_exists=user_exists)
        self.state = SessionState.NONCE_ISSUED
        nonces_issued_total.inc()

        logger.info(
            f"Issued challenge for {identity.truncated(c.identity_encoding)} "
            f"(known user: {user_exists})"
        )
        return self.challenge

    async def sign_in_with(self, wallet: IWallet) -> VerificationResult:
        """
        Ask the wallet to sign the issued challenge, then verify.

        The wallet call is bounded by the configured timeout. A decline,
        a timeout or a failed wallet call rejects the attempt and burns
        the nonce; cancellation of the caller still propagates.

        Args:
            wallet: Wallet collaborator of the holder

        Returns:
            VerificationResult of the attempt
        """
        self._require("sign_in_with", SessionState.NONCE_ISSUED)
        if self.challenge is None:
            raise InvalidSessionStateError("sign_in_with", "resumed without challenge")
        c = self.components

        request = WalletSignInRequest(
            chain=c.config.chain_identifier,
            app_identity=c.config.app_identity,
            challenge=self.challenge,
        )

        try:
            response = await asyncio.wait_for(
                wallet.sign_in(request), timeout=c.wallet_timeout_seconds
            )
        except asyncio.TimeoutError:
            return await self._abandon(FailureReason.WALLET_TIMEOUT)
        except Exception as e:
            logger.warning(f"Wallet call failed: {type(e).__name__}: {e}")
            return await self._abandon(FailureReason.WALLET_DECLINED)

        if response.outcome is WalletOutcome.DECLINED:
            return await self._abandon(FailureReason.WALLET_DECLINED)
        if response.outcome is WalletOutcome.TIMED_OUT:
            return await self._abandon(FailureReason.WALLET_TIMEOUT)

        try:
            assertion = SignedAssertion.from_wire(
                response.payload or {}, c.identity_encoding, c.bytes_encoding
            )
        except FormatError as e:
            logger.warning(f"Wallet returned malformed payload: {e.message}")
            return await self._abandon(FailureReason.FORMAT_ERROR)

        return await self.submit(assertion)

    async def submit(self, assertion: SignedAssertion) -> VerificationResult:
        """
        Verify a wallet assertion (NONCE_ISSUED -> VERIFYING -> terminal).

        Args:
            assertion: Decoded wallet response

        Returns:
            VerificationResult of the attempt

        Raises:
            StorageUnavailableError: If the directory cannot be reached
        """
        self._require("submit", SessionState.NONCE_ISSUED)
        self.state = SessionState.VERIFYING
        started = time.perf_counter()

        try:
            result = await self._verify(assertion)
        except Exception:
            self.state = SessionState.REJECTED
            raise

        return self._finish(result, time.perf_counter() - started)

    # ================================================================
    # Verification
    # ================================================================

    async def _verify(self, assertion: SignedAssertion) -> VerificationResult:
        c = self.components
        identity = self.identity

        record = await c.nonce_store.current(identity)
        if record is None:
            return VerificationResult.rejected(FailureReason.NONCE_NOT_FOUND)
        if record.consumed:
            # Presented challenge can't be the active one
            return VerificationResult.rejected(FailureReason.NONCE_MISMATCH)

        expected = c.codec.encode(SignInMessage.from_record(record, c.config))

        reason = self._check_assertion(assertion, expected, record)
        if reason is not None:
            await c.nonce_store.invalidate(identity, record.value)
            return VerificationResult.rejected(reason)

        try:
            await c.nonce_store.consume(identity, record.value)
        except NonceError as e:
            await c.nonce_store.invalidate(identity, record.value)
            return VerificationResult.rejected(e.reason)

        return VerificationResult.ok(identity)

    def _check_assertion(
        self,
        assertion: SignedAssertion,
        expected: bytes,
        record: NonceRecord,
    ) -> Optional[FailureReason]:
        c = self.components

        if not hmac.compare_digest(assertion.signed_message, expected):
            return self._describe_substitution(assertion.signed_message, record)

        if not c.verifier.verify(assertion.address.public_key, expected, assertion.signature):
            return FailureReason.SIGNATURE_INVALID

        if assertion.address != self.identity:
            return FailureReason.ADDRESS_MISMATCH

        return None

    def _describe_substitution(self, echoed: bytes, record: NonceRecord) -> FailureReason:
        """Classify a signed message that differs from the expected one."""
        try:
            signed = self.components.codec.decode(echoed)
        except FormatError as e:
            logger.warning(f"Signed message is not a sign-in message: {e.message}")
            return FailureReason.FORMAT_ERROR

        if signed.nonce != record.value:
            return FailureReason.NONCE_MISMATCH
        if signed.address != record.identity:
            return FailureReason.ADDRESS_MISMATCH

        logger.warning(
            f"Signed message fields differ from challenge "
            f"(domain={signed.domain!r}, uri={signed.uri!r})"
        )
        return FailureReason.SIGNATURE_INVALID

    # ================================================================
    # Helpers
    # ================================================================

    async def _abandon(self, reason: FailureReason) -> VerificationResult:
        """Reject before verification and burn the issued nonce."""
        self.state = SessionState.VERIFYING
        await self.components.nonce_store.invalidate(self.identity, self.challenge.nonce)
        return self._finish(VerificationResult.rejected(reason), 0.0)

    def _finish(self, result: VerificationResult, elapsed: float) -> VerificationResult:
        self.result = result
        encoding = self.components.identity_encoding
        who = self.identity.truncated(encoding)

        if result.authenticated:
            self.state = SessionState.AUTHENTICATED
            logger.info(f"Sign-in authenticated for {who}")
            record_sign_in(None, elapsed)
        else:
            self.state = SessionState.REJECTED
            logger.warning(f"Sign-in rejected for {who}: {result.reason.value}")
            record_sign_in(result.reason.value, elapsed)

        return result

    def _require(self, operation: str, *allowed: SessionState) -> None:
        if self.state not in allowed:
            raise InvalidSessionStateError(operation, self.state.value)
