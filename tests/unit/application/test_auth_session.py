"""
Unit tests for AuthSession.

Tests the sign-in state machine end to end with real crypto and an
in-memory user directory.
"""

import asyncio
from dataclasses import replace

import pytest

from gardien.application.auth_session import AuthSession, SessionState
from gardien.domain.exceptions import (
    InvalidIdentityError,
    InvalidSessionStateError,
    StorageUnavailableError,
)
from gardien.domain.services.i_wallet import (
    IWallet,
    WalletResponse,
    WalletSignInRequest,
)
from gardien.domain.value_objects.failure_reason import FailureReason
from gardien.domain.value_objects.signed_assertion import SignedAssertion
from gardien.infrastructure.encoding import Base64Encoding


async def _sign(wallet, challenge, config, b58, b64) -> SignedAssertion:
    """Have wallet sign challenge and decode its payload."""
    request = WalletSignInRequest(
        chain=config.chain_identifier,
        app_identity=config.app_identity,
        challenge=challenge,
    )
    response = await wallet.sign_in(request)
    return SignedAssertion.from_wire(response.payload, b58, b64)


class DecliningWallet(IWallet):
    async def sign_in(self, request):
        return WalletResponse.declined()


class SlowWallet(IWallet):
    async def sign_in(self, request):
        await asyncio.sleep(5)
        return WalletResponse.declined()


class TimedOutWallet(IWallet):
    async def sign_in(self, request):
        return WalletResponse.timed_out()


class RaisingWallet(IWallet):
    async def sign_in(self, request):
        raise ConnectionError("wallet transport closed")


class GarbageWallet(IWallet):
    async def sign_in(self, request):
        return WalletResponse.approved({"address": "x", "signature": "y"})


class ForgingWallet(IWallet):
    """
    Signs an edited challenge message with `signer`'s key.

    Reports `claimed_address` (defaults to the signer's own address).
    """

    def __init__(self, signer, claimed_address=None, **message_changes):
        self.signer = signer
        self.claimed_address = claimed_address or signer.address
        self.message_changes = message_changes
        self.b64 = Base64Encoding()

    async def sign_in(self, request):
        message = replace(request.challenge.to_message(), **self.message_changes)
        data = self.signer.codec.encode(message)
        return WalletResponse.approved(
            {
                "address": self.claimed_address,
                "signature": self.b64.encode(self.signer.sign(data)),
                "signedMessage": self.b64.encode(data),
            }
        )


class TestAuthSession:
    """Unit tests for AuthSession."""

    # ================================================================
    # Helper Methods
    # ================================================================

    async def _nonce_burned(self, store, wallet) -> bool:
        record = await store.current(wallet.identity)
        return record is not None and record.consumed

    # ================================================================
    # Happy path
    # ================================================================

    async def test_sign_in_succeeds(self, new_session, wallet):
        """Test holder signing the issued challenge is authenticated."""
        session = new_session()

        challenge = await session.request(wallet.address)
        assert session.state is SessionState.NONCE_ISSUED
        assert challenge.identity == wallet.identity

        result = await session.sign_in_with(wallet)

        assert result.authenticated
        assert result.identity == wallet.identity
        assert session.state is SessionState.AUTHENTICATED
        assert session.result is result

    async def test_request_reports_known_user(self, new_session, wallet):
        """Test first request registers the user, second sees it."""
        first = await new_session().request(wallet.address)
        second = await new_session().request(wallet.address)

        assert first.user_exists is False
        assert second.user_exists is True

    async def test_request_invalid_identity(self, new_session):
        """Test malformed identity raises and leaves session in START."""
        session = new_session()

        with pytest.raises(InvalidIdentityError):
            await session.request("not-a-key")

        assert session.state is SessionState.START

    # ================================================================
    # Wallet outcomes
    # ================================================================

    async def test_wallet_declined(self, new_session, wallet, store):
        """Test decline rejects and burns the nonce."""
        session = new_session()
        await session.request(wallet.address)

        result = await session.sign_in_with(DecliningWallet())

        assert result.reason is FailureReason.WALLET_DECLINED
        assert session.state is SessionState.REJECTED
        assert await self._nonce_burned(store, wallet)

    async def test_wallet_timeout(self, new_session, wallet, store):
        """Test slow wallet is cut off after the configured timeout."""
        session = new_session()
        await session.request(wallet.address)

        result = await session.sign_in_with(SlowWallet())

        assert result.reason is FailureReason.WALLET_TIMEOUT
        assert await self._nonce_burned(store, wallet)

    async def test_wallet_reports_timeout(self, new_session, wallet):
        """Test wallet-side timeout maps to WalletTimeout."""
        session = new_session()
        await session.request(wallet.address)

        result = await session.sign_in_with(TimedOutWallet())

        assert result.reason is FailureReason.WALLET_TIMEOUT

    async def test_wallet_call_raises(self, new_session, wallet, store):
        """Test a failing wallet call ends the attempt and burns the nonce."""
        session = new_session()
        await session.request(wallet.address)

        result = await session.sign_in_with(RaisingWallet())

        assert result.reason is FailureReason.WALLET_DECLINED
        assert session.state is SessionState.REJECTED
        assert await self._nonce_burned(store, wallet)

    async def test_wallet_call_cancelled(self, new_session, wallet):
        """Test cancelling the caller is not turned into a rejection."""
        session = new_session()
        await session.request(wallet.address)

        task = asyncio.create_task(session.sign_in_with(SlowWallet()))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.result is None

    async def test_wallet_malformed_payload(self, new_session, wallet, store):
        """Test payload with the wrong shape is a format error."""
        session = new_session()
        await session.request(wallet.address)

        result = await session.sign_in_with(GarbageWallet())

        assert result.reason is FailureReason.FORMAT_ERROR
        assert await self._nonce_burned(store, wallet)

    # ================================================================
    # Rejections
    # ================================================================

    async def test_expired_nonce(self, new_session, wallet, clock, store):
        """Test signature over an expired challenge is rejected."""
        session = new_session()
        await session.request(wallet.address)
        clock.advance(300)

        result = await session.sign_in_with(wallet)

        assert result.reason is FailureReason.NONCE_EXPIRED
        assert await self._nonce_burned(store, wallet)

    async def test_replay_after_success(
        self, components, new_session, wallet, sign_in_config, b58, b64
    ):
        """Test the same assertion cannot authenticate twice."""
        session = new_session()
        challenge = await session.request(wallet.address)
        assertion = await _sign(wallet, challenge, sign_in_config, b58, b64)

        first = await session.submit(assertion)
        replay = await AuthSession.resume(components, wallet.address).submit(assertion)

        assert first.authenticated
        assert replay.reason is FailureReason.NONCE_MISMATCH

    async def test_signature_from_other_key(self, new_session, wallet, other_wallet):
        """Test another key signing while claiming the holder's address."""
        session = new_session()
        await session.request(wallet.address)

        forger = ForgingWallet(other_wallet, claimed_address=wallet.address)
        result = await session.sign_in_with(forger)

        assert result.reason is FailureReason.SIGNATURE_INVALID

    async def test_address_mismatch(self, new_session, wallet, other_wallet, store):
        """Test valid signature by a different signer is rejected."""
        session = new_session()
        await session.request(wallet.address)

        result = await session.sign_in_with(ForgingWallet(other_wallet))

        assert result.reason is FailureReason.ADDRESS_MISMATCH
        assert await self._nonce_burned(store, wallet)

    async def test_substituted_nonce(self, new_session, wallet):
        """Test message carrying another nonce is a nonce mismatch."""
        session = new_session()
        await session.request(wallet.address)

        result = await session.sign_in_with(ForgingWallet(wallet, nonce="f" * 32))

        assert result.reason is FailureReason.NONCE_MISMATCH

    async def test_substituted_domain(self, new_session, wallet):
        """Test message for another domain is rejected."""
        session = new_session()
        await session.request(wallet.address)

        result = await session.sign_in_with(ForgingWallet(wallet, domain="evil.example"))

        assert result.reason is FailureReason.SIGNATURE_INVALID

    async def test_superseded_challenge(self, new_session, wallet):
        """Test signing an older challenge after re-issue is rejected."""
        stale = new_session()
        await stale.request(wallet.address)
        fresh = new_session()
        await fresh.request(wallet.address)

        stale_result = await stale.sign_in_with(wallet)

        assert stale_result.reason is FailureReason.NONCE_MISMATCH

    async def test_no_nonce_issued(self, components, wallet):
        """Test resumed session without any stored nonce."""
        assertion = SignedAssertion(
            address=wallet.identity,
            signature=b"\x01" * 64,
            signed_message=b"hello",
        )

        result = await AuthSession.resume(components, wallet.address).submit(assertion)

        assert result.reason is FailureReason.NONCE_NOT_FOUND

    # ================================================================
    # State machine
    # ================================================================

    async def test_submit_before_request(self, new_session, wallet):
        """Test submit from START is refused."""
        assertion = SignedAssertion(
            address=wallet.identity, signature=b"\x01" * 64, signed_message=b"x"
        )

        with pytest.raises(InvalidSessionStateError):
            await new_session().submit(assertion)

    async def test_request_twice(self, new_session, wallet):
        """Test a session issues only one challenge."""
        session = new_session()
        await session.request(wallet.address)

        with pytest.raises(InvalidSessionStateError):
            await session.request(wallet.address)

    async def test_terminal_state_is_final(self, new_session, wallet):
        """Test no transition leaves AUTHENTICATED."""
        session = new_session()
        await session.request(wallet.address)
        await session.sign_in_with(wallet)

        with pytest.raises(InvalidSessionStateError):
            await session.sign_in_with(wallet)

    async def test_storage_failure_propagates(
        self, new_session, wallet, directory, sign_in_config, b58, b64
    ):
        """Test storage failure raises and ends the attempt."""
        session = new_session()
        challenge = await session.request(wallet.address)
        assertion = await _sign(wallet, challenge, sign_in_config, b58, b64)

        async def unavailable(identity):
            raise StorageUnavailableError("get_nonce", "connection refused")

        directory.get_nonce = unavailable

        with pytest.raises(StorageUnavailableError):
            await session.submit(assertion)

        assert session.state is SessionState.REJECTED
