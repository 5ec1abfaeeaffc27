"""
Test fixtures and configuration.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from gardien.application.auth_session import AuthComponents, AuthSession
from gardien.domain.services.message_codec import MessageCodec
from gardien.domain.services.nonce_store import NonceStore
from gardien.domain.value_objects.sign_in_config import AppIdentity, SignInConfig
from gardien.infrastructure.auth import Ed25519SignatureVerifier
from gardien.infrastructure.encoding import Base58Encoding, Base64Encoding
from gardien.infrastructure.persistence import InMemoryUserDirectory
from gardien.infrastructure.wallet import KeypairWallet


class FrozenClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at a fixed instant."""
    return FrozenClock(datetime(2024, 1, 1, 12, 0, 0, 123456, tzinfo=timezone.utc))


@pytest.fixture
def b58() -> Base58Encoding:
    return Base58Encoding()


@pytest.fixture
def b64() -> Base64Encoding:
    return Base64Encoding()


@pytest.fixture
def sign_in_config() -> SignInConfig:
    return SignInConfig(
        domain="bits.app",
        statement="Sign in to Bits with your Solana account",
        uri="https://bits.app",
        chain_identifier="solana:devnet",
        app_identity=AppIdentity(
            name="Bits", uri="https://bits.app", icon="favicon.ico"
        ),
    )


@pytest.fixture
def directory() -> InMemoryUserDirectory:
    return InMemoryUserDirectory()


@pytest.fixture
def store(directory, clock) -> NonceStore:
    return NonceStore(directory, ttl_seconds=300, clock=clock)


@pytest.fixture
def codec(b58) -> MessageCodec:
    return MessageCodec(b58)


@pytest.fixture
def verifier() -> Ed25519SignatureVerifier:
    return Ed25519SignatureVerifier()


@pytest.fixture
def wallet() -> KeypairWallet:
    """Wallet of the legitimate holder."""
    return KeypairWallet.generate()


@pytest.fixture
def other_wallet() -> KeypairWallet:
    """Wallet of an unrelated keyholder."""
    return KeypairWallet.generate()


@pytest.fixture
def components(store, directory, codec, verifier, sign_in_config, b58, b64) -> AuthComponents:
    return AuthComponents(
        nonce_store=store,
        directory=directory,
        codec=codec,
        verifier=verifier,
        config=sign_in_config,
        identity_encoding=b58,
        bytes_encoding=b64,
        wallet_timeout_seconds=0.2,
    )


@pytest.fixture
def new_session(components) -> Callable[[], AuthSession]:
    """Factory for fresh sessions sharing one set of components."""
    return lambda: AuthSession(components)
