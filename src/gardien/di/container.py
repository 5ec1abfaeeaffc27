"""
Dependency Injection Container for Gardien.

Manages all service instances and their dependencies.
"""

from typing import Optional

from gardien.application.auth_session import AuthComponents
from gardien.application.use_cases.request_nonce import RequestNonce
from gardien.application.use_cases.verify_sign_in import VerifySignIn
from gardien.config.settings import Settings, get_settings
from gardien.domain.repositories.i_user_directory import IUserDirectory
from gardien.domain.services.i_byte_encoding import IByteEncoding
from gardien.domain.services.i_signature_verifier import ISignatureVerifier
from gardien.domain.services.message_codec import MessageCodec
from gardien.domain.services.nonce_store import NonceStore
from gardien.infrastructure.auth import Ed25519SignatureVerifier
from gardien.infrastructure.encoding import Base58Encoding, Base64Encoding
from gardien.infrastructure.persistence import (
    InMemoryUserDirectory,
    RedisUserDirectory,
)


class DIContainer:
    """
    Dependency Injection Container.

    Manages singleton instances of all services. Everything here is
    either stateless or owns its own synchronization.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize container with None instances."""
        self._settings = settings

        # Encodings
        self._identity_encoding: Optional[IByteEncoding] = None
        self._bytes_encoding: Optional[IByteEncoding] = None

        # Infrastructure
        self._user_directory: Optional[IUserDirectory] = None

        # Domain Services
        self._nonce_store: Optional[NonceStore] = None
        self._message_codec: Optional[MessageCodec] = None
        self._signature_verifier: Optional[ISignatureVerifier] = None

        # Application
        self._auth_components: Optional[AuthComponents] = None

    @property
    def settings(self) -> Settings:
        """Get settings (explicit or global)."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    async def initialize(self) -> None:
        """Initialize services and establish connections."""
        if isinstance(self.user_directory, RedisUserDirectory):
            await self.user_directory.connect()

    async def shutdown(self) -> None:
        """Cleanup resources and close connections."""
        if isinstance(self._user_directory, RedisUserDirectory):
            await self._user_directory.disconnect()

    # Encoding Getters

    @property
    def identity_encoding(self) -> IByteEncoding:
        """Get identity encoding (base58)."""
        if self._identity_encoding is None:
            self._identity_encoding = Base58Encoding()
        return self._identity_encoding

    @property
    def bytes_encoding(self) -> IByteEncoding:
        """Get wire byte encoding (base64)."""
        if self._bytes_encoding is None:
            self._bytes_encoding = Base64Encoding()
        return self._bytes_encoding

    # Infrastructure Getters

    @property
    def user_directory(self) -> IUserDirectory:
        """Get user directory (Redis if enabled, in-memory otherwise)."""
        if self._user_directory is None:
            settings = self.settings
            if settings.REDIS_ENABLED:
                self._user_directory = RedisUserDirectory(
                    host=settings.REDIS_HOST,
                    port=settings.REDIS_PORT,
                    db=settings.REDIS_DB,
                    password=settings.REDIS_PASSWORD,
                    key_prefix=settings.REDIS_KEY_PREFIX,
                    identity_encoding=self.identity_encoding,
                )
            else:
                self._user_directory = InMemoryUserDirectory()
        return self._user_directory

    # Domain Service Getters

    @property
    def nonce_store(self) -> NonceStore:
        """Get nonce store instance."""
        if self._nonce_store is None:
            self._nonce_store = NonceStore(
                directory=self.user_directory,
                ttl_seconds=self.settings.NONCE_TTL_SECONDS,
                nonce_bytes=self.settings.NONCE_BYTES,
            )
        return self._nonce_store

    @property
    def message_codec(self) -> MessageCodec:
        """Get message codec instance."""
        if self._message_codec is None:
            self._message_codec = MessageCodec(self.identity_encoding)
        return self._message_codec

    @property
    def signature_verifier(self) -> ISignatureVerifier:
        """Get signature verifier instance."""
        if self._signature_verifier is None:
            self._signature_verifier = Ed25519SignatureVerifier()
        return self._signature_verifier

    # Application Getters

    @property
    def auth_components(self) -> AuthComponents:
        """Get shared AuthSession collaborators."""
        if self._auth_components is None:
            self._auth_components = AuthComponents(
                nonce_store=self.nonce_store,
                directory=self.user_directory,
                codec=self.message_codec,
                verifier=self.signature_verifier,
                config=self.settings.sign_in_config(),
                identity_encoding=self.identity_encoding,
                bytes_encoding=self.bytes_encoding,
                wallet_timeout_seconds=self.settings.WALLET_TIMEOUT_SECONDS,
            )
        return self._auth_components

    def get_request_nonce(self) -> RequestNonce:
        """Create RequestNonce use case."""
        return RequestNonce(self.auth_components)

    def get_verify_sign_in(self) -> VerifySignIn:
        """Create VerifySignIn use case."""
        return VerifySignIn(self.auth_components)


_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get or create the global container."""
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


async def initialize_container() -> None:
    """Initialize the global container."""
    await get_container().initialize()


async def shutdown_container() -> None:
    """Shutdown the global container."""
    global _container
    if _container is not None:
        await _container.shutdown()


def reset_container(container: Optional[DIContainer] = None) -> None:
    """Replace the global container (for testing)."""
    global _container
    _container = container
