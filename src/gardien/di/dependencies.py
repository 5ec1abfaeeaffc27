"""
FastAPI dependency injection.

Provides dependencies for FastAPI routes using the DI container.
"""

from gardien.application.use_cases.request_nonce import RequestNonce
from gardien.application.use_cases.verify_sign_in import VerifySignIn
from gardien.config.settings import Settings
from gardien.di.container import get_container
from gardien.domain.services.message_codec import MessageCodec


def get_app_settings() -> Settings:
    """Get settings used by the container."""
    return get_container().settings


def get_message_codec() -> MessageCodec:
    """Get message codec dependency."""
    return get_container().message_codec


def get_request_nonce() -> RequestNonce:
    """Get RequestNonce use case dependency."""
    return get_container().get_request_nonce()


def get_verify_sign_in() -> VerifySignIn:
    """Get VerifySignIn use case dependency."""
    return get_container().get_verify_sign_in()
