"""
Static sign-in configuration value objects.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AppIdentity:
    """Application identity presented to the wallet."""

    name: str
    uri: str
    icon: str


@dataclass(frozen=True)
class SignInConfig:
    """
    Service-wide fields mixed into every sign-in message.

    Built once from settings and shared read-only.
    """

    domain: str
    statement: str
    uri: str
    chain_identifier: str
    app_identity: AppIdentity
