"""
Challenge value object - what the caller hands to the wallet.
"""

from dataclasses import dataclass
from datetime import datetime

from gardien.domain.entities.nonce_record import NonceRecord
from gardien.domain.value_objects.identity import Identity
from gardien.domain.value_objects.sign_in_config import SignInConfig
from gardien.domain.value_objects.sign_in_message import SignInMessage


@dataclass(frozen=True)
class Challenge:
    """Nonce plus the static fields a wallet needs to build the message."""

    identity: Identity
    nonce: str
    domain: str
    statement: str
    uri: str
    chain_identifier: str
    issued_at: datetime
    expires_at: datetime
    user_exists: bool = False

    @classmethod
    def from_record(
        cls,
        record: NonceRecord,
        config: SignInConfig,
        user_exists: bool = False,
    ) -> "Challenge":
        """Build challenge from a freshly issued nonce record."""
        return cls(
            identity=record.identity,
            nonce=record.value,
            domain=config.domain,
            statement=config.statement,
            uri=config.uri,
            chain_identifier=config.chain_identifier,
            issued_at=record.issued_at,
            expires_at=record.expires_at,
            user_exists=user_exists,
        )

    def to_message(self) -> SignInMessage:
        """Return the sign-in message this challenge asks to be signed."""
        return SignInMessage(
            domain=self.domain,
            address=self.identity,
            statement=self.statement,
            uri=self.uri,
            nonce=self.nonce,
            issued_at=self.issued_at,
            chain_identifier=self.chain_identifier,
        )
