"""
SignInMessage value object - the text a keyholder is asked to sign.
"""

from dataclasses import dataclass
from datetime import datetime

from gardien.domain.entities.nonce_record import NonceRecord
from gardien.domain.exceptions import FormatError
from gardien.domain.value_objects.identity import Identity
from gardien.domain.value_objects.sign_in_config import SignInConfig

_LINE_BREAKS = ("\n", "\r", "\u2028", "\u2029")


@dataclass(frozen=True)
class SignInMessage:
    """
    Structured sign-in message.

    Never persisted and never taken from a client: it is rebuilt from the
    stored nonce record and static configuration whenever it is needed.

    Business rules:
    - Text fields are non-empty single lines
    - issued_at is timezone-aware with millisecond precision
    """

    domain: str
    address: Identity
    statement: str
    uri: str
    nonce: str
    issued_at: datetime
    chain_identifier: str

    def __post_init__(self):
        """Validate fields so the canonical text form is unambiguous."""
        for field_name in ("domain", "statement", "uri", "nonce", "chain_identifier"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value:
                raise FormatError(f"{field_name} cannot be empty")
            if any(brk in value for brk in _LINE_BREAKS):
                raise FormatError(f"{field_name} must be a single line")

        if not isinstance(self.address, Identity):
            raise FormatError("address must be an Identity")

        if self.issued_at.tzinfo is None:
            raise FormatError("issued_at must be timezone-aware")

        if self.issued_at.microsecond % 1000:
            raise FormatError("issued_at must have millisecond precision")

    @classmethod
    def from_record(cls, record: NonceRecord, config: SignInConfig) -> "SignInMessage":
        """
        Build the expected message for a stored nonce record.

        Args:
            record: Nonce record issued by the service
            config: Static sign-in configuration

        Returns:
            SignInMessage bound to the record's identity and nonce
        """
        return cls(
            domain=config.domain,
            address=record.identity,
            statement=config.statement,
            uri=config.uri,
            nonce=record.value,
            issued_at=record.issued_at,
            chain_identifier=config.chain_identifier,
        )
