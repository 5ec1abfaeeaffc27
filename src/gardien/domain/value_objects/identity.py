"""
Identity value object - Immutable Ed25519 public key.
"""

from dataclasses import dataclass

from gardien.domain.exceptions import FormatError, InvalidIdentityError
from gardien.domain.services.i_byte_encoding import IByteEncoding

PUBLIC_KEY_LENGTH = 32


@dataclass(frozen=True)
class Identity:
    """
    Value object representing a keyholder's public key.

    Business rules:
    - Exactly 32 raw bytes (Ed25519 public key)
    - Text form is produced by one canonical encoding (base58)
    - Immutable once created
    """

    public_key: bytes

    def __post_init__(self):
        """Validate public key on creation."""
        if not isinstance(self.public_key, bytes):
            raise InvalidIdentityError("public key must be bytes")

        if len(self.public_key) != PUBLIC_KEY_LENGTH:
            raise InvalidIdentityError(
                f"expected {PUBLIC_KEY_LENGTH} bytes, got {len(self.public_key)}"
            )

    @classmethod
    def from_text(cls, text: str, encoding: IByteEncoding) -> "Identity":
        """
        Parse identity from its canonical text form.

        Args:
            text: Encoded public key
            encoding: Canonical identity encoding

        Returns:
            Identity instance

        Raises:
            InvalidIdentityError: If text is empty, undecodable, the wrong
                length, or not in canonical form
        """
        if not isinstance(text, str) or not text:
            raise InvalidIdentityError("identity cannot be empty")

        try:
            raw = encoding.decode(text)
        except FormatError as e:
            raise InvalidIdentityError(f"not valid {encoding.name}") from e

        identity = cls(public_key=raw)

        if encoding.encode(raw) != text:
            raise InvalidIdentityError("non-canonical encoding")

        return identity

    def to_text(self, encoding: IByteEncoding) -> str:
        """Return canonical text form."""
        return encoding.encode(self.public_key)

    def truncated(self, encoding: IByteEncoding) -> str:
        """Return truncated text for logs (e.g., 'ABC123...WXYZ')."""
        text = self.to_text(encoding)
        return f"{text[:6]}...{text[-4:]}"
