"""
Base58 encoding (Bitcoin alphabet), used for Solana addresses.
"""

import base58

from gardien.domain.exceptions import FormatError
from gardien.domain.services.i_byte_encoding import IByteEncoding


class Base58Encoding(IByteEncoding):
    """Canonical text encoding for identities."""

    name = "base58"

    def encode(self, data: bytes) -> str:
        return base58.b58encode(data).decode("ascii")

    def decode(self, text: str) -> bytes:
        if not isinstance(text, str) or not text:
            raise FormatError("base58 text cannot be empty")
        try:
            return base58.b58decode(text)
        except ValueError as e:
            raise FormatError("invalid base58 text") from e
