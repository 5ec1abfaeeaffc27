"""
Base64 encoding for byte fields on the wallet and HTTP boundary.
"""

import base64
import binascii

from gardien.domain.exceptions import FormatError
from gardien.domain.services.i_byte_encoding import IByteEncoding


class Base64Encoding(IByteEncoding):
    """
    Standard base64 with padding.

    Decoding is strict: characters outside the alphabet or bad padding
    are rejected instead of being silently dropped.
    """

    name = "base64"

    def encode(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")

    def decode(self, text: str) -> bytes:
        if not isinstance(text, str) or not text:
            raise FormatError("base64 text cannot be empty")
        try:
            return base64.b64decode(text.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise FormatError("invalid base64 text") from e
