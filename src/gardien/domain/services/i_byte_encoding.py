"""
Byte encoding service interface.
"""

from abc import ABC, abstractmethod


class IByteEncoding(ABC):
    """
    Binary-to-text encoding used at a trust boundary.

    Implementations are stateless and injected wherever bytes cross
    into text (identities, wire payloads, HTTP bodies).
    """

    name: str = "unknown"

    @abstractmethod
    def encode(self, data: bytes) -> str:
        """
        Encode raw bytes to text.

        Args:
            data: Raw bytes

        Returns:
            Encoded text
        """

    @abstractmethod
    def decode(self, text: str) -> bytes:
        """
        Decode text to raw bytes.

        Args:
            text: Encoded text

        Returns:
            Decoded bytes

        Raises:
            FormatError: If text is not valid in this encoding
        """
