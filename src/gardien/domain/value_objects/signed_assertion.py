"""
SignedAssertion value object - a wallet's answer to a challenge.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from gardien.domain.exceptions import FormatError, InvalidIdentityError
from gardien.domain.services.i_byte_encoding import IByteEncoding
from gardien.domain.value_objects.identity import Identity

WIRE_FIELDS = frozenset({"address", "signature", "signedMessage"})


@dataclass(frozen=True)
class SignedAssertion:
    """
    Validated wallet response.

    `signed_message` is only cross-checked against the message the
    service rebuilds; it is never the input to verification.
    """

    address: Identity
    signature: bytes
    signed_message: bytes

    @classmethod
    def from_wire(
        cls,
        payload: Mapping[str, Any],
        identity_encoding: IByteEncoding,
        bytes_encoding: IByteEncoding,
    ) -> "SignedAssertion":
        """
        Decode and validate a wallet payload.

        Args:
            payload: Mapping with exactly address, signature, signedMessage
            identity_encoding: Encoding of the address field
            bytes_encoding: Encoding of the byte fields

        Returns:
            SignedAssertion instance

        Raises:
            FormatError: If the payload shape or any encoding is invalid
        """
        if not isinstance(payload, Mapping):
            raise FormatError("wallet payload must be an object")

        keys = set(payload)
        missing = WIRE_FIELDS - keys
        if missing:
            raise FormatError(f"wallet payload missing {sorted(missing)}")
        unexpected = keys - WIRE_FIELDS
        if unexpected:
            raise FormatError(f"wallet payload has unexpected {sorted(unexpected)}")

        for key in WIRE_FIELDS:
            value = payload[key]
            if not isinstance(value, str) or not value:
                raise FormatError(f"{key} must be a non-empty string")

        try:
            address = Identity.from_text(payload["address"], identity_encoding)
        except InvalidIdentityError as e:
            raise FormatError(f"address: {e.message}") from e

        return cls(
            address=address,
            signature=bytes_encoding.decode(payload["signature"]),
            signed_message=bytes_encoding.decode(payload["signedMessage"]),
        )

    def to_wire(
        self,
        identity_encoding: IByteEncoding,
        bytes_encoding: IByteEncoding,
    ) -> dict[str, str]:
        """Encode assertion to its wire payload."""
        return {
            "address": self.address.to_text(identity_encoding),
            "signature": bytes_encoding.encode(self.signature),
            "signedMessage": bytes_encoding.encode(self.signed_message),
        }
