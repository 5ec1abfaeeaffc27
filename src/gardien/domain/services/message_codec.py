"""
Canonical sign-in message codec.

Text layout (Sign-In With Solana):

    {domain} wants you to sign in with your Solana account:
    {address}

    {statement}

    URI: {uri}
    Version: 1
    Chain ID: {chain_identifier}
    Nonce: {nonce}
    Issued At: {issued_at}

Lines are joined with a single LF, no trailing newline, UTF-8 encoded.
"""

import re
from datetime import datetime, timezone

from gardien.domain.exceptions import FormatError, InvalidIdentityError
from gardien.domain.services.i_byte_encoding import IByteEncoding
from gardien.domain.value_objects.identity import Identity
from gardien.domain.value_objects.sign_in_message import SignInMessage

HEADER_SUFFIX = " wants you to sign in with your Solana account:"
MESSAGE_VERSION = "1"
LINE_COUNT = 10

_TIMESTAMP_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z")


def format_timestamp(value: datetime) -> str:
    """Render timestamp as UTC ISO-8601 with milliseconds ('...T12:00:00.000Z')."""
    utc = value.astimezone(timezone.utc)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def parse_timestamp(text: str) -> datetime:
    """
    Parse timestamp produced by format_timestamp.

    Raises:
        FormatError: If text is not exactly in canonical form
    """
    if not _TIMESTAMP_PATTERN.fullmatch(text):
        raise FormatError(f"timestamp not in canonical form: {text!r}")
    try:
        parsed = datetime.strptime(text, "%Y-%m-%dT%H:%M:%S.%fZ")
    except ValueError as e:
        raise FormatError(f"invalid timestamp: {text!r}") from e
    return parsed.replace(tzinfo=timezone.utc)


class MessageCodec:
    """
    Deterministic encoder and strict decoder for sign-in messages.

    Stateless; safe to share across tasks. Verification always compares
    against `encode` of a server-built message, `decode` exists only to
    describe what a signer actually signed.
    """

    def __init__(self, identity_encoding: IByteEncoding):
        """
        Initialize codec.

        Args:
            identity_encoding: Encoding used for the address line
        """
        self.identity_encoding = identity_encoding

    def encode(self, message: SignInMessage) -> bytes:
        """
        Serialize message to its canonical bytes.

        Args:
            message: Sign-in message

        Returns:
            UTF-8 bytes; identical fields always give identical bytes
        """
        lines = [
            f"{message.domain}{HEADER_SUFFIX}",
            message.address.to_text(self.identity_encoding),
            "",
            message.statement,
            "",
            f"URI: {message.uri}",
            f"Version: {MESSAGE_VERSION}",
            f"Chain ID: {message.chain_identifier}",
            f"Nonce: {message.nonce}",
            f"Issued At: {format_timestamp(message.issued_at)}",
        ]
        return "\n".join(lines).encode("utf-8")

    def decode(self, data: bytes) -> SignInMessage:
        """
        Parse canonical bytes back into a message.

        Args:
            data: Bytes claimed to be a sign-in message

        Returns:
            SignInMessage

        Raises:
            FormatError: On any structural deviation
        """
        if not isinstance(data, (bytes, bytearray)):
            raise FormatError("message must be bytes")

        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError("message is not valid UTF-8") from e

        lines = text.split("\n")
        if len(lines) != LINE_COUNT:
            raise FormatError(f"expected {LINE_COUNT} lines, got {len(lines)}")

        header = lines[0]
        if not header.endswith(HEADER_SUFFIX):
            raise FormatError("missing sign-in header")
        domain = header[: -len(HEADER_SUFFIX)]

        try:
            address = Identity.from_text(lines[1], self.identity_encoding)
        except InvalidIdentityError as e:
            raise FormatError(f"address line: {e.message}") from e

        if lines[2] or lines[4]:
            raise FormatError("missing blank separator line")

        version = _field(lines[6], "Version")
        if version != MESSAGE_VERSION:
            raise FormatError(f"unsupported message version {version!r}")

        return SignInMessage(
            domain=domain,
            address=address,
            statement=lines[3],
            uri=_field(lines[5], "URI"),
            nonce=_field(lines[8], "Nonce"),
            issued_at=parse_timestamp(_field(lines[9], "Issued At")),
            chain_identifier=_field(lines[7], "Chain ID"),
        )


def _field(line: str, label: str) -> str:
    prefix = f"{label}: "
    if not line.startswith(prefix):
        raise FormatError(f"expected {label!r} line")
    return line[len(prefix):]
