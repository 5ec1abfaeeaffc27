"""
Local keypair wallet.

Signs sign-in challenges with a Solana keypair held in process. Used for
development, scripted clients and tests; production wallets live on the
holder's device.
"""

import json
from pathlib import Path
from typing import Optional, Union

from nacl.signing import SigningKey

from gardien.domain.services.i_byte_encoding import IByteEncoding
from gardien.domain.services.i_wallet import (
    IWallet,
    WalletResponse,
    WalletSignInRequest,
)
from gardien.domain.services.message_codec import MessageCodec
from gardien.domain.value_objects.identity import Identity
from gardien.domain.value_objects.signed_assertion import SignedAssertion
from gardien.infrastructure.encoding import Base58Encoding, Base64Encoding


class KeypairWallet(IWallet):
    """
    Wallet that always approves, signing the canonical message.

    Mirrors a real wallet: it builds the message from the challenge
    fields itself and returns {address, signature, signedMessage}.
    """

    def __init__(
        self,
        signing_key: SigningKey,
        identity_encoding: Optional[IByteEncoding] = None,
        bytes_encoding: Optional[IByteEncoding] = None,
    ):
        """
        Initialize wallet.

        Args:
            signing_key: Ed25519 signing key of the holder
            identity_encoding: Encoding for the address (base58)
            bytes_encoding: Encoding for signature and message (base64)
        """
        self.signing_key = signing_key
        self.identity_encoding = identity_encoding or Base58Encoding()
        self.bytes_encoding = bytes_encoding or Base64Encoding()
        self.codec = MessageCodec(self.identity_encoding)

    @classmethod
    def generate(cls) -> "KeypairWallet":
        """Create wallet with a fresh random keypair."""
        return cls(SigningKey.generate())

    @classmethod
    def from_keypair_file(cls, keypair_path: Union[str, Path]) -> "KeypairWallet":
        """
        Load wallet from Solana keypair JSON file.

        Keypair JSON is an array of 64 bytes [secret_key + public_key];
        the first 32 bytes are the secret seed.

        Args:
            keypair_path: Path to keypair JSON file

        Returns:
            KeypairWallet instance
        """
        with open(keypair_path, "r") as f:
            keypair_data = json.load(f)

        if not isinstance(keypair_data, list) or len(keypair_data) != 64:
            raise ValueError(f"Not a Solana keypair file: {keypair_path}")

        return cls(SigningKey(bytes(keypair_data[:32])))

    @property
    def identity(self) -> Identity:
        """Public key of the holder."""
        return Identity(public_key=bytes(self.signing_key.verify_key))

    @property
    def address(self) -> str:
        """Base58 address of the holder."""
        return self.identity.to_text(self.identity_encoding)

    def sign(self, message: bytes) -> bytes:
        """Return detached signature over message."""
        return self.signing_key.sign(message).signature

    async def sign_in(self, request: WalletSignInRequest) -> WalletResponse:
        """
        Sign the challenge as the holder.

        Args:
            request: Chain, app identity and challenge fields

        Returns:
            Approved WalletResponse with wire payload
        """
        message = self.codec.encode(request.challenge.to_message())
        assertion = SignedAssertion(
            address=self.identity,
            signature=self.sign(message),
            signed_message=message,
        )

        return WalletResponse.approved(
            assertion.to_wire(self.identity_encoding, self.bytes_encoding)
        )
