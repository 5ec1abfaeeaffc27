"""
Wallet collaborator service interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from gardien.domain.value_objects.challenge import Challenge
from gardien.domain.value_objects.sign_in_config import AppIdentity


class WalletOutcome(str, Enum):
    """How the holder answered a sign-in request."""

    APPROVED = "approved"
    DECLINED = "declined"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class WalletSignInRequest:
    """What the service asks a wallet to sign."""

    chain: str
    app_identity: AppIdentity
    challenge: Challenge


@dataclass(frozen=True)
class WalletResponse:
    """
    Wallet answer.

    `payload` is only set for APPROVED and is the raw wire mapping
    {address, signature, signedMessage}; it is validated by the caller.
    """

    outcome: WalletOutcome
    payload: Optional[Mapping[str, Any]] = None

    @classmethod
    def approved(cls, payload: Mapping[str, Any]) -> "WalletResponse":
        return cls(outcome=WalletOutcome.APPROVED, payload=payload)

    @classmethod
    def declined(cls) -> "WalletResponse":
        return cls(outcome=WalletOutcome.DECLINED)

    @classmethod
    def timed_out(cls) -> "WalletResponse":
        return cls(outcome=WalletOutcome.TIMED_OUT)


class IWallet(ABC):
    """
    Abstract wallet that can sign an opaque message for its holder.

    The call may suspend for as long as the holder takes to approve.
    """

    @abstractmethod
    async def sign_in(self, request: WalletSignInRequest) -> WalletResponse:
        """
        Ask the holder to sign the challenge.

        Args:
            request: Chain, app identity and challenge fields

        Returns:
            WalletResponse with approved payload, decline or timeout
        """
