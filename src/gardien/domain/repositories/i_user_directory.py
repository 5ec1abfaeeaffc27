"""
User directory repository interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from gardien.domain.entities.nonce_record import NonceRecord
from gardien.domain.value_objects.identity import Identity


class IUserDirectory(ABC):
    """
    Interface for the external user directory.

    Holds known users and one nonce record per identity. Backend
    failures raise StorageUnavailableError.
    """

    @abstractmethod
    async def ensure_user(self, identity: Identity) -> bool:
        """
        Register identity if unknown.

        Args:
            identity: Public key of the user

        Returns:
            True if the user already existed, False if just created
        """

    @abstractmethod
    async def save_nonce(self, record: NonceRecord) -> None:
        """
        Store record, replacing any previous record for its identity.

        Args:
            record: Nonce record to persist
        """

    @abstractmethod
    async def get_nonce(self, identity: Identity) -> Optional[NonceRecord]:
        """
        Get the latest nonce record for identity.

        Args:
            identity: Public key of the user

        Returns:
            NonceRecord if one is stored, None otherwise
        """

    @abstractmethod
    async def mark_nonce_consumed(self, identity: Identity, value: str) -> bool:
        """
        Atomically flip the stored record to consumed.

        Succeeds only if the stored record has exactly `value` and is
        not yet consumed.

        Args:
            identity: Public key of the user
            value: Expected nonce value

        Returns:
            True if this call consumed the record
        """

    @abstractmethod
    async def delete_nonce(self, identity: Identity) -> bool:
        """
        Delete the stored record for identity.

        Returns:
            True if a record was deleted
        """

    @abstractmethod
    async def list_nonces(self) -> List[NonceRecord]:
        """
        List all stored nonce records.

        Returns:
            Records in no particular order
        """
