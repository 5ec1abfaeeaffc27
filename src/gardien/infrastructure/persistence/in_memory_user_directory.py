"""
In-memory user directory.

NOT FOR MULTI-PROCESS DEPLOYMENTS - data lost on restart.
Use RedisUserDirectory when more than one worker serves requests.
"""

from typing import Dict, List, Optional, Set

from gardien.domain.entities.nonce_record import NonceRecord
from gardien.domain.repositories.i_user_directory import IUserDirectory
from gardien.domain.value_objects.identity import Identity


class InMemoryUserDirectory(IUserDirectory):
    """Dictionary-backed user directory for a single event loop."""

    def __init__(self):
        self._users: Set[bytes] = set()
        self._nonces: Dict[bytes, NonceRecord] = {}

    async def ensure_user(self, identity: Identity) -> bool:
        existed = identity.public_key in self._users
        self._users.add(identity.public_key)
        return existed

    async def save_nonce(self, record: NonceRecord) -> None:
        self._nonces[record.identity.public_key] = record

    async def get_nonce(self, identity: Identity) -> Optional[NonceRecord]:
        return self._nonces.get(identity.public_key)

    async def mark_nonce_consumed(self, identity: Identity, value: str) -> bool:
        # No await between read and write, so this is atomic on one loop
        record = self._nonces.get(identity.public_key)
        if record is None or record.consumed or record.value != value:
            return False
        self._nonces[identity.public_key] = record.mark_consumed()
        return True

    async def delete_nonce(self, identity: Identity) -> bool:
        return self._nonces.pop(identity.public_key, None) is not None

    async def list_nonces(self) -> List[NonceRecord]:
        return list(self._nonces.values())
