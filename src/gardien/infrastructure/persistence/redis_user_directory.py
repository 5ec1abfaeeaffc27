"""
Redis user directory implementation.

Key layout (with default prefix):
    gardien:users               SET of known identities (base58)
    gardien:nonce:{identity}    JSON nonce record, expires after the nonce
"""

import json
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from gardien.domain.entities.nonce_record import NonceRecord
from gardien.domain.exceptions import InvalidIdentityError, StorageUnavailableError
from gardien.domain.repositories.i_user_directory import IUserDirectory
from gardien.domain.services.i_byte_encoding import IByteEncoding
from gardien.domain.value_objects.identity import Identity
from gardien.infrastructure.encoding import Base58Encoding
from gardien.infrastructure.monitoring import get_logger

logger = get_logger(__name__)

# Compare-and-swap on (value, consumed); KEEPTTL needs Redis >= 6.0
CONSUME_SCRIPT = """
local raw = redis.call('GET', KEYS[1])
if not raw then
    return 0
end
local record = cjson.decode(raw)
if record['consumed'] or record['value'] ~= ARGV[1] then
    return 0
end
record['consumed'] = true
redis.call('SET', KEYS[1], cjson.encode(record), 'KEEPTTL')
return 1
"""


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except RedisError as e:
        raise StorageUnavailableError(operation, str(e)) from e


class RedisUserDirectory(IUserDirectory):
    """
    User directory backed by Redis.

    Safe to share between processes: consumption is a server-side
    compare-and-swap.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        key_prefix: str = "gardien:",
        retention_seconds: int = 60,
        identity_encoding: Optional[IByteEncoding] = None,
        client: Optional[aioredis.Redis] = None,
    ):
        """
        Initialize Redis directory configuration.

        Args:
            host: Redis server host
            port: Redis server port
            db: Redis database number (0-15)
            password: Redis password (None if no auth)
            key_prefix: Namespace for all keys
            retention_seconds: How long records outlive their expiry
            identity_encoding: Encoding for identities in keys and records
            client: Pre-built client (skips connect)
        """
        self.host = host
        self.port = port
        self.db = db
        self.password = password if password else None
        self.key_prefix = key_prefix
        self.retention_seconds = retention_seconds
        self.identity_encoding = identity_encoding or Base58Encoding()
        self._client: Optional[aioredis.Redis] = client

    async def connect(self) -> None:
        """Establish connection to Redis server."""
        if self._client is not None:
            return

        self._client = aioredis.from_url(
            f"redis://{self.host}:{self.port}/{self.db}",
            password=self.password,
            encoding="utf-8",
            decode_responses=True,
        )

    async def disconnect(self) -> None:
        """Close connection to Redis server."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        await self.connect()
        with _storage_errors("ping"):
            return bool(await self._client.ping())

    # ================================================================
    # Keys & serialization
    # ================================================================

    def _users_key(self) -> str:
        return f"{self.key_prefix}users"

    def _nonce_key(self, identity: Identity) -> str:
        return f"{self.key_prefix}nonce:{identity.to_text(self.identity_encoding)}"

    def serialize(self, record: NonceRecord) -> str:
        """Serialize record to JSON."""
        return json.dumps(
            {
                "identity": record.identity.to_text(self.identity_encoding),
                "value": record.value,
                "issued_at": record.issued_at.isoformat(),
                "expires_at": record.expires_at.isoformat(),
                "consumed": record.consumed,
            }
        )

    def deserialize(self, raw: str) -> NonceRecord:
        """
        Deserialize record from JSON.

        Raises:
            StorageUnavailableError: If the stored record is corrupt
        """
        try:
            data = json.loads(raw)
            return NonceRecord(
                identity=Identity.from_text(data["identity"], self.identity_encoding),
                value=data["value"],
                issued_at=datetime.fromisoformat(data["issued_at"]),
                expires_at=datetime.fromisoformat(data["expires_at"]),
                consumed=bool(data["consumed"]),
            )
        except (ValueError, KeyError, TypeError, InvalidIdentityError) as e:
            raise StorageUnavailableError("deserialize", f"corrupt nonce record: {e}") from e

    # ================================================================
    # IUserDirectory
    # ================================================================

    async def ensure_user(self, identity: Identity) -> bool:
        await self.connect()
        with _storage_errors("ensure_user"):
            added = await self._client.sadd(
                self._users_key(), identity.to_text(self.identity_encoding)
            )
        return added == 0

    async def save_nonce(self, record: NonceRecord) -> None:
        await self.connect()
        expire_at = int(record.expires_at.timestamp()) + self.retention_seconds
        with _storage_errors("save_nonce"):
            await self._client.set(
                self._nonce_key(record.identity),
                self.serialize(record),
                exat=expire_at,
            )

    async def get_nonce(self, identity: Identity) -> Optional[NonceRecord]:
        await self.connect()
        with _storage_errors("get_nonce"):
            raw = await self._client.get(self._nonce_key(identity))
        if raw is None:
            return None
        return self.deserialize(raw)

    async def mark_nonce_consumed(self, identity: Identity, value: str) -> bool:
        await self.connect()
        with _storage_errors("mark_nonce_consumed"):
            result = await self._client.eval(
                CONSUME_SCRIPT, 1, self._nonce_key(identity), value
            )
        return result == 1

    async def delete_nonce(self, identity: Identity) -> bool:
        await self.connect()
        with _storage_errors("delete_nonce"):
            deleted = await self._client.delete(self._nonce_key(identity))
        return deleted > 0

    async def list_nonces(self) -> List[NonceRecord]:
        await self.connect()
        records: List[NonceRecord] = []
        with _storage_errors("list_nonces"):
            async for key in self._client.scan_iter(match=f"{self.key_prefix}nonce:*"):
                raw = await self._client.get(key)
                # Key may expire between SCAN and GET
                if raw is None:
                    continue
                try:
                    records.append(self.deserialize(raw))
                except StorageUnavailableError as e:
                    logger.warning(f"Skipping {key}: {e.message}")
        return records
