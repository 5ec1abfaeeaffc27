"""
Nonce store - per-identity nonce lifecycle.

Issues, consumes and expires single-use nonces on top of the user
directory. All mutations for one identity are serialized by a
per-identity lock; the directory's compare-and-swap keeps consumption
atomic across processes as well.
"""

import asyncio
import hmac
import logging
import secrets
import weakref
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from gardien.domain.entities.nonce_record import NonceRecord
from gardien.domain.exceptions import (
    NonceExpiredError,
    NonceMismatchError,
    NonceNotFoundError,
)
from gardien.domain.repositories.i_user_directory import IUserDirectory
from gardien.domain.value_objects.identity import Identity

logger = logging.getLogger(__name__)

MIN_NONCE_BYTES = 16


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _truncate_to_millis(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


class NonceStore:
    """
    Single-active-nonce store.

    Business rules:
    - issue() supersedes any previous record for the identity
    - consume() succeeds at most once per record
    - Expiry is enforced by consume() itself; sweeping is housekeeping
    """

    def __init__(
        self,
        directory: IUserDirectory,
        ttl_seconds: int = 300,
        nonce_bytes: int = MIN_NONCE_BYTES,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize store.

        Args:
            directory: User directory used for persistence
            ttl_seconds: Nonce lifetime in seconds
            nonce_bytes: Random bytes per nonce (at least 16)
            clock: Source of aware UTC timestamps
        """
        if ttl_seconds <= 0:
            raise ValueError("Nonce TTL must be positive")
        if nonce_bytes < MIN_NONCE_BYTES:
            raise ValueError(f"Nonce needs at least {MIN_NONCE_BYTES} bytes")

        self.directory = directory
        self.ttl = timedelta(seconds=ttl_seconds)
        self.nonce_bytes = nonce_bytes
        self._clock = clock
        # Entries vanish once no task holds or awaits the lock
        self._locks: "weakref.WeakValueDictionary[bytes, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, identity: Identity) -> asyncio.Lock:
        lock = self._locks.get(identity.public_key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[identity.public_key] = lock
        return lock

    async def issue(self, identity: Identity) -> NonceRecord:
        """
        Issue a fresh nonce, superseding any previous one.

        Args:
            identity: Identity requesting a challenge

        Returns:
            The new active NonceRecord
        """
        async with self._lock_for(identity):
            issued_at = _truncate_to_millis(self._clock())
            record = NonceRecord(
                identity=identity,
                value=secrets.token_hex(self.nonce_bytes),
                issued_at=issued_at,
                expires_at=issued_at + self.ttl,
            )
            await self.directory.save_nonce(record)

        logger.debug("Issued nonce expiring at %s", record.expires_at.isoformat())
        return record

    async def current(self, identity: Identity) -> Optional[NonceRecord]:
        """
        Get the latest record for identity, whatever its state.

        Returns:
            NonceRecord or None
        """
        return await self.directory.get_nonce(identity)

    async def consume(self, identity: Identity, value: str) -> NonceRecord:
        """
        Check and invalidate the active nonce in one step.

        Args:
            identity: Identity the nonce was issued to
            value: Nonce value being redeemed

        Returns:
            The consumed NonceRecord

        Raises:
            NonceNotFoundError: No unconsumed record (never issued, or used)
            NonceMismatchError: Value differs from the active record
            NonceExpiredError: Active record is past its expiry
        """
        async with self._lock_for(identity):
            record = await self.directory.get_nonce(identity)
            if record is None or record.consumed:
                raise NonceNotFoundError()

            if not hmac.compare_digest(record.value.encode(), value.encode()):
                raise NonceMismatchError()

            if record.is_expired(self._clock()):
                raise NonceExpiredError()

            if not await self.directory.mark_nonce_consumed(identity, value):
                # Lost a race with another process sharing the directory
                raise NonceNotFoundError()

        return record.mark_consumed()

    async def invalidate(self, identity: Identity, value: str) -> bool:
        """
        Burn a nonce without checking expiry.

        Used after a rejected attempt so the same challenge cannot be
        retried.

        Returns:
            True if the record was still unconsumed
        """
        async with self._lock_for(identity):
            return await self.directory.mark_nonce_consumed(identity, value)

    async def sweep_expired(self) -> int:
        """
        Delete expired and consumed records.

        Returns:
            Number of records deleted
        """
        now = self._clock()
        removed = 0

        for record in await self.directory.list_nonces():
            if record.is_active(now):
                continue

            async with self._lock_for(record.identity):
                # Re-read: the identity may have been issued a new nonce
                latest = await self.directory.get_nonce(record.identity)
                if latest is None or latest.is_active(now):
                    continue
                if await self.directory.delete_nonce(record.identity):
                    removed += 1

        if removed:
            logger.info("Swept %d stale nonce records", removed)
        return removed
