"""
NonceRecord entity - one issued challenge for one identity.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from gardien.domain.value_objects.identity import Identity


@dataclass(frozen=True)
class NonceRecord:
    """
    Single-use nonce issued to an identity.

    Business rules:
    - At most one unconsumed, unexpired record per identity
    - Consumed records are terminal and never reactivated
    - Expiry is checked on every use, independent of sweeping
    """

    identity: Identity
    value: str
    issued_at: datetime
    expires_at: datetime
    consumed: bool = False

    def __post_init__(self):
        """Validate record on creation."""
        if not self.value:
            raise ValueError("Nonce value cannot be empty")

        if self.issued_at.tzinfo is None or self.expires_at.tzinfo is None:
            raise ValueError("Nonce timestamps must be timezone-aware")

        if self.expires_at <= self.issued_at:
            raise ValueError("Nonce must expire after it is issued")

    def is_expired(self, now: datetime) -> bool:
        """Check whether the record is past its expiry at `now`."""
        return now >= self.expires_at

    def is_active(self, now: datetime) -> bool:
        """Check whether the record can still be consumed at `now`."""
        return not self.consumed and not self.is_expired(now)

    def mark_consumed(self) -> "NonceRecord":
        """Return a consumed copy of this record."""
        return replace(self, consumed=True)
