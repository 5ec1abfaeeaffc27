"""
Unit tests for NonceRecord entity.
"""

from datetime import datetime, timedelta, timezone

import pytest

from gardien.domain.entities.nonce_record import NonceRecord
from gardien.domain.value_objects.identity import Identity

ISSUED = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _record(**overrides) -> NonceRecord:
    fields = {
        "identity": Identity(public_key=bytes(32)),
        "value": "a" * 32,
        "issued_at": ISSUED,
        "expires_at": ISSUED + timedelta(minutes=5),
    }
    fields.update(overrides)
    return NonceRecord(**fields)


class TestNonceRecord:
    """Unit tests for NonceRecord entity."""

    def test_new_record_is_active(self):
        """Test fresh record is active before expiry."""
        record = _record()
        assert record.is_active(ISSUED)
        assert not record.consumed

    def test_expired_at_exact_expiry(self):
        """Test record is expired at its expiry instant."""
        record = _record()
        assert not record.is_expired(record.expires_at - timedelta(milliseconds=1))
        assert record.is_expired(record.expires_at)
        assert not record.is_active(record.expires_at)

    def test_mark_consumed_returns_copy(self):
        """Test mark_consumed leaves the original untouched."""
        record = _record()
        consumed = record.mark_consumed()

        assert consumed.consumed
        assert not record.consumed
        assert consumed.value == record.value
        assert not consumed.is_active(ISSUED)

    def test_rejects_empty_value(self):
        """Test empty nonce value is rejected."""
        with pytest.raises(ValueError):
            _record(value="")

    def test_rejects_naive_timestamps(self):
        """Test naive timestamps are rejected."""
        with pytest.raises(ValueError):
            _record(issued_at=datetime(2024, 1, 1, 12, 0, 0))

    def test_rejects_expiry_before_issue(self):
        """Test expiry must follow issue time."""
        with pytest.raises(ValueError):
            _record(expires_at=ISSUED)
