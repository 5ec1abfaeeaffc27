"""
Unit tests for InMemoryUserDirectory.
"""

from datetime import datetime, timedelta, timezone

from gardien.domain.entities.nonce_record import NonceRecord

ISSUED = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _record(identity, value="a" * 32) -> NonceRecord:
    return NonceRecord(
        identity=identity,
        value=value,
        issued_at=ISSUED,
        expires_at=ISSUED + timedelta(minutes=5),
    )


class TestInMemoryUserDirectory:
    """Unit tests for InMemoryUserDirectory."""

    async def test_ensure_user(self, directory, wallet):
        """Test ensure_user registers once and reports existence."""
        assert await directory.ensure_user(wallet.identity) is False
        assert await directory.ensure_user(wallet.identity) is True

    async def test_save_replaces_record(self, directory, wallet):
        """Test one record per identity."""
        await directory.save_nonce(_record(wallet.identity, "a" * 32))
        await directory.save_nonce(_record(wallet.identity, "b" * 32))

        record = await directory.get_nonce(wallet.identity)
        assert record.value == "b" * 32
        assert len(await directory.list_nonces()) == 1

    async def test_mark_consumed_compare_and_swap(self, directory, wallet):
        """Test consumption only succeeds for the matching unconsumed value."""
        await directory.save_nonce(_record(wallet.identity))

        assert not await directory.mark_nonce_consumed(wallet.identity, "b" * 32)
        assert await directory.mark_nonce_consumed(wallet.identity, "a" * 32)
        assert not await directory.mark_nonce_consumed(wallet.identity, "a" * 32)
        assert (await directory.get_nonce(wallet.identity)).consumed

    async def test_delete(self, directory, wallet):
        """Test delete reports whether a record existed."""
        await directory.save_nonce(_record(wallet.identity))

        assert await directory.delete_nonce(wallet.identity)
        assert not await directory.delete_nonce(wallet.identity)
        assert await directory.get_nonce(wallet.identity) is None
