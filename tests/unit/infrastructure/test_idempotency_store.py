"""
Unit tests for the in-memory idempotency store.
"""

from scholarfi.infrastructure.persistence.idempotency_store import (
    InMemoryIdempotencyStore,
)


class TestInMemoryIdempotencyStore:
    """Tests for InMemoryIdempotencyStore."""

    async def test_set_and_get(self):
        store = InMemoryIdempotencyStore()

        await store.set("k1", {"childAddress": "0xabc"})

        assert await store.get("k1") == {"childAddress": "0xabc"}

    async def test_missing_key(self):
        assert await InMemoryIdempotencyStore().get("nope") is None

    async def test_expired_entry_is_not_returned(self):
        store = InMemoryIdempotencyStore()

        await store.set("k1", {"n": 1}, ttl=-1)

        assert await store.get("k1") is None

    async def test_set_prunes_expired_entries(self):
        store = InMemoryIdempotencyStore()
        await store.set("old-1", {"n": 1}, ttl=-1)
        await store.set("old-2", {"n": 2}, ttl=-1)

        await store.set("fresh", {"n": 3})

        assert set(store._store) == {"fresh"}

    async def test_set_keeps_live_entries(self):
        store = InMemoryIdempotencyStore()
        await store.set("k1", {"n": 1})

        await store.set("k2", {"n": 2})

        assert await store.get("k1") == {"n": 1}
        assert await store.get("k2") == {"n": 2}
