"""
Tests for SecretStore.

Tests cover:
- create/fetch round trip
- one-time consumption, including two readers racing
- length, expiration and force-one-time limits
- explicit delete and backend error propagation
"""
import asyncio

import pytest

from navigator_secrets.exceptions import (
    BackendUnavailable,
    Forbidden,
    InvalidExpiration,
    NotFound,
    TooLarge,
)
from navigator_secrets.secret import Secret
from navigator_secrets.store import SecretStore


class TestCreate:

    @pytest.mark.asyncio
    async def test_returns_uuid_id(self, store, backend):
        secret_id = await store.create("hello", 3600)
        assert len(secret_id) == 36
        assert secret_id in backend.data
        assert backend.expirations[secret_id] == 3600

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, store):
        ids = {await store.create("hello", 3600) for _ in range(50)}
        assert len(ids) == 50

    @pytest.mark.asyncio
    async def test_message_at_max_length(self, store):
        secret_id = await store.create("A" * 10000, 3600)
        secret = await store.fetch(secret_id)
        assert secret.message == "A" * 10000

    @pytest.mark.asyncio
    async def test_too_large_never_reaches_backend(self, store, backend):
        with pytest.raises(TooLarge):
            await store.create("A" * 10001, 3600)
        assert backend.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expiration", [0, -1, 60, 3601, 1209600])
    async def test_invalid_expiration(self, store, backend, expiration):
        with pytest.raises(InvalidExpiration):
            await store.create("hello", expiration)
        assert backend.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expiration", [3600, 86400, 604800])
    async def test_accepted_expirations(self, store, expiration):
        assert await store.create("hello", expiration)

    @pytest.mark.asyncio
    async def test_length_checked_before_expiration(self, store):
        with pytest.raises(TooLarge):
            await store.create("A" * 10001, 5)

    @pytest.mark.asyncio
    async def test_stored_value_is_a_secret(self, store, backend):
        secret_id = await store.create("hello", 86400, one_time=False)
        secret = Secret.deserialize(backend.data[secret_id])
        assert secret == Secret(message="hello", expiration=86400, one_time=False)

    @pytest.mark.asyncio
    async def test_backend_errors_propagate(self, store, backend):
        async def broken_put(key, value, expiration):
            raise BackendUnavailable()
        backend.put = broken_put
        with pytest.raises(BackendUnavailable):
            await store.create("hello", 3600)


class TestForceOneTime:

    @pytest.mark.asyncio
    async def test_unauthorized_non_one_time_forbidden(self, forced_store, backend):
        with pytest.raises(Forbidden):
            await forced_store.create("hello", 3600, one_time=False, authorized=False)
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_authorized_non_one_time_allowed(self, forced_store):
        secret_id = await forced_store.create(
            "hello", 3600, one_time=False, authorized=True,
        )
        assert (await forced_store.fetch(secret_id)).one_time is False

    @pytest.mark.asyncio
    async def test_unauthorized_one_time_allowed(self, forced_store):
        assert await forced_store.create("hello", 3600, one_time=True)

    @pytest.mark.asyncio
    async def test_policy_off_allows_everyone(self, store):
        assert await store.create("hello", 3600, one_time=False, authorized=False)


class TestFetch:

    @pytest.mark.asyncio
    async def test_one_time_secret_is_consumed(self, store):
        secret_id = await store.create("hello", 3600, one_time=True)
        secret = await store.fetch(secret_id)
        assert secret.message == "hello"
        with pytest.raises(NotFound):
            await store.fetch(secret_id)

    @pytest.mark.asyncio
    async def test_reusable_secret_survives_reads(self, store, backend):
        secret_id = await store.create("hello", 3600, one_time=False)
        for _ in range(3):
            assert (await store.fetch(secret_id)).message == "hello"
        assert "delete" not in backend.calls

    @pytest.mark.asyncio
    async def test_unknown_id(self, store):
        with pytest.raises(NotFound):
            await store.fetch("00000000-0000-4000-8000-000000000000")

    @pytest.mark.asyncio
    async def test_expired_secret(self, store, backend):
        secret_id = await store.create("hello", 3600, one_time=False)
        backend.expire(secret_id)
        with pytest.raises(NotFound):
            await store.fetch(secret_id)

    @pytest.mark.asyncio
    async def test_corrupted_entry_is_not_found(self, store, backend):
        backend.data["broken"] = b"not json"
        with pytest.raises(NotFound):
            await store.fetch("broken")

    @pytest.mark.asyncio
    async def test_concurrent_readers_get_one_delivery(self, backend):
        gate = asyncio.Event()

        class SlowGetBackend(type(backend)):
            async def get(self, key):
                value = await super().get(key)
                await gate.wait()
                return value

        slow = SlowGetBackend()
        store = SecretStore(slow)
        secret_id = await store.create("hello", 3600)
        readers = [asyncio.create_task(store.fetch(secret_id)) for _ in range(2)]
        await asyncio.sleep(0)
        gate.set()
        results = await asyncio.gather(*readers, return_exceptions=True)
        delivered = [r for r in results if isinstance(r, Secret)]
        missing = [r for r in results if isinstance(r, NotFound)]
        assert len(delivered) == 1
        assert len(missing) == 1


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_secret(self, store):
        secret_id = await store.create("hello", 3600, one_time=False)
        await store.delete(secret_id)
        with pytest.raises(NotFound):
            await store.fetch(secret_id)

    @pytest.mark.asyncio
    async def test_delete_missing(self, store):
        with pytest.raises(NotFound):
            await store.delete("00000000-0000-4000-8000-000000000000")


class TestMessageLength:

    @pytest.mark.asyncio
    async def test_length_counts_utf8_bytes(self, backend):
        store = SecretStore(backend, max_length=10)
        assert await store.create("é" * 5, 3600)
        with pytest.raises(TooLarge):
            await store.create("é" * 6, 3600)
        assert backend.calls == ["put"]
