"""Shared fixtures: an in-memory backend standing in for Redis/memcached."""
import pytest

from navigator_secrets.auth import CredentialStore, TokenAuth, User
from navigator_secrets.backends import Backend
from navigator_secrets.exceptions import InvalidArgument, NotFound
from navigator_secrets.store import SecretStore


class MemoryBackend(Backend):
    """Dict-backed backend; records calls so tests can assert on them."""

    name = "memory"

    def __init__(self):
        self.data: dict[str, bytes] = {}
        self.expirations: dict[str, int] = {}
        self.calls: list[str] = []
        self.closed = False

    async def put(self, key, value, expiration):
        self.calls.append("put")
        if expiration <= 0:
            raise InvalidArgument()
        self.data[key] = value
        self.expirations[key] = expiration

    async def get(self, key):
        self.calls.append("get")
        try:
            return self.data[key]
        except KeyError:
            raise NotFound() from None

    async def delete(self, key):
        self.calls.append("delete")
        self.expirations.pop(key, None)
        return self.data.pop(key, None) is not None

    async def close(self):
        self.closed = True

    def expire(self, key):
        """Simulate the backend TTL running out."""
        self.data.pop(key, None)


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend):
    return SecretStore(backend, max_length=10000)


@pytest.fixture
def forced_store(backend):
    return SecretStore(backend, max_length=10000, force_one_time=True)


@pytest.fixture
def credentials():
    return CredentialStore(
        secret="s" * 64,
        users=[
            User(username="admin", password="hunter2", role="admin"),
            User(username="bob", password="builder", role="user"),
        ],
    )


@pytest.fixture
def token_auth(credentials):
    return TokenAuth(credentials)
