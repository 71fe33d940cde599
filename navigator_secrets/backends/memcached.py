"""
Memcached backend.

Memcached reads an exptime above 30 days as an absolute unix timestamp, so
longer lifetimes are rejected instead of silently misread.
"""
import asyncio
import logging
from typing import Any

import aiomcache
from aiomcache.exceptions import ClientException

from ..exceptions import BackendUnavailable, InvalidArgument, NotFound
from .abstract import Backend

logger = logging.getLogger("navigator.secrets.backends")

MAX_EXPIRATION = 60 * 60 * 24 * 30

_TRANSPORT_ERRORS = (
    ClientException,
    asyncio.TimeoutError,
    OSError,
)


def parse_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` address; the port defaults to 11211."""
    host, sep, port = address.rpartition(":")
    if not sep:
        return address, 11211
    if not host:
        raise ValueError(f"Invalid memcached address: {address!r}")
    return host, int(port)


class MemcachedBackend(Backend):
    """Secrets stored in memcached with a relative exptime."""

    name = "memcached"

    def __init__(self, address: str = "localhost:11211", client: Any = None):
        self._address = address
        if client is None:
            host, port = parse_address(address)
            client = aiomcache.Client(host, port)
        self._client = client

    async def put(self, key: str, value: bytes, expiration: int) -> None:
        if expiration <= 0 or expiration > MAX_EXPIRATION:
            raise InvalidArgument(f"Invalid expiration: {expiration}")
        try:
            stored = await self._client.set(key.encode(), value, exptime=expiration)
        except _TRANSPORT_ERRORS as err:
            logger.error("Memcached put failed for key=%s: %s", key, err)
            raise BackendUnavailable() from err
        if not stored:
            raise BackendUnavailable("Memcached refused to store the secret")

    async def get(self, key: str) -> bytes:
        try:
            value = await self._client.get(key.encode())
        except _TRANSPORT_ERRORS as err:
            logger.error("Memcached get failed for key=%s: %s", key, err)
            raise BackendUnavailable() from err
        if value is None:
            raise NotFound()
        return value

    async def delete(self, key: str) -> bool:
        try:
            return bool(await self._client.delete(key.encode()))
        except _TRANSPORT_ERRORS as err:
            logger.error("Memcached delete failed for key=%s: %s", key, err)
            raise BackendUnavailable() from err

    async def close(self) -> None:
        await self._client.close()
