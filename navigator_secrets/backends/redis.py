"""
Redis backend — ``SET key value EX ttl`` / ``GET`` / ``DEL``.

The client keeps its own connection pool and is shared by all requests.
"""
import logging
from typing import Any

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from ..exceptions import BackendUnavailable, InvalidArgument, NotFound
from .abstract import Backend

logger = logging.getLogger("navigator.secrets.backends")

# connection failures and server-side refusals (READONLY, OOM, LOADING...)
_BACKEND_ERRORS = (RedisError, OSError)


class RedisBackend(Backend):
    """Secrets stored as plain Redis strings with a native TTL."""

    name = "redis"

    def __init__(self, url: str = "redis://localhost:6379/0", client: Any = None):
        self._url = url
        if client is None:
            # raises ValueError on a malformed URL, fatal at startup
            client = aioredis.Redis.from_url(url)
        self._redis = client

    async def put(self, key: str, value: bytes, expiration: int) -> None:
        if expiration <= 0:
            raise InvalidArgument(f"Invalid expiration: {expiration}")
        try:
            await self._redis.set(key, value, ex=expiration)
        except _BACKEND_ERRORS as err:
            logger.error("Redis put failed for key=%s: %s", key, err)
            raise BackendUnavailable() from err

    async def get(self, key: str) -> bytes:
        try:
            value = await self._redis.get(key)
        except _BACKEND_ERRORS as err:
            logger.error("Redis get failed for key=%s: %s", key, err)
            raise BackendUnavailable() from err
        if value is None:
            raise NotFound()
        return value

    async def delete(self, key: str) -> bool:
        try:
            removed = await self._redis.delete(key)
        except _BACKEND_ERRORS as err:
            logger.error("Redis delete failed for key=%s: %s", key, err)
            raise BackendUnavailable() from err
        return removed > 0

    async def close(self) -> None:
        await self._redis.aclose()
