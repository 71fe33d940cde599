"""Storage backends with native expiration."""
from ..conf import ServerConfig
from .abstract import Backend
from .memcached import MemcachedBackend
from .redis import RedisBackend


def get_backend(config: ServerConfig) -> Backend:
    """Build the backend selected by ``config.database``."""
    if config.database == "redis":
        return RedisBackend(config.redis)
    if config.database == "memcached":
        return MemcachedBackend(config.memcached)
    raise ValueError(f"Unsupported database: {config.database}")


__all__ = [
    "Backend",
    "RedisBackend",
    "MemcachedBackend",
    "get_backend",
]
