"""Abstract storage backend."""
from abc import ABC, abstractmethod


class Backend(ABC):
    """Key-value storage with native expiration.

    Expired entries are removed by the storage service itself; nothing in
    this process sweeps or evicts them. Implementations must be safe to share
    between concurrent requests.
    """

    name: str = "abstract"

    @abstractmethod
    async def put(self, key: str, value: bytes, expiration: int) -> None:
        """Store value, visible for at most ``expiration`` seconds.

        Raises:
            InvalidArgument: If expiration is outside the supported range.
            BackendUnavailable: On connection or transport failure.
        """

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Return the stored value without modifying it.

        Raises:
            NotFound: If the key is absent or expired.
            BackendUnavailable: On connection or transport failure.
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a key.

        Returns:
            True if this call removed the entry, False if it was absent.

        Raises:
            BackendUnavailable: On connection or transport failure.
        """

    async def close(self) -> None:
        """Release client connections."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} backend={self.name}>"
