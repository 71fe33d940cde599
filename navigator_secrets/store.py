"""
SecretStore — create, fetch and destroy client-encrypted secrets.

Provides the public API of the secret lifecycle:
- ``create(message, expiration, one_time, authorized)`` — validate and store
- ``fetch(secret_id)`` — read a secret, consuming it when it is one-time
- ``delete(secret_id)`` — destroy a secret before it expires

Security Note:
    Messages are opaque ciphertext. Never log them; only log ids and
    policy decisions. Expiry is enforced by the backend's native TTL.
"""
import logging

from .backends.abstract import Backend
from .conf import DEFAULT_MAX_LENGTH, VALID_EXPIRATIONS
from .exceptions import Forbidden, InvalidExpiration, NotFound, TooLarge
from .keys import generate_id
from .secret import Secret

logger = logging.getLogger("navigator.secrets")


class SecretStore:
    """Time-bounded store of one-time or expiring secrets.

    Non one-time secrets can be restricted to authorized callers with
    ``force_one_time``. The store never retries a failed backend call.
    """

    def __init__(
        self,
        backend: Backend,
        max_length: int = DEFAULT_MAX_LENGTH,
        force_one_time: bool = False,
    ):
        self._backend = backend
        self._max_length = max_length
        self._force_one_time = force_one_time

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def max_length(self) -> int:
        return self._max_length

    @property
    def force_one_time(self) -> bool:
        return self._force_one_time

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(
        self,
        message: str,
        expiration: int,
        one_time: bool,
        authorized: bool,
    ) -> None:
        """Check a new secret against the deployment limits.

        Raises:
            TooLarge: If the UTF-8 encoded message exceeds ``max_length`` bytes.
            InvalidExpiration: If expiration is not an accepted lifetime.
            Forbidden: If a non one-time secret is requested by an
                unauthorized caller while one-time secrets are forced.
        """
        if len(message.encode("utf-8")) > self._max_length:
            raise TooLarge()
        if expiration not in VALID_EXPIRATIONS:
            raise InvalidExpiration()
        if self._force_one_time and not one_time and not authorized:
            raise Forbidden()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def create(
        self,
        message: str,
        expiration: int,
        one_time: bool = True,
        authorized: bool = False,
    ) -> str:
        """Validate and store a new secret.

        Args:
            message: Client-encrypted payload.
            expiration: Lifetime in seconds.
            one_time: Destroy the secret on its first read.
            authorized: Whether the caller passed authorization.

        Returns:
            The new secret id.

        Raises:
            TooLarge, InvalidExpiration, Forbidden: See ``validate``.
            BackendUnavailable: If the backend cannot be reached.
        """
        self.validate(message, expiration, one_time, authorized)
        secret = Secret(message=message, expiration=expiration, one_time=one_time)
        secret_id = generate_id()
        await self._backend.put(secret_id, secret.serialize(), expiration)
        logger.debug(
            "Secret created: id=%s expiration=%d one_time=%s",
            secret_id, expiration, one_time,
        )
        return secret_id

    async def fetch(self, secret_id: str) -> Secret:
        """Return a stored secret.

        One-time secrets are deleted right after the read. When two requests
        race on the same id only the one whose delete removed the entry gets
        the secret; the other sees ``NotFound``.

        Raises:
            NotFound: If the secret expired, was consumed or never existed.
            BackendUnavailable: If the backend cannot be reached.
        """
        secret = Secret.deserialize(await self._backend.get(secret_id))
        if secret.one_time:
            if not await self._backend.delete(secret_id):
                logger.info("One-time secret consumed concurrently: id=%s", secret_id)
                raise NotFound()
            logger.debug("One-time secret consumed: id=%s", secret_id)
        return secret

    async def delete(self, secret_id: str) -> None:
        """Destroy a secret before it expires.

        Raises:
            NotFound: If there was nothing to delete.
            BackendUnavailable: If the backend cannot be reached.
        """
        if not await self._backend.delete(secret_id):
            raise NotFound()
        logger.debug("Secret deleted: id=%s", secret_id)
