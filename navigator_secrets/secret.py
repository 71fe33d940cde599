"""
Secret entity — the stored record and its wire encoding.

The message is opaque ciphertext produced by the client; it is never
inspected, only measured and stored.
"""
import logging

import orjson
from pydantic import BaseModel, Field, ValidationError

from .exceptions import NotFound

logger = logging.getLogger("navigator.secrets")


class Secret(BaseModel):
    """A client-encrypted message with its lifetime policy."""

    message: str
    expiration: int = Field(gt=0)
    one_time: bool = True

    model_config = {"frozen": True}

    def serialize(self) -> bytes:
        """Encode the secret for storage.

        Returns:
            orjson-encoded bytes.
        """
        return orjson.dumps(self.model_dump())

    @classmethod
    def deserialize(cls, data: bytes) -> "Secret":
        """Decode a stored secret.

        A value that cannot be decoded is indistinguishable, for the caller,
        from one that does not exist.

        Raises:
            NotFound: If data is not a valid encoded secret.
        """
        try:
            return cls.model_validate(orjson.loads(data))
        except (orjson.JSONDecodeError, ValidationError) as err:
            logger.error("Unable to decode stored secret: %s", type(err).__name__)
            raise NotFound() from err
