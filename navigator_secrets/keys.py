"""
Identifier and key material generation.

Secret ids are random UUID4 values: 122 bits drawn from the OS CSPRNG, so
accidental or guessed collisions are not a practical concern.
"""
import uuid
import base64
import secrets

SECRET_KEY_LENGTH = 64  # signing secret for issued tokens
PASSWORD_LENGTH = 10  # generated admin password


def generate_id() -> str:
    """Return a fresh, unguessable secret identifier."""
    return str(uuid.uuid4())


def generate_key(length: int) -> str:
    """Generate a random URL-safe key of exactly ``length`` characters.

    Args:
        length: Number of characters to return. Also the number of random
            bytes drawn, so the result always carries >= 6 bits per character.

    Returns:
        URL-safe base64 string.

    Raises:
        ValueError: If length is not positive.
    """
    if length <= 0:
        raise ValueError("Key length must be positive")
    raw = secrets.token_bytes(length)
    return base64.urlsafe_b64encode(raw).decode("ascii")[:length]
