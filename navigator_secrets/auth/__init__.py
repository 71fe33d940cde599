"""Authorization: who may create non one-time secrets."""
from ..conf import ServerConfig
from .base import Authorizer, extract_token
from .credentials import CredentialStore, User, load_or_create
from .noauth import NoAuth
from .tokens import TokenAuth


def get_authorizer(config: ServerConfig) -> Authorizer:
    """Build the authorizer selected by ``config.auth_type``.

    For token auth the credential resource is loaded, or created and
    persisted on first start.

    Raises:
        CredentialsError: If the credential resource cannot be created.
    """
    if config.auth_type == "jwt":
        credentials, _ = load_or_create(config.auth_config)
        return TokenAuth(credentials)
    return NoAuth()


__all__ = [
    "Authorizer",
    "NoAuth",
    "TokenAuth",
    "CredentialStore",
    "User",
    "extract_token",
    "get_authorizer",
    "load_or_create",
]
