"""Navigator Secrets — one-time, expiring storage for client-encrypted secrets.

Security Note (Threat Model):
    The server only ever sees ciphertext; encryption and decryption happen in
    the client. Anyone holding a secret id can read that secret until it
    expires or, for one-time secrets, until its first read.
"""

from .version import __version__
from .conf import ServerConfig
from .exceptions import (
    SecretsError,
    TooLarge,
    InvalidExpiration,
    InvalidArgument,
    Forbidden,
    NotFound,
    BackendUnavailable,
    AuthError,
    NoCredentials,
    InvalidCredentials,
    TokenExpired,
    CredentialsError,
)
from .secret import Secret
from .store import SecretStore

__all__ = [
    "__version__",
    "ServerConfig",
    "Secret",
    "SecretStore",
    "SecretsError",
    "TooLarge",
    "InvalidExpiration",
    "InvalidArgument",
    "Forbidden",
    "NotFound",
    "BackendUnavailable",
    "AuthError",
    "NoCredentials",
    "InvalidCredentials",
    "TokenExpired",
    "CredentialsError",
]
