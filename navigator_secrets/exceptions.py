"""
Navigator Secrets exceptions.

Every error carries a client-safe ``message`` and the HTTP ``status`` the
web layer answers with. Messages never reveal whether an id existed.
"""
from typing import Optional


class SecretsError(Exception):
    """Base error for the secret store."""

    status: int = 500
    message: str = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class TooLarge(SecretsError):
    status = 413
    message = "The encrypted message is too long"


class InvalidExpiration(SecretsError):
    status = 400
    message = "Invalid expiration specified"


class InvalidArgument(SecretsError):
    status = 400
    message = "Invalid argument"


class Forbidden(SecretsError):
    status = 403
    message = "Secret must be one time download"


class NotFound(SecretsError):
    """Expired, already consumed or never existed; deliberately the same."""

    status = 404
    message = "Secret not found"


class BackendUnavailable(SecretsError):
    status = 503
    message = "Secret storage is unavailable"


class AuthError(SecretsError):
    """Base for authorization failures, all treated as unauthorized."""

    status = 401
    message = "Unauthorized"


class NoCredentials(AuthError):
    message = "No credentials provided"


class InvalidCredentials(AuthError):
    message = "Username or password is incorrect"


class TokenExpired(AuthError):
    message = "Token has expired"


class CredentialsError(SecretsError):
    """The credential resource cannot be read or written."""

    message = "Credential configuration error"
