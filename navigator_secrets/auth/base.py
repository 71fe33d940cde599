"""Authorizer interface."""
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Optional

from aiohttp import web

from ..exceptions import AuthError
from .credentials import User

TOKEN_HEADER = "Token"
BEARER_PREFIX = "bearer "


def extract_token(headers: Mapping[str, str]) -> Optional[str]:
    """Return the bearer token of a request, if any.

    ``Authorization: Bearer <token>`` is preferred; the plain ``Token``
    header is accepted for older clients.
    """
    auth = headers.get("Authorization", "")
    if auth.lower().startswith(BEARER_PREFIX):
        return auth[len(BEARER_PREFIX):].strip() or None
    return headers.get(TOKEN_HEADER) or None


class Authorizer(ABC):
    """Decides whether a request carries valid credentials."""

    name: str = "abstract"

    @abstractmethod
    async def authorize(
        self, request: web.Request
    ) -> tuple[Optional[str], Optional[User]]:
        """Validate a login request and issue a token.

        Returns:
            Tuple of (token, user); both None when authorization is disabled.

        Raises:
            NoCredentials, InvalidCredentials: On a failed login.
        """

    @abstractmethod
    async def authorize_request(self, request: web.Request) -> Optional[User]:
        """Return the user a request is authenticated as.

        Raises:
            NoCredentials, InvalidCredentials, TokenExpired: If the request
                does not carry a valid token.
        """

    async def is_authorized(self, request: web.Request) -> bool:
        """Whether the request may create non one-time secrets.

        Any authorization failure means "not authorized"; there is no
        partial trust.
        """
        try:
            user = await self.authorize_request(request)
        except AuthError:
            return False
        return user is not None
