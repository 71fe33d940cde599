"""Authorization disabled: everyone is anonymous."""
from typing import Optional

from aiohttp import web

from .base import Authorizer
from .credentials import User


class NoAuth(Authorizer):
    """Always succeeds, never grants privileges."""

    name = "no-auth"

    async def authorize(
        self, request: web.Request
    ) -> tuple[Optional[str], Optional[User]]:
        return None, None

    async def authorize_request(self, request: web.Request) -> Optional[User]:
        return None
