"""
Token authorization — username/password login issuing signed JWTs.

Issued tokens are HS256 JWTs carrying the claims ``name``, ``role`` and
``exp``. They are never stored; a token is valid while its signature checks
out against the credential store secret and it has not expired.

Security Note:
    Never log tokens or passwords.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import orjson
from aiohttp import web
from pydantic import BaseModel, ValidationError

from ..exceptions import InvalidCredentials, NoCredentials, TokenExpired
from .base import Authorizer, extract_token
from .credentials import CredentialStore, User

logger = logging.getLogger("navigator.secrets.auth")

ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=24)
_REQUIRED_CLAIMS = ["exp", "name", "role"]


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenAuth(Authorizer):
    """Validates users against a CredentialStore and signs tokens."""

    name = "jwt"

    def __init__(self, credentials: CredentialStore, token_ttl: timedelta = TOKEN_TTL):
        self._credentials = credentials
        self._ttl = token_ttl

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def issue_token(self, user: User) -> str:
        """Sign a token for user, valid for the configured TTL."""
        claims = {
            "name": user.username,
            "role": user.role,
            "exp": datetime.now(timezone.utc) + self._ttl,
        }
        return jwt.encode(claims, self._credentials.signing_key, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> User:
        """Check a token signature and expiry.

        Returns:
            The user embedded in the token (without password).

        Raises:
            TokenExpired: If the token is past its validity window.
            InvalidCredentials: If the token is malformed or badly signed.
        """
        try:
            claims = jwt.decode(
                token,
                self._credentials.signing_key,
                algorithms=[ALGORITHM],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as err:
            raise TokenExpired() from err
        except jwt.InvalidTokenError as err:
            logger.debug("Rejected token: %s", type(err).__name__)
            raise InvalidCredentials("Invalid token") from err
        try:
            return User(username=claims["name"], role=claims["role"])
        except ValidationError as err:
            raise InvalidCredentials("Invalid token") from err

    # ------------------------------------------------------------------
    # Login
    # ------------------------------------------------------------------

    def login(self, body: bytes) -> tuple[str, User]:
        """Validate a JSON ``{"username", "password"}`` body.

        Returns:
            Tuple of (token, user).

        Raises:
            NoCredentials: If the body is empty or not a credentials object.
            InvalidCredentials: If the username or password is wrong.
        """
        if not body:
            raise NoCredentials()
        try:
            request = LoginRequest.model_validate(orjson.loads(body))
        except (orjson.JSONDecodeError, ValidationError) as err:
            raise NoCredentials("Invalid request") from err
        user = self._credentials.validate_user(request.username, request.password)
        if user is None:
            logger.info("Failed login for user=%s", request.username)
            raise InvalidCredentials()
        logger.info("User logged in: user=%s role=%s", user.username, user.role)
        return self.issue_token(user), user

    # ------------------------------------------------------------------
    # Authorizer
    # ------------------------------------------------------------------

    async def authorize(
        self, request: web.Request
    ) -> tuple[Optional[str], Optional[User]]:
        return self.login(await request.read())

    async def authorize_request(self, request: web.Request) -> Optional[User]:
        token = extract_token(request.headers)
        if token is None:
            raise NoCredentials("No auth token found")
        return self.verify_token(token)
