"""
HTTP handlers — aiohttp routes over SecretStore and Authorizer.

Routes:
    POST   /secret, /file         create a secret, returns {"message": id}
    GET    /secret/{id}, /file/{id}
    DELETE /secret/{id}, /file/{id}
    POST   /login                 issue a token
    GET    /config                public server settings
"""
import logging
from typing import Any, Optional

import orjson
from aiohttp import web
from pydantic import BaseModel, ValidationError

from .auth import Authorizer, NoAuth
from .backends import Backend
from .conf import ServerConfig
from .exceptions import SecretsError
from .store import SecretStore

logger = logging.getLogger("navigator.secrets.http")

STORE_KEY = web.AppKey("store", SecretStore)
AUTH_KEY = web.AppKey("authorizer", Authorizer)
CONFIG_KEY = web.AppKey("config", ServerConfig)

_UUID = "[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"

# abandon the in-flight backend call when the client disconnects
RUNNER_OPTIONS = {"handler_cancellation": True}

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}


class SecretRequest(BaseModel):
    message: str
    expiration: int
    one_time: bool = True


def _dumps(obj: Any) -> str:
    return orjson.dumps(obj).decode("utf-8")


def json_response(data: Any, status: int = 200) -> web.Response:
    return web.json_response(data, status=status, dumps=_dumps)


# ---------------------------------------------------------------------------
# Middlewares
# ---------------------------------------------------------------------------

@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Translate domain errors into ``{"message": ...}`` responses."""
    try:
        return await handler(request)
    except SecretsError as err:
        if err.status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, err)
        return json_response({"message": err.message}, status=err.status)


@web.middleware
async def security_headers_middleware(request: web.Request, handler) -> web.StreamResponse:
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers.update(SECURITY_HEADERS)
        raise
    response.headers.update(SECURITY_HEADERS)
    return response


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

async def create_secret(request: web.Request) -> web.Response:
    store = request.app[STORE_KEY]
    try:
        body = SecretRequest.model_validate(orjson.loads(await request.read()))
    except (orjson.JSONDecodeError, ValidationError):
        return json_response({"message": "Unable to parse json"}, status=400)
    authorized = False
    if not body.one_time:
        authorized = await request.app[AUTH_KEY].is_authorized(request)
    secret_id = await store.create(
        body.message, body.expiration, body.one_time, authorized,
    )
    return json_response({"message": secret_id})


async def get_secret(request: web.Request) -> web.Response:
    secret = await request.app[STORE_KEY].fetch(request.match_info["key"])
    return json_response(secret.model_dump())


async def delete_secret(request: web.Request) -> web.Response:
    await request.app[STORE_KEY].delete(request.match_info["key"])
    return web.Response(status=204)


async def login(request: web.Request) -> web.Response:
    token, user = await request.app[AUTH_KEY].authorize(request)
    return json_response({
        "token": token,
        "username": user.username if user else None,
        "role": user.role if user else None,
    })


async def get_config(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    return json_response({
        "FORCE_ONETIME_SECRETS": config.force_onetime_secrets,
        "AUTH_TYPE": config.auth_type,
        "MAX_LENGTH": config.max_length,
    })


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def create_app(
    config: ServerConfig,
    backend: Backend,
    authorizer: Optional[Authorizer] = None,
) -> web.Application:
    """Build the web application around an already selected backend."""
    app = web.Application(
        middlewares=[security_headers_middleware, error_middleware],
    )
    app[CONFIG_KEY] = config
    app[AUTH_KEY] = authorizer or NoAuth()
    app[STORE_KEY] = SecretStore(
        backend,
        max_length=config.max_length,
        force_one_time=config.force_onetime_secrets,
    )
    for prefix in ("/secret", "/file"):
        app.router.add_post(prefix, create_secret)
        app.router.add_get(f"{prefix}/{{key:{_UUID}}}", get_secret)
        app.router.add_delete(f"{prefix}/{{key:{_UUID}}}", delete_secret)
    app.router.add_post("/login", login)
    app.router.add_get("/config", get_config)

    async def close_backend(app: web.Application) -> None:
        await backend.close()

    app.on_cleanup.append(close_backend)
    return app
