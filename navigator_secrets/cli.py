"""
Navigator Secrets server entry point.

Usage:
    navigator-secrets --database redis --redis redis://localhost:6379/0
    navigator-secrets --auth-type jwt --auth-config auth.yaml --force-onetime-secrets

Every flag can also be given as an environment variable (``MAX_LENGTH``,
``AUTH_TYPE``...); flags win.
"""
import argparse
import logging
import ssl
import sys
from typing import Optional

from aiohttp import web
from pydantic import ValidationError

from .auth import get_authorizer
from .backends import get_backend
from .conf import ServerConfig
from .exceptions import CredentialsError
from .handlers import RUNNER_OPTIONS, create_app
from .version import __description__, __version__

logger = logging.getLogger("navigator.secrets")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="navigator-secrets", description=__description__)
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--address", help="listen address (default 0.0.0.0)")
    parser.add_argument("--port", type=int, help="listen port (default 1337)")
    parser.add_argument(
        "--database", choices=("memcached", "redis"),
        help="database backend (default memcached)",
    )
    parser.add_argument("--memcached", help="memcached address (default localhost:11211)")
    parser.add_argument("--redis", help="Redis URL (default redis://localhost:6379/0)")
    parser.add_argument(
        "--max-length", type=int, help="max length of encrypted secret (default 10000)"
    )
    parser.add_argument(
        "--force-onetime-secrets", action="store_const", const=True,
        help="reject non one-time secrets from unauthorized callers",
    )
    parser.add_argument(
        "--auth-type", choices=("no-auth", "jwt"), help="auth type (default no-auth)"
    )
    parser.add_argument("--auth-config", help="jwt credential file (default auth.yaml)")
    parser.add_argument("--tls-cert", help="path to TLS certificate")
    parser.add_argument("--tls-key", help="path to TLS key")
    parser.add_argument("--log-level", help="log level (default INFO)")
    return parser


def load_config(argv: Optional[list[str]] = None) -> ServerConfig:
    args = build_parser().parse_args(argv)
    return ServerConfig.from_env(**vars(args))


def ssl_context(config: ServerConfig) -> Optional[ssl.SSLContext]:
    if not config.use_tls:
        return None
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.load_cert_chain(config.tls_cert, config.tls_key)
    return context


def main(argv: Optional[list[str]] = None) -> int:
    try:
        config = load_config(argv)
    except ValidationError as err:
        print(f"Invalid configuration: {err}", file=sys.stderr)
        return 2
    configure_logging(config.log_level)

    try:
        authorizer = get_authorizer(config)
    except CredentialsError as err:
        logger.critical("Failed to create credentials: %s", err)
        return 1
    try:
        backend = get_backend(config)
    except ValueError as err:
        logger.critical("Invalid %s address: %s", config.database, err)
        return 1
    logger.debug("Configured %r with %s", backend, authorizer.name)

    app = create_app(config, backend, authorizer)
    logger.info(
        "Starting navigator-secrets on %s:%d", config.address or "0.0.0.0", config.port
    )
    web.run_app(
        app,
        host=config.address or None,
        port=config.port,
        ssl_context=ssl_context(config),
        print=None,
        **RUNNER_OPTIONS,
    )
    return 0
