"""
Server Configuration — validated startup parameters.

Values are read from environment variables named after the option in upper
case with dashes replaced by underscores:
    DATABASE = memcached | redis
    MAX_LENGTH = <int>
    FORCE_ONETIME_SECRETS = true | false
    AUTH_TYPE = no-auth | jwt

Command-line flags override the environment (see ``navigator_secrets.cli``).

Security Note:
    Never log secret payloads or credentials. Only log ids and settings.
"""
import os
import logging
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger("navigator.secrets")

DEFAULT_MAX_LENGTH = 10000

# Accepted secret lifetimes in seconds: one hour, one day, one week.
VALID_EXPIRATIONS = frozenset({3600, 86400, 604800})

SUPPORTED_DATABASES = ("memcached", "redis")
SUPPORTED_AUTH_TYPES = ("no-auth", "jwt")

_TRUE_VALUES = ("1", "true", "yes", "on")


def env_name(option: str) -> str:
    """Return the environment variable name for a config option."""
    return option.upper().replace("-", "_")


def env_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUE_VALUES


class ServerConfig(BaseModel):
    """Validated server configuration."""

    address: str = ""
    port: int = Field(default=1337, ge=1, le=65535)
    database: str = Field(default="memcached")
    memcached: str = Field(default="localhost:11211")
    redis: str = Field(default="redis://localhost:6379/0")
    max_length: int = Field(default=DEFAULT_MAX_LENGTH, ge=1)
    force_onetime_secrets: bool = False
    auth_type: str = Field(default="no-auth")
    auth_config: str = Field(default="auth.yaml")
    tls_cert: str = ""
    tls_key: str = ""
    log_level: str = Field(default="INFO")

    @field_validator("database")
    @classmethod
    def validate_database(cls, v: str) -> str:
        """Validate the storage backend is supported."""
        if v not in SUPPORTED_DATABASES:
            raise ValueError(
                f"Unsupported database {v!r}, expected 'memcached' or 'redis'"
            )
        return v

    @field_validator("auth_type")
    @classmethod
    def validate_auth_type(cls, v: str) -> str:
        """Validate the authorization mode is supported."""
        if v not in SUPPORTED_AUTH_TYPES:
            raise ValueError(
                f"Unsupported auth type {v!r}, expected 'no-auth' or 'jwt'"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_tls_pair(self) -> "ServerConfig":
        """Ensure TLS certificate and key are given together."""
        if bool(self.tls_cert) != bool(self.tls_key):
            raise ValueError("tls_cert and tls_key must be provided together")
        return self

    @property
    def use_tls(self) -> bool:
        return bool(self.tls_cert and self.tls_key)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ServerConfig":
        """Create ServerConfig from environment variables.

        Args:
            overrides: Explicit values (e.g. parsed CLI flags) that take
                precedence over the environment. ``None`` values are ignored.

        Returns:
            Populated ServerConfig instance.
        """
        values: dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            raw = os.environ.get(env_name(name))
            if raw is None:
                continue
            if field.annotation is bool:
                values[name] = env_bool(raw)
            else:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        config = cls(**values)
        logger.debug(
            "Loaded config: database=%s auth_type=%s max_length=%d force_onetime=%s",
            config.database, config.auth_type,
            config.max_length, config.force_onetime_secrets,
        )
        return config
