"""
Credential Store — users and token signing secret.

The credential resource is a YAML document:

    secret: <signing secret>
    users:
      - username: admin
        password: <password>
        role: admin

Security Note:
    Passwords are kept in cleartext in this file, so it must only be
    readable by the service account. The signing secret protects every
    issued token; rotating it invalidates all of them.
"""
import os
import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError
from cryptography.hazmat.primitives import constant_time

from ..exceptions import CredentialsError
from ..keys import PASSWORD_LENGTH, SECRET_KEY_LENGTH, generate_key

logger = logging.getLogger("navigator.secrets.auth")

DEFAULT_ADMIN = "admin"


class User(BaseModel):
    """A known user; ``password`` is empty for users rebuilt from a token."""

    username: str
    password: str = ""
    role: str = ""

    model_config = {"frozen": True}

    def __repr__(self) -> str:
        return f"<User username={self.username!r} role={self.role!r}>"


class CredentialStore(BaseModel):
    """Users and signing secret, read-only once loaded."""

    secret: str = Field(min_length=1)
    users: list[User] = Field(default_factory=list)

    model_config = {"frozen": True}

    def validate_user(self, username: str, password: str) -> Optional[User]:
        """Return the stored user matching username and password.

        Every stored user is compared in constant time so the response time
        does not reveal which part of the pair was wrong.
        """
        match = None
        given_name = username.encode("utf-8")
        given_pass = password.encode("utf-8")
        for user in self.users:
            name_ok = constant_time.bytes_eq(user.username.encode("utf-8"), given_name)
            pass_ok = constant_time.bytes_eq(user.password.encode("utf-8"), given_pass)
            if name_ok and pass_ok and match is None:
                match = user
        return match

    @property
    def signing_key(self) -> bytes:
        return self.secret.encode("utf-8")

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Union[str, Path]) -> "CredentialStore":
        """Load the credential resource.

        Raises:
            CredentialsError: If the file is missing or malformed.
        """
        try:
            with open(path, "r", encoding="utf-8") as fp:
                data = yaml.safe_load(fp)
        except OSError as err:
            raise CredentialsError(f"Cannot read {path}: {err}") from err
        except yaml.YAMLError as err:
            raise CredentialsError(f"Malformed credential file {path}: {err}") from err
        if not isinstance(data, dict):
            raise CredentialsError(f"Malformed credential file {path}")
        try:
            store = cls.model_validate(data)
        except ValidationError as err:
            raise CredentialsError(f"Invalid credential file {path}: {err}") from err
        logger.debug("Loaded %d user(s) from %s", len(store.users), path)
        return store

    def save(self, path: Union[str, Path]) -> None:
        """Persist the credential resource, readable by the owner only.

        Raises:
            CredentialsError: If the file cannot be written.
        """
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                yaml.safe_dump(self.model_dump(), fp, sort_keys=False)
        except OSError as err:
            raise CredentialsError(f"Cannot write {path}: {err}") from err

    @classmethod
    def generate(cls, admin_name: str = DEFAULT_ADMIN) -> "CredentialStore":
        """Create a store with a fresh signing secret and one admin user."""
        return cls(
            secret=generate_key(SECRET_KEY_LENGTH),
            users=[
                User(
                    username=admin_name,
                    password=generate_key(PASSWORD_LENGTH),
                    role="admin",
                )
            ],
        )


def load_or_create(
    path: Union[str, Path],
    admin_name: str = DEFAULT_ADMIN,
) -> tuple[CredentialStore, bool]:
    """Load the credential resource, creating it on first start.

    When the file is missing or malformed a new store is generated and
    persisted, and the admin password is logged once. It is never shown again.

    Returns:
        Tuple of (store, created).

    Raises:
        CredentialsError: If a new store cannot be persisted.
    """
    logger.info("Loading credentials from %s", path)
    try:
        return CredentialStore.load(path), False
    except CredentialsError as err:
        logger.warning("Failed to load credentials, creating a new file: %s", err)
    store = CredentialStore.generate(admin_name)
    store.save(path)
    admin = store.users[0]
    logger.warning("--------------------------------")
    logger.warning("Preset admin: name=%s password=%s", admin.username, admin.password)
    logger.warning("Please change that password")
    logger.warning("--------------------------------")
    return store, True
