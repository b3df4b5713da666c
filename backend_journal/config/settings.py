"""
Application settings.

Typed view over the environment (see config/env.py). The API builds one
Settings at startup and hands it to the services that need it; tests
construct Settings directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from backend_journal.config.env import (
    DEFAULT_API_HOST,
    DEFAULT_API_PORT,
    DEFAULT_BCRYPT_ROUNDS,
    DEFAULT_DATABASE_URL,
    DEFAULT_JWT_TTL_HOURS,
    get_api_bind,
    get_bcrypt_rounds,
    get_database_url,
    get_jwt_secret,
    get_jwt_ttl_hours,
)
from backend_journal.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one process."""

    jwt_secret: str
    database_url: str = DEFAULT_DATABASE_URL
    jwt_ttl_hours: int = DEFAULT_JWT_TTL_HOURS
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    log_level: str = "info"


def get_settings() -> Settings:
    """
    Return the current application settings.

    Raises ConfigurationError when JWT_SECRET is not set: tokens cannot be
    issued or verified without it.
    """
    secret = get_jwt_secret()
    if not secret:
        raise ConfigurationError("JWT_SECRET must be set")
    host, port = get_api_bind()
    return Settings(
        jwt_secret=secret,
        database_url=get_database_url(),
        jwt_ttl_hours=get_jwt_ttl_hours(),
        bcrypt_rounds=get_bcrypt_rounds(),
        api_host=host,
        api_port=port,
        log_level=(os.getenv("LOG_LEVEL") or "info").strip().lower(),
    )
