"""
Environment variable loading for the trade journal.

- DATABASE_URL: SQLAlchemy URL (default: sqlite:///journal.db)
- JWT_SECRET: HMAC secret for session tokens (required)
- JWT_TTL_HOURS: token lifetime in hours (default: 3)
- BCRYPT_ROUNDS: bcrypt cost factor (default: 12)
- API_HOST / API_PORT: bind address for the HTTP server (default: 127.0.0.1:9000)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_journal/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_DATABASE_URL = "sqlite:///journal.db"
DEFAULT_JWT_TTL_HOURS = 3
DEFAULT_BCRYPT_ROUNDS = 12
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 9000


def load_journal_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def _env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def get_database_url() -> str:
    """Return DATABASE_URL, falling back to a SQLite file in the working directory."""
    load_journal_env()
    return _env_str("DATABASE_URL", DEFAULT_DATABASE_URL)


def get_jwt_secret() -> str:
    """Return JWT_SECRET or an empty string when unset."""
    load_journal_env()
    return _env_str("JWT_SECRET")


def get_jwt_ttl_hours() -> int:
    load_journal_env()
    return _env_int("JWT_TTL_HOURS", DEFAULT_JWT_TTL_HOURS)


def get_bcrypt_rounds() -> int:
    load_journal_env()
    return _env_int("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)


def get_api_bind() -> tuple[str, int]:
    """Return (host, port) for the HTTP server."""
    load_journal_env()
    return _env_str("API_HOST", DEFAULT_API_HOST), _env_int("API_PORT", DEFAULT_API_PORT)
