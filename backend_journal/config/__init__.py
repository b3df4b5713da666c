"""
Configuration management for the trade journal backend.

Loads settings from environment variables and an optional .env file at the
project root. Exposes a single source of truth for service configuration.
"""

from backend_journal.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
