"""
Database abstraction layer — wallets, users and the trade ledger.

SQLite via SQLAlchemy by default; any SQLAlchemy URL works through the same
Database facade.
"""

from backend_journal.database.database import (
    TABLE_TRADES,
    TABLE_USERS,
    TABLE_WALLET,
    Database,
    DatabaseBackend,
    SQLAlchemyBackend,
    get_database,
)
from backend_journal.database.models import Trade, User, Wallet

__all__ = [
    "TABLE_TRADES",
    "TABLE_USERS",
    "TABLE_WALLET",
    "Database",
    "DatabaseBackend",
    "SQLAlchemyBackend",
    "get_database",
    "Trade",
    "User",
    "Wallet",
]
