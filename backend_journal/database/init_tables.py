"""
Create the trade journal tables (wallet, users, trades).

Usage:
    python -m backend_journal.database.init_tables

Safe to run multiple times.
"""

from __future__ import annotations

from backend_journal.config.env import get_database_url
from backend_journal.database.database import get_database
from backend_journal.journal_logging import get_logger

logger = get_logger(__name__)


def main() -> int:
    url = get_database_url()
    db = get_database(url)
    db.dispose()
    logger.info("init_tables_done", url=url.split("?")[0].split("//")[-1])
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
