"""
Wallet lifecycle: allocate with zero balance, read, set balance.

Trades never move the balance; update_balance is the only mutation.
"""

from __future__ import annotations

import math
import uuid

from backend_journal.core.exceptions import NotFoundError, StorageFault, ValidationError
from backend_journal.database import TABLE_WALLET, Database, Wallet
from backend_journal.journal_logging import get_logger
from backend_journal.utils.dates import utc_now
from backend_journal.utils.wallet_utils import is_valid_public_hash, new_public_hash

logger = get_logger(__name__)


class WalletService:
    def __init__(self, db: Database) -> None:
        self._db = db

    def create(self) -> Wallet:
        """Allocate a wallet with balance 0 and a fresh public hash; returns the stored row."""
        public_hash = new_public_hash()
        if not is_valid_public_hash(public_hash):
            raise StorageFault("generated wallet hash is malformed")
        now = utc_now()
        wallet = Wallet(
            id=str(uuid.uuid4()),
            public_hash=public_hash,
            balance=0.0,
            created_at=now,
            updated_at=now,
        )
        self._db.insert(wallet)
        stored = self.find_by_hash(public_hash)
        if stored is None:
            raise NotFoundError("wallet", wallet.id)
        logger.info("wallet_created", wallet_id=stored.id)
        return stored

    def get(self, wallet_id: str) -> Wallet:
        wallet = self._db.find_by_id(TABLE_WALLET, wallet_id)
        if wallet is None:
            raise NotFoundError("wallet", wallet_id)
        return wallet

    def find_by_hash(self, public_hash: str) -> Wallet | None:
        rows = self._db.find_by_filter(TABLE_WALLET, public_hash=public_hash)
        return rows[0] if rows else None

    def exists(self, wallet_id: str) -> bool:
        return self._db.find_by_id(TABLE_WALLET, wallet_id) is not None

    def list(self) -> list[Wallet]:
        return self._db.list(TABLE_WALLET)

    def update_balance(self, wallet_id: str, balance: float) -> Wallet:
        """Set the balance outright (not a delta)."""
        if not math.isfinite(balance):
            raise ValidationError("balance must be a finite number")
        if not self._db.update(TABLE_WALLET, wallet_id, {"balance": balance, "updated_at": utc_now()}):
            raise NotFoundError("wallet", wallet_id)
        logger.info("wallet_balance_set", wallet_id=wallet_id, balance=balance)
        return self.get(wallet_id)
