"""
Trade ledger and account services.
"""

from backend_journal.ledger.trade_ledger import (
    EXECUTION_FEE_RATE,
    TRANSACTION_FEE_RATE,
    TradeForm,
    TradeLedger,
    normalize_trade,
)
from backend_journal.ledger.users import UserService
from backend_journal.ledger.wallets import WalletService

__all__ = [
    "EXECUTION_FEE_RATE",
    "TRANSACTION_FEE_RATE",
    "TradeForm",
    "TradeLedger",
    "UserService",
    "WalletService",
    "normalize_trade",
]
