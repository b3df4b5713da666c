"""
Trade ledger: normalize submissions, derive fees, and write trades.

Fees are derived once, in normalize_trade, from execution price and traded
amount. update() trusts the fee values it is given; callers that change
prices must run the submission through normalize_trade first.
"""

from __future__ import annotations

import math
import uuid

from pydantic import BaseModel, ConfigDict, Field

from backend_journal.core.exceptions import NotFoundError, ValidationError
from backend_journal.database import TABLE_TRADES, Database, Trade
from backend_journal.domain.enums import validate_trade_fields
from backend_journal.journal_logging import get_logger
from backend_journal.utils.dates import timestamp_to_naive_datetime, utc_now

logger = get_logger(__name__)

EXECUTION_FEE_RATE = 0.003
"""30 bps of notional (execution_price * traded_amount)."""
TRANSACTION_FEE_RATE = 0.005
"""Applied to execution_price alone."""

_MUTABLE_FIELDS = (
    "amount",
    "chain",
    "trade_type",
    "asset",
    "before_price",
    "execution_price",
    "final_price",
    "traded_amount",
    "execution_fee",
    "transaction_fee",
)


class TradeForm(BaseModel):
    """Trade submission as received from a client. Fees are never accepted."""

    model_config = ConfigDict(allow_inf_nan=False)

    user_id: str
    wallet_id: str
    amount: float
    chain: str
    trade_type: str
    asset: str
    before_price: float | None = None
    execution_price: float | None = None
    final_price: float | None = None
    traded_amount: float | None = None
    timestamp: int | None = Field(None, description="Epoch seconds; defaults to now")


def execution_fee(execution_price: float, traded_amount: float) -> float:
    return execution_price * traded_amount * EXECUTION_FEE_RATE


def transaction_fee(execution_price: float) -> float:
    return execution_price * TRANSACTION_FEE_RATE


def normalize_trade(form: TradeForm) -> Trade:
    """
    Build a fully populated Trade from a submission.

    Missing optional prices/amount default to 0.0 before fees are computed.
    created_at comes from form.timestamp when given, else now. id stays empty
    until create() assigns one. Enumerated fields are not checked here.

    Raises ValidationError when a fee overflows or the timestamp is out of
    range.
    """
    before_price = form.before_price or 0.0
    execution_price = form.execution_price or 0.0
    final_price = form.final_price or 0.0
    traded_amount = form.traded_amount or 0.0
    exec_fee = execution_fee(execution_price, traded_amount)
    tx_fee = transaction_fee(execution_price)
    # finite inputs can still overflow once multiplied
    if not (math.isfinite(exec_fee) and math.isfinite(tx_fee)):
        raise ValidationError("execution_price and traded_amount give a non-finite fee")
    now = utc_now()
    return Trade(
        id="",
        user_id=form.user_id,
        wallet_id=form.wallet_id,
        amount=form.amount,
        chain=form.chain,
        trade_type=form.trade_type,
        asset=form.asset,
        before_price=before_price,
        execution_price=execution_price,
        final_price=final_price,
        traded_amount=traded_amount,
        execution_fee=exec_fee,
        transaction_fee=tx_fee,
        created_at=timestamp_to_naive_datetime(form.timestamp) if form.timestamp is not None else now,
        updated_at=now,
    )


class TradeLedger:
    """Create/read/update/delete trades against an injected Database."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def _validate(self, trade: Trade, action: str) -> None:
        try:
            trade.chain, trade.trade_type, trade.asset = validate_trade_fields(
                trade.chain, trade.trade_type, trade.asset
            )
        except ValidationError as e:
            logger.info(
                "trade_rejected",
                action=action,
                trade_id=trade.id or None,
                trader_id=trade.user_id,
                reason=e.message,
            )
            raise

    def create(self, trade: Trade) -> Trade:
        """
        Assign a new id, validate, persist, and return the stored record.

        The returned Trade is re-read from storage so stored values are
        authoritative. Nothing is written when validation fails.
        """
        trade.id = str(uuid.uuid4())
        self._validate(trade, "create")
        self._db.insert(trade)
        stored = self._db.find_by_id(TABLE_TRADES, trade.id)
        if stored is None:
            raise NotFoundError("trade", trade.id)
        logger.info(
            "trade_created",
            trade_id=stored.id,
            trader_id=stored.user_id,
            trade_type=stored.trade_type.value,
            asset=stored.asset.value,
        )
        return stored

    def update(self, trade_id: str, trade: Trade) -> Trade:
        """
        Overwrite every mutable field of trade_id with trade's values and stamp
        updated_at. Fees are stored as given, not recomputed.
        """
        self._validate(trade, "update")
        values = {name: value for name, value in trade.to_record().items() if name in _MUTABLE_FIELDS}
        values["updated_at"] = utc_now()
        if not self._db.update(TABLE_TRADES, trade_id, values):
            raise NotFoundError("trade", trade_id)
        stored = self._db.find_by_id(TABLE_TRADES, trade_id)
        if stored is None:
            raise NotFoundError("trade", trade_id)
        logger.info("trade_updated", trade_id=trade_id, trader_id=stored.user_id)
        return stored

    def delete(self, trade_id: str) -> bool:
        """Remove trade_id; True when it is absent afterwards (repeat calls included)."""
        removed = self._db.delete(TABLE_TRADES, trade_id)
        absent = self._db.find_by_id(TABLE_TRADES, trade_id) is None
        logger.info("trade_deleted", trade_id=trade_id, removed=removed, absent=absent)
        return absent

    def get(self, trade_id: str) -> Trade:
        trade = self._db.find_by_id(TABLE_TRADES, trade_id)
        if trade is None:
            raise NotFoundError("trade", trade_id)
        return trade

    def list(self) -> list[Trade]:
        """All trades, newest first."""
        return self._db.list(TABLE_TRADES)
