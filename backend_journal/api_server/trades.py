"""
FastAPI router: trade CRUD and trade analytics.

POST/PUT bodies go through normalize_trade, so fees are always derived
server-side. Analytics endpoints reject missing start_date, end_date or
trader_id before touching storage.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from backend_journal.analytics import analytics_engine
from backend_journal.core.exceptions import StorageFault, ValidationError
from backend_journal.database import Database, Trade
from backend_journal.journal_logging import get_logger
from backend_journal.ledger import TradeForm, TradeLedger, normalize_trade
from backend_journal.api_server.middleware import get_db, get_ledger, require_token

logger = get_logger(__name__)

router = APIRouter(tags=["trades"], dependencies=[Depends(require_token)])

MISSING_QUERY_MESSAGE = "Error: Start date, End date and Trader ID are required"


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------


class TradeResponse(BaseModel):
    id: str
    user_id: str
    wallet_id: str
    amount: float
    chain: str
    trade_type: str
    asset: str
    before_price: float
    execution_price: float
    final_price: float
    traded_amount: float
    execution_fee: float
    transaction_fee: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_trade(cls, trade: Trade) -> TradeResponse:
        return cls(**trade.to_record())


class DeleteResponse(BaseModel):
    deleted: bool


class DailyProfitLossResponse(BaseModel):
    date: str = Field(..., description="Calendar date YYYY-MM-DD")
    profit: float
    loss: float = Field(..., description="Sum of non-positive trade P&L; zero or negative")


class CumulativeFeesModel(BaseModel):
    trader_id: str
    cumulative_fees: float


class SlippageModel(BaseModel):
    trader_id: str
    total_slippage: float
    average_slippage: float
    total_slippage_cost_percent: float
    average_slippage_cost_percent: float
    trade_count: int = Field(..., description="Trades included in the statistics")
    excluded_trades: int = Field(..., description="Trades skipped for zero traded_amount or before_price")


def _require_range(start_date: str, end_date: str, trader_id: str) -> None:
    if not start_date.strip() or not end_date.strip() or not trader_id.strip():
        raise ValidationError(MISSING_QUERY_MESSAGE)


# -----------------------------------------------------------------------------
# CRUD
# -----------------------------------------------------------------------------


@router.post("/trade", response_model=TradeResponse)
def create_trade(form: TradeForm, ledger: TradeLedger = Depends(get_ledger)) -> TradeResponse:
    trade = ledger.create(normalize_trade(form))
    return TradeResponse.from_trade(trade)


@router.get("/trade", response_model=list[TradeResponse])
def list_trades(ledger: TradeLedger = Depends(get_ledger)) -> list[TradeResponse]:
    return [TradeResponse.from_trade(t) for t in ledger.list()]


@router.get("/trade/{trade_id}", response_model=TradeResponse)
def get_trade(trade_id: str, ledger: TradeLedger = Depends(get_ledger)) -> TradeResponse:
    return TradeResponse.from_trade(ledger.get(trade_id))


@router.put("/trade/{trade_id}", response_model=TradeResponse)
def update_trade(
    trade_id: str,
    form: TradeForm,
    ledger: TradeLedger = Depends(get_ledger),
) -> TradeResponse:
    """Replace a trade's mutable fields; fees are re-derived from the new prices."""
    return TradeResponse.from_trade(ledger.update(trade_id, normalize_trade(form)))


@router.delete("/trade/{trade_id}", response_model=DeleteResponse)
def delete_trade(trade_id: str, ledger: TradeLedger = Depends(get_ledger)) -> DeleteResponse:
    if not ledger.delete(trade_id):
        raise StorageFault(f"trade {trade_id} still present after delete")
    return DeleteResponse(deleted=True)


# -----------------------------------------------------------------------------
# Analytics
# -----------------------------------------------------------------------------


@router.get("/profit-loss", response_model=list[DailyProfitLossResponse])
def get_profit_loss(
    start_date: str = Query(""),
    end_date: str = Query(""),
    trader_id: str = Query(""),
    asset: str | None = Query(None, description="Narrow to one asset; wins over trade_type"),
    trade_type: str | None = Query(None, description="Narrow to one trade type when asset is absent"),
    db: Database = Depends(get_db),
) -> list[DailyProfitLossResponse]:
    _require_range(start_date, end_date, trader_id)
    days = analytics_engine.profit_loss(
        db, trader_id, start_date, end_date, asset=asset or None, trade_type=trade_type or None
    )
    return [DailyProfitLossResponse(**d.to_dict()) for d in days]


@router.get("/cumulative-fees", response_model=CumulativeFeesModel)
def get_cumulative_fees(
    start_date: str = Query(""),
    end_date: str = Query(""),
    trader_id: str = Query(""),
    db: Database = Depends(get_db),
) -> CumulativeFeesModel:
    _require_range(start_date, end_date, trader_id)
    result = analytics_engine.cumulative_fees(db, trader_id, start_date, end_date)
    return CumulativeFeesModel(**result.to_dict())


@router.get("/slippage", response_model=SlippageModel)
def get_slippage(
    start_date: str = Query(""),
    end_date: str = Query(""),
    trader_id: str = Query(""),
    db: Database = Depends(get_db),
) -> SlippageModel:
    _require_range(start_date, end_date, trader_id)
    result = analytics_engine.slippage(db, trader_id, start_date, end_date)
    return SlippageModel(**result.to_dict())
