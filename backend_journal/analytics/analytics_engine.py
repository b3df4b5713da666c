"""
Analytics engine: daily profit/loss, cumulative fees, and slippage per trader.

Every query is filter-then-reduce. select_trades narrows the ledger to one
trader, a created_at range and optionally one asset or trade type; the
reducers are pure functions over the selected trades.

Date bounds compare as text against created_at rendered as
``YYYY-MM-DD HH:MM:SS.ffffff``. A bare ``YYYY-MM-DD`` end bound therefore
stops at the very start of that day.

Per-trade P&L:
    buys   raw = final_price - execution_price
    sells  raw = final_price - before_price
    pnl    = raw * traded_amount - execution_fee - transaction_fee

Slippage:
    effective = (execution_price * traded_amount + fees) / traded_amount
    slippage  = effective - before_price
    cost %    = slippage / before_price * 100
Trades with traded_amount == 0 or before_price == 0 have no defined slippage;
they are left out of the totals and averages and counted in excluded_trades.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable

from backend_journal.database import TABLE_TRADES, Database, Trade
from backend_journal.domain.enums import TradeType
from backend_journal.journal_logging import bind_trader
from backend_journal.utils.dates import date_key, format_timestamp


@dataclass
class DailyProfitLoss:
    date: str
    profit: float
    loss: float
    """Sum of non-positive trade P&L for the day; zero or negative."""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class CumulativeFeesResponse:
    trader_id: str
    cumulative_fees: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SlippageByTrader:
    trader_id: str
    total_slippage: float = 0.0
    average_slippage: float = 0.0
    total_slippage_cost_percent: float = 0.0
    average_slippage_cost_percent: float = 0.0
    trade_count: int = 0
    """Trades that contributed to the statistics."""
    excluded_trades: int = 0
    """Trades skipped for a zero traded_amount or before_price."""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _round(value: float) -> float:
    # round() gives an int; float() also turns -0 into 0.0
    return float(round(value))


# -----------------------------------------------------------------------------
# Filter
# -----------------------------------------------------------------------------


def in_date_range(trade: Trade, start_date: str, end_date: str) -> bool:
    if trade.created_at is None:
        return False
    stamp = format_timestamp(trade.created_at)
    return start_date <= stamp <= end_date


def select_trades(
    db: Database,
    user_id: str,
    start_date: str,
    end_date: str,
    asset: str | None = None,
    trade_type: str | None = None,
) -> list[Trade]:
    """
    Trades of user_id created within [start_date, end_date], oldest first.

    asset wins over trade_type: trade_type narrows only when asset is absent.
    """
    predicates: dict[str, Any] = {"user_id": user_id}
    if asset:
        predicates["asset"] = asset
    elif trade_type:
        predicates["trade_type"] = trade_type
    trades = db.find_by_filter(TABLE_TRADES, created_range=(start_date, end_date), **predicates)
    # storage narrows the range; the text comparison here is the one that counts
    return [t for t in trades if in_date_range(t, start_date, end_date)]


# -----------------------------------------------------------------------------
# Per-trade formulas
# -----------------------------------------------------------------------------


def trade_pnl(trade: Trade) -> float:
    """Net P&L of one trade after both fees. Unknown trade types earn nothing before fees."""
    try:
        trade_type = TradeType(trade.trade_type)
    except ValueError:
        raw = 0.0
    else:
        if trade_type.is_buy:
            raw = trade.final_price - trade.execution_price
        else:
            raw = trade.final_price - trade.before_price
    return raw * trade.traded_amount - trade.execution_fee - trade.transaction_fee


def trade_slippage(trade: Trade) -> tuple[float, float] | None:
    """(slippage, slippage cost %) or None when either divisor is zero."""
    if trade.traded_amount == 0 or trade.before_price == 0:
        return None
    effective_price = (trade.execution_price * trade.traded_amount + trade.total_fees) / trade.traded_amount
    slippage = effective_price - trade.before_price
    return slippage, slippage / trade.before_price * 100.0


# -----------------------------------------------------------------------------
# Reducers
# -----------------------------------------------------------------------------


def reduce_profit_loss(trades: Iterable[Trade]) -> list[DailyProfitLoss]:
    """One row per calendar date, chronological; profit and loss rounded."""
    days: dict[str, list[float]] = {}
    for trade in trades:
        if trade.created_at is None:
            continue
        totals = days.setdefault(date_key(trade.created_at), [0.0, 0.0])
        pnl = trade_pnl(trade)
        if pnl > 0:
            totals[0] += pnl
        else:
            totals[1] += pnl
    return [
        DailyProfitLoss(date=day, profit=_round(profit), loss=_round(loss))
        for day, (profit, loss) in sorted(days.items())
    ]


def reduce_cumulative_fees(trader_id: str, trades: Iterable[Trade]) -> CumulativeFeesResponse:
    total = sum(t.total_fees for t in trades)
    return CumulativeFeesResponse(trader_id=trader_id, cumulative_fees=_round(total))


def reduce_slippage(trader_id: str, trades: Iterable[Trade]) -> SlippageByTrader:
    total_slippage = 0.0
    total_cost_percent = 0.0
    counted = 0
    excluded = 0
    for trade in trades:
        result = trade_slippage(trade)
        if result is None:
            excluded += 1
            continue
        slippage, cost_percent = result
        total_slippage += slippage
        total_cost_percent += cost_percent
        counted += 1
    if counted == 0:
        return SlippageByTrader(trader_id=trader_id, excluded_trades=excluded)
    return SlippageByTrader(
        trader_id=trader_id,
        total_slippage=_round(total_slippage),
        average_slippage=_round(total_slippage / counted),
        total_slippage_cost_percent=_round(total_cost_percent),
        average_slippage_cost_percent=_round(total_cost_percent / counted),
        trade_count=counted,
        excluded_trades=excluded,
    )


# -----------------------------------------------------------------------------
# Queries
# -----------------------------------------------------------------------------


def profit_loss(
    db: Database,
    user_id: str,
    start_date: str,
    end_date: str,
    asset: str | None = None,
    trade_type: str | None = None,
) -> list[DailyProfitLoss]:
    trades = select_trades(db, user_id, start_date, end_date, asset=asset, trade_type=trade_type)
    days = reduce_profit_loss(trades)
    bind_trader(user_id).debug(
        "analytics_profit_loss",
        start_date=start_date,
        end_date=end_date,
        asset=asset,
        trade_type=trade_type if not asset else None,
        trade_count=len(trades),
        day_count=len(days),
    )
    return days


def cumulative_fees(db: Database, user_id: str, start_date: str, end_date: str) -> CumulativeFeesResponse:
    trades = select_trades(db, user_id, start_date, end_date)
    result = reduce_cumulative_fees(user_id, trades)
    bind_trader(user_id).debug(
        "analytics_cumulative_fees",
        start_date=start_date,
        end_date=end_date,
        trade_count=len(trades),
        cumulative_fees=result.cumulative_fees,
    )
    return result


def slippage(db: Database, user_id: str, start_date: str, end_date: str) -> SlippageByTrader:
    trades = select_trades(db, user_id, start_date, end_date)
    result = reduce_slippage(user_id, trades)
    log = bind_trader(user_id)
    if result.excluded_trades:
        log.info(
            "analytics_slippage_trades_excluded",
            excluded_trades=result.excluded_trades,
            reason="zero traded_amount or before_price",
        )
    log.debug(
        "analytics_slippage",
        start_date=start_date,
        end_date=end_date,
        trade_count=result.trade_count,
    )
    return result
