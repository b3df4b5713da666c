"""
Trade analytics: daily profit/loss, cumulative fees and slippage.
"""

from backend_journal.analytics.analytics_engine import (
    CumulativeFeesResponse,
    DailyProfitLoss,
    SlippageByTrader,
    cumulative_fees,
    profit_loss,
    select_trades,
    slippage,
    trade_pnl,
    trade_slippage,
)

__all__ = [
    "CumulativeFeesResponse",
    "DailyProfitLoss",
    "SlippageByTrader",
    "cumulative_fees",
    "profit_loss",
    "select_trades",
    "slippage",
    "trade_pnl",
    "trade_slippage",
]
