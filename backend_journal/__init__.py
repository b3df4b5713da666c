"""
Backend Trade Journal — records trades against user wallets and computes
profit/loss, cumulative fee and slippage analytics over date ranges.
"""
