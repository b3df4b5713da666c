"""
Closed value sets for trades.

Members are ``str`` subclasses, so they compare equal to their stored text
and serialize as plain strings. Matching is exact and case-sensitive.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from backend_journal.core.exceptions import ValidationError


class Chain(str, Enum):
    """Blockchain network the trade settles on."""

    ETHEREUM = "Ethereum"
    ARBITRUM = "Arbitrum"
    OPTIMISM = "Optimism"
    POLYGON = "Polygon"


class TradeType(str, Enum):
    LIMIT_BUY = "LimitBuy"
    LIMIT_SELL = "LimitSell"
    MARKET_BUY = "MarketBuy"
    MARKET_SELL = "MarketSell"

    @property
    def is_buy(self) -> bool:
        return self in (TradeType.LIMIT_BUY, TradeType.MARKET_BUY)

    @property
    def is_sell(self) -> bool:
        return not self.is_buy


class Asset(str, Enum):
    BTC = "BTC"
    ETH = "ETH"
    XRP = "XRP"
    XLM = "XLM"
    DOGE = "DOGE"


def _is_member(enum_cls: type[Enum], value: Any) -> bool:
    # Enum members are str, so a member passes as its own value.
    return isinstance(value, str) and value in enum_cls._value2member_map_


def is_valid_chain(value: Any) -> bool:
    return _is_member(Chain, value)


def is_valid_trade_type(value: Any) -> bool:
    return _is_member(TradeType, value)


def is_valid_asset(value: Any) -> bool:
    return _is_member(Asset, value)


def validate_trade_fields(
    chain: Any,
    trade_type: Any,
    asset: Any,
) -> tuple[Chain, TradeType, Asset]:
    """
    Gate every trade write: all three fields must be non-empty and in-set.

    Returns the parsed members. Raises ValidationError naming every
    offending field so the caller sees all problems at once.
    """
    if not chain or not trade_type or not asset:
        raise ValidationError("chain, trade_type and asset are required")
    problems: list[str] = []
    if not is_valid_chain(chain):
        problems.append(f"invalid chain {chain!r}")
    if not is_valid_trade_type(trade_type):
        problems.append(f"invalid trade_type {trade_type!r}")
    if not is_valid_asset(asset):
        problems.append(f"invalid asset {asset!r}")
    if problems:
        raise ValidationError("; ".join(problems))
    return Chain(chain), TradeType(trade_type), Asset(asset)
