"""
Domain models for database entities: wallets, users, trades.

Plain dataclasses, no ORM coupling; the storage backend converts them to and
from flat records (column name -> value).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from backend_journal.domain.enums import Asset, Chain, TradeType


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _coerce(enum_cls: type[Enum], value: Any) -> Any:
    """Member for known values; anything else is left as stored."""
    if isinstance(value, str) and value in enum_cls._value2member_map_:
        return enum_cls(value)
    return value


class _Record:
    """Mixin: dataclass <-> flat record."""

    def to_record(self) -> dict[str, Any]:
        return {f.name: _plain(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_record(cls, record: Mapping[str, Any]):
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in record.items() if k in names})


@dataclass
class Wallet(_Record):
    """A trader's wallet. Balance changes only through an explicit set."""

    id: str
    public_hash: str
    """64-char hex SHA-256 of a throwaway public key; unique."""
    balance: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class User(_Record):
    """Trader identity, bound 1:1 to a wallet."""

    id: str
    name: str
    email: str
    password_hash: str
    wallet_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_public_dict(self) -> dict[str, Any]:
        """Record without the password hash, for API responses."""
        record = self.to_record()
        record.pop("password_hash", None)
        return record


@dataclass
class Trade(_Record):
    """
    A single executed trade.

    chain/trade_type/asset hold enum members once validated or loaded;
    a freshly normalized trade may still carry raw strings until the ledger
    checks them.
    """

    id: str
    user_id: str
    wallet_id: str
    amount: float
    chain: Chain | str
    trade_type: TradeType | str
    asset: Asset | str
    before_price: float = 0.0
    execution_price: float = 0.0
    final_price: float = 0.0
    traded_amount: float = 0.0
    execution_fee: float = 0.0
    transaction_fee: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total_fees(self) -> float:
        return self.execution_fee + self.transaction_fee

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Trade:
        trade = super().from_record(record)
        trade.chain = _coerce(Chain, trade.chain)
        trade.trade_type = _coerce(TradeType, trade.trade_type)
        trade.asset = _coerce(Asset, trade.asset)
        return trade
