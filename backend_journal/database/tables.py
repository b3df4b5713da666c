"""
SQLAlchemy table definitions: wallet, users, trades.

Foreign keys document the relationships; SQLite does not enforce them unless
PRAGMA foreign_keys is on, and the engine leaves referential integrity to the
storage layer.
"""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, ForeignKey, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class WalletRow(Base):
    __tablename__ = "wallet"

    id = Column(String(36), primary_key=True)
    public_hash = Column(String(64), unique=True, nullable=False, index=True)
    balance = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    wallet_id = Column(String(36), ForeignKey("wallet.id"), nullable=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


class TradeRow(Base):
    __tablename__ = "trades"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    wallet_id = Column(String(36), ForeignKey("wallet.id"), nullable=False)
    amount = Column(Float, nullable=False)
    chain = Column(String(20), nullable=False)
    trade_type = Column(String(20), nullable=False, index=True)
    asset = Column(String(5), nullable=False, index=True)
    before_price = Column(Float, nullable=False)
    execution_price = Column(Float, nullable=False)
    final_price = Column(Float, nullable=False)
    traded_amount = Column(Float, nullable=False)
    execution_fee = Column(Float, nullable=False)
    transaction_fee = Column(Float, nullable=False)
    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=False)
