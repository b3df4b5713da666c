"""
Pytest fixtures for trade journal tests. Each test gets its own temporary SQLite DB.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from backend_journal.auth import TokenService
from backend_journal.config import Settings
from backend_journal.database import get_database
from backend_journal.ledger import TradeForm, TradeLedger, UserService, WalletService

TEST_JWT_SECRET = "test-secret-key-with-at-least-32-bytes!!"


def epoch(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> int:
    """Epoch seconds for a UTC wall-clock time."""
    return int(datetime(year, month, day, hour, minute, tzinfo=timezone.utc).timestamp())


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret=TEST_JWT_SECRET,
        database_url=f"sqlite:///{tmp_path / 'journal.db'}",
        bcrypt_rounds=4,
    )


@pytest.fixture
def db(settings):
    database = get_database(settings.database_url)
    yield database
    database.dispose()


@pytest.fixture
def ledger(db):
    return TradeLedger(db)


@pytest.fixture
def wallets(db):
    return WalletService(db)


@pytest.fixture
def tokens(settings):
    return TokenService(settings.jwt_secret, ttl_hours=settings.jwt_ttl_hours)


@pytest.fixture
def users(db, tokens, settings):
    return UserService(db, tokens, bcrypt_rounds=settings.bcrypt_rounds)


@pytest.fixture
def make_form():
    """Factory for TradeForm with a valid default MarketBuy; override any field."""

    def _make(**overrides) -> TradeForm:
        data = {
            "user_id": "trader-1",
            "wallet_id": "wallet-1",
            "amount": 1000.0,
            "chain": "Ethereum",
            "trade_type": "MarketBuy",
            "asset": "ETH",
            "before_price": 90.0,
            "execution_price": 100.0,
            "final_price": 105.0,
            "traded_amount": 10.0,
            "timestamp": epoch(2022, 1, 5),
        }
        data.update(overrides)
        return TradeForm(**data)

    return _make


@pytest.fixture
def client(settings, db):
    """FastAPI TestClient over the per-test database."""
    from fastapi.testclient import TestClient

    from backend_journal.api_server.server import create_app

    return TestClient(create_app(settings, db))


@pytest.fixture
def auth_headers(client):
    """Register a user, log in, and return headers carrying the token."""
    r = client.post("/user", json={"name": "Ada", "email": "ada@example.com", "password": "pw-ada"})
    assert r.status_code == 200
    r = client.post("/login", json={"email": "ada@example.com", "password": "pw-ada"})
    assert r.status_code == 200
    return {"Authorization": r.json()["token"]}
