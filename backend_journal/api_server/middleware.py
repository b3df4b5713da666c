"""
Request dependencies — storage handle, services, and the JWT guard.

Everything a handler needs hangs off app.state (built in the server lifespan
or injected by tests) and reaches handlers through Depends.
"""

from __future__ import annotations

from fastapi import Depends, Header, Request

from backend_journal.auth import TokenService
from backend_journal.config import Settings
from backend_journal.database import Database
from backend_journal.ledger import TradeLedger, UserService, WalletService


def get_db(request: Request) -> Database:
    """Dependency: the process-wide Database built at startup."""
    return request.app.state.db


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def get_ledger(db: Database = Depends(get_db)) -> TradeLedger:
    return TradeLedger(db)


def get_wallet_service(db: Database = Depends(get_db)) -> WalletService:
    return WalletService(db)


def get_user_service(
    db: Database = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_app_settings),
) -> UserService:
    return UserService(db, tokens, bcrypt_rounds=settings.bcrypt_rounds)


def require_token(
    authorization: str | None = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """JWT guard: returns the authenticated user id or raises AuthenticationError (401)."""
    return tokens.decode_token(authorization)
