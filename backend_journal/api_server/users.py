"""
FastAPI router: registration, login, user profile and wallet endpoints.

POST /user and POST /login are open; everything else requires a token.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from backend_journal.core.exceptions import NotFoundError
from backend_journal.database import User, Wallet
from backend_journal.ledger import UserService, WalletService
from backend_journal.api_server.middleware import get_user_service, get_wallet_service, require_token

router = APIRouter(tags=["users"])


class UserForm(BaseModel):
    """POST /user body."""

    name: str
    email: str
    password: str


class UserUpdateForm(BaseModel):
    """PUT /user/{id} body. wallet_id defaults to the user's current wallet."""

    name: str
    email: str
    password: str
    wallet_id: str | None = None


class LoginForm(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str = Field(..., description="JWT; send as the Authorization header")


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    wallet_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserResponse:
        return cls(**user.to_public_dict())


class WalletResponse(BaseModel):
    id: str
    public_hash: str = Field(..., min_length=64, max_length=64)
    balance: float
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_wallet(cls, wallet: Wallet) -> WalletResponse:
        return cls(**wallet.to_record())


class BalanceForm(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    balance: float


class DeleteResponse(BaseModel):
    deleted: bool


# -----------------------------------------------------------------------------
# Open endpoints
# -----------------------------------------------------------------------------


@router.post("/user", response_model=UserResponse)
def create_user(form: UserForm, users: UserService = Depends(get_user_service)) -> UserResponse:
    """Register: allocate a wallet, then create the user bound to it."""
    return UserResponse.from_user(users.register(form.name, form.email, form.password))


@router.post("/login", response_model=LoginResponse)
def login(form: LoginForm, users: UserService = Depends(get_user_service)) -> LoginResponse:
    return LoginResponse(token=users.login(form.email, form.password))


# -----------------------------------------------------------------------------
# Guarded endpoints
# -----------------------------------------------------------------------------


@router.get("/user", response_model=list[UserResponse], dependencies=[Depends(require_token)])
def list_users(users: UserService = Depends(get_user_service)) -> list[UserResponse]:
    return [UserResponse.from_user(u) for u in users.list()]


@router.get("/user/{user_id}", response_model=UserResponse, dependencies=[Depends(require_token)])
def get_user(user_id: str, users: UserService = Depends(get_user_service)) -> UserResponse:
    return UserResponse.from_user(users.get(user_id))


@router.put("/user/{user_id}", response_model=UserResponse, dependencies=[Depends(require_token)])
def update_user(
    user_id: str,
    form: UserUpdateForm,
    users: UserService = Depends(get_user_service),
) -> UserResponse:
    wallet_id = form.wallet_id or users.get(user_id).wallet_id
    return UserResponse.from_user(users.update(user_id, form.name, form.email, wallet_id, form.password))


@router.delete("/user/{user_id}", response_model=DeleteResponse, dependencies=[Depends(require_token)])
def delete_user(user_id: str, users: UserService = Depends(get_user_service)) -> DeleteResponse:
    if not users.delete(user_id):
        raise NotFoundError("user", user_id)
    return DeleteResponse(deleted=True)


@router.get("/wallet/{wallet_id}", response_model=WalletResponse, dependencies=[Depends(require_token)])
def get_wallet(wallet_id: str, wallets: WalletService = Depends(get_wallet_service)) -> WalletResponse:
    return WalletResponse.from_wallet(wallets.get(wallet_id))


@router.put("/wallet/{wallet_id}/balance", response_model=WalletResponse, dependencies=[Depends(require_token)])
def set_wallet_balance(
    wallet_id: str,
    form: BalanceForm,
    wallets: WalletService = Depends(get_wallet_service),
) -> WalletResponse:
    return WalletResponse.from_wallet(wallets.update_balance(wallet_id, form.balance))
