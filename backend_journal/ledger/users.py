"""
User accounts: registration, login, profile edit, delete.

Registration allocates a wallet first and then the user; a rejected user
leaves that wallet in place. Profile edits re-hash the password on every
call, even when it did not change.
"""

from __future__ import annotations

import uuid

from backend_journal.auth import TokenService, hash_password, verify_password
from backend_journal.auth.passwords import DEFAULT_ROUNDS
from backend_journal.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from backend_journal.database import TABLE_USERS, Database, User
from backend_journal.journal_logging import get_logger
from backend_journal.ledger.wallets import WalletService
from backend_journal.utils.dates import utc_now

logger = get_logger(__name__)


class UserService:
    def __init__(
        self,
        db: Database,
        tokens: TokenService,
        *,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        self._db = db
        self._tokens = tokens
        self._rounds = bcrypt_rounds
        self._wallets = WalletService(db)

    def find_by_email(self, email: str) -> User | None:
        rows = self._db.find_by_filter(TABLE_USERS, email=email)
        return rows[0] if rows else None

    def create(self, name: str, email: str, wallet_id: str, password: str) -> User:
        """Insert a user bound to an existing wallet. Email must be unused."""
        if not name or not email or not password or not wallet_id:
            raise ValidationError("Missing required fields")
        if self.find_by_email(email) is not None:
            raise ValidationError("Email already exists")
        if not self._wallets.exists(wallet_id):
            raise ValidationError("Wallet does not exist")
        now = utc_now()
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            password_hash=hash_password(password, self._rounds),
            wallet_id=wallet_id,
            created_at=now,
            updated_at=now,
        )
        self._db.insert(user)
        logger.info("user_created", user_id=user.id, wallet_id=wallet_id)
        return self.get(user.id)

    def register(self, name: str, email: str, password: str) -> User:
        """Allocate a new wallet, then create the user on it."""
        wallet = self._wallets.create()
        return self.create(name, email, wallet.id, password)

    def get(self, user_id: str) -> User:
        user = self._db.find_by_id(TABLE_USERS, user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def list(self) -> list[User]:
        return self._db.list(TABLE_USERS)

    def update(self, user_id: str, name: str, email: str, wallet_id: str, password: str) -> User:
        current = self.get(user_id)
        if not name or not email or not password or not wallet_id:
            raise ValidationError("Missing required fields")
        if email != current.email:
            other = self.find_by_email(email)
            if other is not None and other.id != user_id:
                raise ValidationError("Email already exists")
        if wallet_id != current.wallet_id and not self._wallets.exists(wallet_id):
            raise ValidationError("Wallet does not exist")
        self._db.update(
            TABLE_USERS,
            user_id,
            {
                "name": name,
                "email": email,
                "wallet_id": wallet_id,
                "password_hash": hash_password(password, self._rounds),
                "updated_at": utc_now(),
            },
        )
        logger.info("user_updated", user_id=user_id)
        return self.get(user_id)

    def delete(self, user_id: str) -> bool:
        """Remove the user; their trades stay. False when the user did not exist."""
        removed = self._db.delete(TABLE_USERS, user_id)
        logger.info("user_deleted", user_id=user_id, removed=removed)
        return removed

    def login(self, email: str, password: str) -> str:
        """Verify credentials and return a session token."""
        user = self.find_by_email(email) if email else None
        if user is None or not verify_password(password or "", user.password_hash):
            logger.info("login_failed", email_domain=(email or "").rpartition("@")[2] or None)
            raise AuthenticationError("invalid credentials")
        logger.info("login_succeeded", user_id=user.id)
        return self._tokens.create_token(user.id)
