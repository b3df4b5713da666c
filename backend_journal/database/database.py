"""
Storage layer for wallets, users and trades.

All access goes through the abstract backend interface: insert, find by id,
find by equality filter, update, delete, list. The SQLAlchemy backend opens
one session per operation from a pooled engine; any driver or query failure
surfaces as StorageFault and is never retried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import String, create_engine, type_coerce
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from backend_journal.core.exceptions import StorageFault
from backend_journal.database.models import Trade, User, Wallet
from backend_journal.database.tables import Base, TradeRow, UserRow, WalletRow
from backend_journal.journal_logging import get_logger

logger = get_logger(__name__)

TABLE_WALLET = "wallet"
TABLE_USERS = "users"
TABLE_TRADES = "trades"

_ROWS: dict[str, type] = {
    TABLE_WALLET: WalletRow,
    TABLE_USERS: UserRow,
    TABLE_TRADES: TradeRow,
}

_ENTITIES: dict[str, type] = {
    TABLE_WALLET: Wallet,
    TABLE_USERS: User,
    TABLE_TRADES: Trade,
}

_TABLE_OF: dict[type, str] = {cls: name for name, cls in _ENTITIES.items()}


# -----------------------------------------------------------------------------
# Abstract backend: records are flat dicts keyed by column name.
# -----------------------------------------------------------------------------


class DatabaseBackend(ABC):
    """Abstract interface for persistence."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        ...

    @abstractmethod
    def insert(self, table: str, record: dict[str, Any]) -> None:
        ...

    @abstractmethod
    def find_by_id(self, table: str, record_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    def find_by_filter(
        self,
        table: str,
        predicates: dict[str, Any],
        created_range: tuple[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Records whose columns equal every predicate value, oldest first.

        created_range bounds created_at inclusively, compared as text.
        """
        ...

    @abstractmethod
    def update(self, table: str, record_id: str, values: dict[str, Any]) -> int:
        """Overwrite columns of one record. Returns rows matched (0 or 1)."""
        ...

    @abstractmethod
    def delete(self, table: str, record_id: str) -> int:
        """Remove one record. Returns rows removed (0 or 1)."""
        ...

    @abstractmethod
    def list(self, table: str) -> list[dict[str, Any]]:
        """All records, newest first."""
        ...

    def dispose(self) -> None:
        """Release pooled connections."""


# -----------------------------------------------------------------------------
# SQLAlchemy backend (SQLite by default, any SQLAlchemy URL works)
# -----------------------------------------------------------------------------


def _row_to_record(row: Any) -> dict[str, Any]:
    return {c.key: getattr(row, c.key) for c in row.__table__.columns}


class SQLAlchemyBackend(DatabaseBackend):
    """Pooled engine; one session per operation."""

    def __init__(self, url: str) -> None:
        connect_args: dict[str, Any] = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self._url = url
        self._engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        logger.info("storage_engine_created", url=url.split("?")[0].split("//")[-1])

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back on error, always close."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("storage_operation_failed", error=str(e))
            raise StorageFault(f"storage operation failed: {e.__class__.__name__}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def _row_cls(table: str) -> type:
        try:
            return _ROWS[table]
        except KeyError:
            raise ValueError(f"unknown table {table!r}") from None

    def ensure_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self._engine)
        except SQLAlchemyError as e:
            logger.exception("storage_schema_failed", error=str(e))
            raise StorageFault("could not create schema") from e

    def insert(self, table: str, record: dict[str, Any]) -> None:
        row_cls = self._row_cls(table)
        with self._session_scope() as session:
            session.add(row_cls(**record))

    def find_by_id(self, table: str, record_id: str) -> dict[str, Any] | None:
        row_cls = self._row_cls(table)
        with self._session_scope() as session:
            row = session.get(row_cls, record_id)
            return _row_to_record(row) if row is not None else None

    def find_by_filter(
        self,
        table: str,
        predicates: dict[str, Any],
        created_range: tuple[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        row_cls = self._row_cls(table)
        unknown = set(predicates) - set(row_cls.__table__.columns.keys())
        if unknown:
            raise ValueError(f"unknown columns for {table}: {sorted(unknown)}")
        with self._session_scope() as session:
            query = session.query(row_cls).filter_by(**predicates)
            if created_range is not None:
                start, end = created_range
                created = type_coerce(row_cls.created_at, String)
                query = query.filter(created >= start, created <= end)
            rows = query.order_by(row_cls.created_at, row_cls.id).all()
            return [_row_to_record(r) for r in rows]

    def update(self, table: str, record_id: str, values: dict[str, Any]) -> int:
        row_cls = self._row_cls(table)
        with self._session_scope() as session:
            return (
                session.query(row_cls)
                .filter(row_cls.id == record_id)
                .update(values, synchronize_session=False)
            )

    def delete(self, table: str, record_id: str) -> int:
        row_cls = self._row_cls(table)
        with self._session_scope() as session:
            return (
                session.query(row_cls)
                .filter(row_cls.id == record_id)
                .delete(synchronize_session=False)
            )

    def list(self, table: str) -> list[dict[str, Any]]:
        row_cls = self._row_cls(table)
        with self._session_scope() as session:
            rows = session.query(row_cls).order_by(row_cls.created_at.desc(), row_cls.id.desc()).all()
            return [_row_to_record(r) for r in rows]

    def dispose(self) -> None:
        self._engine.dispose()


# -----------------------------------------------------------------------------
# Database facade: entities in, entities out; backend is swappable.
# -----------------------------------------------------------------------------


class Database:
    """
    Entity-level storage collaborator used by the ledger, user/wallet services
    and the analytics engine. Built once per process and injected; never a
    module-level singleton.
    """

    def __init__(self, backend: DatabaseBackend) -> None:
        self._backend = backend

    def ensure_schema(self) -> None:
        self._backend.ensure_schema()

    def dispose(self) -> None:
        self._backend.dispose()

    @staticmethod
    def _entity(table: str, record: dict[str, Any]) -> Any:
        return _ENTITIES[table].from_record(record)

    def insert(self, entity: Wallet | User | Trade) -> None:
        table = _TABLE_OF.get(type(entity))
        if table is None:
            raise TypeError(f"cannot store {type(entity).__name__}")
        self._backend.insert(table, entity.to_record())

    def find_by_id(self, table: str, record_id: str) -> Any | None:
        if not record_id:
            return None
        record = self._backend.find_by_id(table, record_id)
        return self._entity(table, record) if record is not None else None

    def find_by_filter(
        self,
        table: str,
        created_range: tuple[str, str] | None = None,
        **predicates: Any,
    ) -> list[Any]:
        records = self._backend.find_by_filter(table, predicates, created_range)
        return [self._entity(table, r) for r in records]

    def update(self, table: str, record_id: str, values: dict[str, Any]) -> bool:
        """Returns True when a record with record_id existed."""
        return self._backend.update(table, record_id, values) > 0

    def delete(self, table: str, record_id: str) -> bool:
        """Returns True when a record was removed by this call."""
        return self._backend.delete(table, record_id) > 0

    def list(self, table: str) -> list[Any]:
        return [self._entity(table, r) for r in self._backend.list(table)]


def get_database(url: str) -> Database:
    """Return a Database over a SQLAlchemy backend with the schema in place."""
    db = Database(SQLAlchemyBackend(url))
    db.ensure_schema()
    return db
