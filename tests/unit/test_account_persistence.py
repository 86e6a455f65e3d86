"""Unit tests for SqlAccountRepository / OrmAccountRepository using a mock AsyncSession."""
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from src.ct_account.domain.models import Account
from src.ct_account.infrastructure.orm_repository import OrmAccountRepository
from src.ct_account.infrastructure.persistence import SqlAccountRepository
from src.ct_common.errors import AccountNotFoundError, EmailExistsError, StoreConnectionError

CREATED = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)


class _PgError(Exception):
    def __init__(self, sqlstate: str) -> None:
        super().__init__("duplicate key value violates unique constraint")
        self.sqlstate = sqlstate


def _make_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", 7)
    row.name = kwargs.get("name", "Ann")
    row.email = kwargs.get("email", "ann@x.io")
    row.password_hash = kwargs.get("password_hash", "hash")
    row.role = kwargs.get("role", "member")
    row.created_at = kwargs.get("created_at", CREATED)
    return row


def _make_account(**kwargs: Any) -> Account:
    return Account(
        id=kwargs.get("id"),
        name=kwargs.get("name", "Ann"),
        email=kwargs.get("email", "ann@x.io"),
        password_hash=kwargs.get("password_hash", "hash"),
        role=kwargs.get("role", "member"),
    )


def _db_returning(row: Any = None, rowcount: int = 1) -> AsyncMock:
    db = AsyncMock()
    result = MagicMock()
    result.fetchone.return_value = row
    result.rowcount = rowcount
    db.execute.return_value = result
    return db


class TestSqlAccountRepository:
    async def test_create_assigns_id_and_timestamp(self) -> None:
        db = _db_returning(_make_row(id=7))
        created = await SqlAccountRepository(db).create_account(_make_account())
        assert created.id == 7
        assert created.created_at == CREATED
        assert created.email == "ann@x.io"
        params = db.execute.await_args.args[1]
        assert params["role"] == "member"

    async def test_create_duplicate_email(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = IntegrityError("INSERT", {}, _PgError("23505"))
        with pytest.raises(EmailExistsError):
            await SqlAccountRepository(db).create_account(_make_account())

    async def test_create_store_down(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = OperationalError("INSERT", {}, Exception("refused"))
        with pytest.raises(StoreConnectionError):
            await SqlAccountRepository(db).create_account(_make_account())

    async def test_get_by_id_found(self) -> None:
        db = _db_returning(_make_row())
        account = await SqlAccountRepository(db).get_by_id(7)
        assert account is not None
        assert account.id == 7
        assert account.name == "Ann"

    async def test_get_by_id_missing_returns_none(self) -> None:
        db = _db_returning(None)
        assert await SqlAccountRepository(db).get_by_id(99) is None

    async def test_get_by_email(self) -> None:
        db = _db_returning(_make_row())
        account = await SqlAccountRepository(db).get_by_email("ann@x.io")
        assert account is not None
        assert db.execute.await_args.args[1] == {"email": "ann@x.io"}

    async def test_update_missing_raises_not_found(self) -> None:
        db = _db_returning(None)
        with pytest.raises(AccountNotFoundError):
            await SqlAccountRepository(db).update(_make_account(id=99))

    async def test_update_returns_stored_row(self) -> None:
        db = _db_returning(_make_row(name="Ann B"))
        updated = await SqlAccountRepository(db).update(_make_account(id=7, name="Ann B"))
        assert updated.name == "Ann B"

    async def test_delete_missing_raises_not_found(self) -> None:
        db = _db_returning(rowcount=0)
        with pytest.raises(AccountNotFoundError):
            await SqlAccountRepository(db).delete(99)

    async def test_delete(self) -> None:
        db = _db_returning(rowcount=1)
        await SqlAccountRepository(db).delete(7)
        db.execute.assert_awaited_once()


class TestOrmAccountRepository:
    async def test_create_flushes(self) -> None:
        db = AsyncMock()
        db.add = MagicMock()
        created = await OrmAccountRepository(db).create_account(_make_account())
        db.add.assert_called_once()
        db.flush.assert_awaited_once()
        assert created.email == "ann@x.io"

    async def test_create_duplicate_email(self) -> None:
        db = AsyncMock()
        db.add = MagicMock()
        db.flush.side_effect = IntegrityError("INSERT", {}, _PgError("23505"))
        with pytest.raises(EmailExistsError):
            await OrmAccountRepository(db).create_account(_make_account())

    async def test_get_by_id_missing(self) -> None:
        db = AsyncMock()
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        db.execute.return_value = result
        assert await OrmAccountRepository(db).get_by_id(99) is None

    async def test_update_missing(self) -> None:
        db = AsyncMock()
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        db.execute.return_value = result
        with pytest.raises(AccountNotFoundError):
            await OrmAccountRepository(db).update(_make_account(id=99))

    async def test_delete_missing(self) -> None:
        db = _db_returning(rowcount=0)
        with pytest.raises(AccountNotFoundError):
            await OrmAccountRepository(db).delete(99)
