"""SqlAccountRepository: raw SQL implementation of AccountRepositoryProtocol.

The repository is bound to the AsyncSession it is constructed with. Transaction
ownership stays with the caller: a unit of work for writes, the request-scoped
session for plain reads.
"""

from dataclasses import replace

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.domain.models import Account
from src.ct_common.db_errors import translate_store_errors
from src.ct_common.errors import AccountNotFoundError, EmailExistsError, InternalError

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ACCOUNT_SQL = text("""
    INSERT INTO accounts (name, email, password_hash, role)
    VALUES (:name, :email, :password_hash, :role)
    RETURNING id, created_at
""")

_GET_ACCOUNT_BY_ID_SQL = text("""
    SELECT id, name, email, password_hash, role, created_at
    FROM accounts
    WHERE id = :id
""")

_GET_ACCOUNT_BY_EMAIL_SQL = text("""
    SELECT id, name, email, password_hash, role, created_at
    FROM accounts
    WHERE email = :email
""")

_UPDATE_ACCOUNT_SQL = text("""
    UPDATE accounts
    SET name = :name, email = :email, password_hash = :password_hash, role = :role
    WHERE id = :id
    RETURNING id, name, email, password_hash, role, created_at
""")

_DELETE_ACCOUNT_SQL = text("""
    DELETE FROM accounts WHERE id = :id
""")


def _row_to_account(row: object) -> Account:
    return Account(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        password_hash=row.password_hash,  # type: ignore[attr-defined]
        role=row.role,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class SqlAccountRepository:
    """Concrete repository over hand-written SQL."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create_account(self, account: Account) -> Account:
        with translate_store_errors(on_duplicate=EmailExistsError):
            result = await self._db.execute(
                _INSERT_ACCOUNT_SQL,
                {
                    "name": account.name,
                    "email": account.email,
                    "password_hash": account.password_hash,
                    "role": account.role,
                },
            )
            row = result.fetchone()
        if row is None:
            raise InternalError("Account insert returned no rows")
        return replace(account, id=row.id, created_at=row.created_at)

    async def get_by_id(self, account_id: int) -> Account | None:
        with translate_store_errors():
            result = await self._db.execute(_GET_ACCOUNT_BY_ID_SQL, {"id": account_id})
            row = result.fetchone()
        return _row_to_account(row) if row else None

    async def get_by_email(self, email: str) -> Account | None:
        with translate_store_errors():
            result = await self._db.execute(_GET_ACCOUNT_BY_EMAIL_SQL, {"email": email})
            row = result.fetchone()
        return _row_to_account(row) if row else None

    async def update(self, account: Account) -> Account:
        if account.id is None:
            raise InternalError("Cannot update an account without an id")
        with translate_store_errors(on_duplicate=EmailExistsError):
            result = await self._db.execute(
                _UPDATE_ACCOUNT_SQL,
                {
                    "id": account.id,
                    "name": account.name,
                    "email": account.email,
                    "password_hash": account.password_hash,
                    "role": account.role,
                },
            )
            row = result.fetchone()
        if row is None:
            raise AccountNotFoundError(account.id)
        return _row_to_account(row)

    async def delete(self, account_id: int) -> None:
        with translate_store_errors():
            result = await self._db.execute(_DELETE_ACCOUNT_SQL, {"id": account_id})
        if result.rowcount == 0:
            raise AccountNotFoundError(account_id)
