"""OrmAccountRepository: mapped-class implementation of AccountRepositoryProtocol.

Interchangeable with SqlAccountRepository; selected with REPOSITORY_BACKEND=orm.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.domain.models import Account
from src.ct_account.infrastructure.db_models import AccountORM
from src.ct_common.db_errors import translate_store_errors
from src.ct_common.errors import AccountNotFoundError, EmailExistsError, InternalError


def _orm_to_account(row: AccountORM) -> Account:
    return Account(
        id=row.id,
        name=row.name,
        email=row.email,
        password_hash=row.password_hash,
        role=row.role,
        created_at=row.created_at,
    )


class OrmAccountRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create_account(self, account: Account) -> Account:
        row = AccountORM(
            name=account.name,
            email=account.email,
            password_hash=account.password_hash,
            role=account.role,
        )
        with translate_store_errors(on_duplicate=EmailExistsError):
            self._db.add(row)
            await self._db.flush()
        return _orm_to_account(row)

    async def get_by_id(self, account_id: int) -> Account | None:
        row = await self._get_row(account_id)
        return _orm_to_account(row) if row else None

    async def get_by_email(self, email: str) -> Account | None:
        with translate_store_errors():
            result = await self._db.execute(
                select(AccountORM).where(AccountORM.email == email)
            )
            row = result.scalar_one_or_none()
        return _orm_to_account(row) if row else None

    async def update(self, account: Account) -> Account:
        if account.id is None:
            raise InternalError("Cannot update an account without an id")
        row = await self._get_row(account.id)
        if row is None:
            raise AccountNotFoundError(account.id)
        row.name = account.name
        row.email = account.email
        row.password_hash = account.password_hash
        row.role = account.role
        with translate_store_errors(on_duplicate=EmailExistsError):
            await self._db.flush()
        return _orm_to_account(row)

    async def delete(self, account_id: int) -> None:
        with translate_store_errors():
            result = await self._db.execute(
                delete(AccountORM).where(AccountORM.id == account_id)
            )
        if result.rowcount == 0:
            raise AccountNotFoundError(account_id)

    async def _get_row(self, account_id: int) -> AccountORM | None:
        with translate_store_errors():
            result = await self._db.execute(
                select(AccountORM).where(AccountORM.id == account_id)
            )
            return result.scalar_one_or_none()
