"""AccountApplicationService: profile reads and mutations.

Reads run on the request-scoped session `db` without an explicit transaction;
the single-account lookup goes through the cache-aside reader. Mutations run
inside a unit of work and invalidate the cached snapshot after commit.
"""

from dataclasses import replace

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.application.schemas import (
    AccountResponse,
    AccountWithOrdersResponse,
    UpdateAccountRequest,
)
from src.ct_account.domain.cache import CachedAccountReader
from src.ct_account.domain.models import AccountWithOrders
from src.ct_account.infrastructure.persistence import SqlAccountRepository
from src.ct_common.errors import AccountNotFoundError
from src.ct_gateway.auth.password import hash_password
from src.ct_order.infrastructure.persistence import SqlOrderRepository
from src.ct_tx.domain.unit_of_work import TransactionManagerProtocol
from src.ct_tx.infrastructure.sqlalchemy_uow import AccountRepoFactory, OrderRepoFactory


class AccountApplicationService:
    def __init__(
        self,
        tx_manager: TransactionManagerProtocol,
        cache_reader: CachedAccountReader,
        account_repo_factory: AccountRepoFactory = SqlAccountRepository,
        order_repo_factory: OrderRepoFactory = SqlOrderRepository,
    ) -> None:
        self._tx = tx_manager
        self._cache_reader = cache_reader
        self._account_repo_factory = account_repo_factory
        self._order_repo_factory = order_repo_factory

    async def get_account(self, db: AsyncSession, account_id: int) -> AccountResponse:
        account = await self._cache_reader.get_by_id(
            self._account_repo_factory(db), account_id
        )
        return AccountResponse.from_domain(account)

    async def get_account_with_orders(
        self, db: AsyncSession, account_id: int
    ) -> AccountWithOrdersResponse:
        account = await self._account_repo_factory(db).get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        orders = await self._order_repo_factory(db).list_by_account(account_id)
        return AccountWithOrdersResponse.from_domain(
            AccountWithOrders(account=account, orders=orders)
        )

    async def update_account(
        self, account_id: int, req: UpdateAccountRequest
    ) -> AccountResponse:
        async with self._tx.scope() as uow:
            current = await uow.accounts.get_by_id(account_id)
            if current is None:
                raise AccountNotFoundError(account_id)
            changed = replace(
                current,
                name=req.name,
                email=str(req.email),
                role=req.role.value if req.role else current.role,
                password_hash=(
                    hash_password(req.password) if req.password else current.password_hash
                ),
            )
            updated = await uow.accounts.update(changed)
            await uow.commit()
        await self._cache_reader.invalidate(account_id)
        return AccountResponse.from_domain(updated)

    async def delete_account(self, account_id: int) -> None:
        async with self._tx.scope() as uow:
            await uow.accounts.delete(account_id)
            await uow.commit()
        await self._cache_reader.invalidate(account_id)
