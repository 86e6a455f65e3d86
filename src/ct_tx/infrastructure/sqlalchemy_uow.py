"""SQLAlchemy implementation of the transaction manager / unit of work.

Each unit of work owns one AsyncSession (one pooled connection, one database
transaction). The repository handles it exposes are constructed over that
session, so every statement they issue is part of the same transaction and
stays invisible to other transactions until commit.

Typical use from an application service:

    async with tx_manager.scope() as uow:
        account = await uow.accounts.create_account(account)
        order = await uow.orders.create_order(replace(order, account_id=account.id))
        await uow.commit()

Leaving the block without commit() (early return, exception, cancellation,
deadline) rolls the transaction back. The manager and its session factory are
process-wide; a unit of work is never shared between requests.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.ct_account.domain.repository import AccountRepositoryProtocol
from src.ct_account.infrastructure.persistence import SqlAccountRepository
from src.ct_common.db_errors import sqlstate_of, to_store_error
from src.ct_common.errors import (
    AppError,
    ConflictError,
    InvalidStateError,
    StoreConnectionError,
)
from src.ct_order.domain.repository import OrderRepositoryProtocol
from src.ct_order.infrastructure.persistence import SqlOrderRepository
from src.ct_tx.domain.unit_of_work import ScopeState

logger = logging.getLogger("ct.uow")

AccountRepoFactory = Callable[[AsyncSession], AccountRepositoryProtocol]
OrderRepoFactory = Callable[[AsyncSession], OrderRepositoryProtocol]

_NEEDS_ROLLBACK = (ScopeState.ACTIVE, ScopeState.FAILED)


def _commit_error(exc: BaseException) -> AppError | None:
    if isinstance(exc, IntegrityError):
        return ConflictError(f"Commit rejected: {sqlstate_of(exc) or 'constraint violation'}")
    return to_store_error(exc)


class SqlAlchemyUnitOfWork:
    def __init__(
        self,
        session: AsyncSession,
        account_repo_factory: AccountRepoFactory,
        order_repo_factory: OrderRepoFactory,
    ) -> None:
        self._session = session
        self._accounts = account_repo_factory(session)
        self._orders = order_repo_factory(session)
        self._state = ScopeState.ACTIVE

    @property
    def state(self) -> ScopeState:
        return self._state

    @property
    def accounts(self) -> AccountRepositoryProtocol:
        self._require_active("accounts")
        return self._accounts

    @property
    def orders(self) -> OrderRepositoryProtocol:
        self._require_active("orders")
        return self._orders

    async def commit(self) -> None:
        self._require_active("commit()")
        try:
            await self._session.commit()
        except BaseException as exc:
            # CancelledError included. Transaction is aborted; only rollback() is legal
            self._state = ScopeState.FAILED
            mapped = _commit_error(exc)
            if mapped is None:
                raise
            raise mapped from exc
        self._state = ScopeState.COMMITTED
        await self._session.close()

    async def rollback(self) -> None:
        if self._state is ScopeState.ROLLED_BACK:
            return
        if self._state is ScopeState.COMMITTED:
            raise InvalidStateError("rollback() called on a committed unit of work")
        self._state = ScopeState.ROLLED_BACK
        try:
            await self._session.rollback()
        except Exception as exc:
            mapped = to_store_error(exc)
            if mapped is None:
                raise
            # The server discards an unfinished transaction when the connection drops
            raise mapped from exc
        finally:
            await self._session.close()

    def _require_active(self, what: str) -> None:
        if self._state is not ScopeState.ACTIVE:
            raise InvalidStateError(
                f"{what} used on a {self._state.value.lower()} unit of work"
            )


class SqlAlchemyTransactionManager:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        account_repo_factory: AccountRepoFactory = SqlAccountRepository,
        order_repo_factory: OrderRepoFactory = SqlOrderRepository,
        timeout_seconds: float | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._account_repo_factory = account_repo_factory
        self._order_repo_factory = order_repo_factory
        self._timeout = timeout_seconds

    async def begin(self) -> SqlAlchemyUnitOfWork:
        session = self._session_factory()
        try:
            # Acquire the connection now so pool exhaustion / network failure
            # is reported by begin(), not by the first statement
            await session.connection()
        except BaseException as exc:
            await session.close()
            mapped = to_store_error(exc)
            if mapped is None:
                raise
            raise mapped from exc
        return SqlAlchemyUnitOfWork(
            session, self._account_repo_factory, self._order_repo_factory
        )

    @asynccontextmanager
    async def scope(self) -> AsyncIterator[SqlAlchemyUnitOfWork]:
        try:
            async with asyncio.timeout(self._timeout):
                uow = await self.begin()
                try:
                    yield uow
                except BaseException:
                    await _rollback_after_error(uow)
                    raise
                if uow.state in _NEEDS_ROLLBACK:
                    logger.debug("unit of work left without commit, rolling back")
                    await uow.rollback()
        except TimeoutError as exc:
            raise StoreConnectionError("Unit of work timed out") from exc


async def _rollback_after_error(uow: SqlAlchemyUnitOfWork) -> None:
    """Roll back without masking the error that is already propagating."""
    if uow.state not in _NEEDS_ROLLBACK:
        return
    logger.info("rolling back unit of work after error")
    try:
        await uow.rollback()
    except Exception as exc:  # noqa: BLE001
        logger.warning("rollback failed: %s", exc)
