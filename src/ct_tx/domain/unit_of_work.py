"""Unit of Work protocol: one transaction scope spanning both repositories.

A unit of work is created by TransactionManager.begin(), hands out repository
handles bound to its single transaction, and is finalized exactly once:

    ACTIVE --commit ok--> COMMITTED
    ACTIVE --commit error--> FAILED --rollback--> ROLLED_BACK
    ACTIVE --rollback--> ROLLED_BACK

commit() is only legal from ACTIVE. rollback() is a no-op once ROLLED_BACK and
an InvalidStateError after COMMITTED. Any other misuse fails loudly.
"""

from contextlib import AbstractAsyncContextManager
from enum import Enum
from typing import Protocol

from src.ct_account.domain.repository import AccountRepositoryProtocol
from src.ct_order.domain.repository import OrderRepositoryProtocol


class ScopeState(str, Enum):
    ACTIVE = "ACTIVE"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"
    FAILED = "FAILED"


class UnitOfWorkProtocol(Protocol):
    @property
    def state(self) -> ScopeState: ...

    @property
    def accounts(self) -> AccountRepositoryProtocol: ...

    @property
    def orders(self) -> OrderRepositoryProtocol: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class TransactionManagerProtocol(Protocol):
    async def begin(self) -> UnitOfWorkProtocol:
        """Raises StoreConnectionError if no transaction can be started."""
        ...

    def scope(self) -> AbstractAsyncContextManager[UnitOfWorkProtocol]:
        """begin() plus guaranteed rollback on every exit that did not commit."""
        ...
