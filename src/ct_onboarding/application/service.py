"""OnboardingService: register an account together with its first order.

Both inserts run in one unit of work: the order is durable only if its
owning account is durable in the same transaction. A failure at any step
(account insert, order insert, commit, deadline) leaves nothing persisted.
The store's UNIQUE constraint on accounts.email is the only guard against
concurrent duplicate registrations; no in-process locking is added.
"""

import logging
from dataclasses import replace

from src.ct_account.application.schemas import AccountResponse
from src.ct_account.domain.models import Account
from src.ct_gateway.application.service import AuthService
from src.ct_onboarding.application.schemas import (
    RegisterWithOrderRequest,
    RegisterWithOrderResponse,
)
from src.ct_order.application.schemas import OrderResponse
from src.ct_order.domain.models import Order
from src.ct_tx.domain.unit_of_work import TransactionManagerProtocol

logger = logging.getLogger("ct.uow")


class OnboardingService:
    def __init__(
        self,
        tx_manager: TransactionManagerProtocol,
        auth_service: AuthService,
    ) -> None:
        self._tx = tx_manager
        self._auth = auth_service

    async def register_account_with_order(
        self, account: Account, order: Order
    ) -> tuple[Account, Order]:
        """Persist both or neither; return them with store-generated ids and timestamps.

        Raises:
            StoreConnectionError: no transaction could be started, the store
                dropped mid-scope, or the deadline expired.
            EmailExistsError: the contact address is taken; the whole
                operation is rolled back.
            ConflictError: the store rejected the commit.
        """
        async with self._tx.scope() as uow:
            created = await uow.accounts.create_account(account)
            placed = await uow.orders.create_order(replace(order, account_id=created.id))
            await uow.commit()
        logger.info("registered account id=%s with order id=%s", created.id, placed.id)
        return created, placed

    async def register(self, req: RegisterWithOrderRequest) -> RegisterWithOrderResponse:
        account = self._auth.new_account(req.name, str(req.email), req.password)
        created, placed = await self.register_account_with_order(
            account, req.order.to_domain()
        )
        return RegisterWithOrderResponse(
            account=AccountResponse.from_domain(created),
            order=OrderResponse.from_domain(placed),
        )
