"""OrderApplicationService: read-only, runs on the request-scoped session."""

from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.errors import OrderNotFoundError
from src.ct_order.application.schemas import OrderResponse
from src.ct_order.infrastructure.persistence import SqlOrderRepository
from src.ct_tx.infrastructure.sqlalchemy_uow import OrderRepoFactory


class OrderApplicationService:
    def __init__(self, repo_factory: OrderRepoFactory = SqlOrderRepository) -> None:
        self._repo_factory = repo_factory

    async def get_order(self, db: AsyncSession, order_id: int) -> OrderResponse:
        order = await self._repo_factory(db).get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return OrderResponse.from_domain(order)
