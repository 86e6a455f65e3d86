"""OrmOrderRepository: mapped-class implementation of OrderRepositoryProtocol."""

from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.db_errors import translate_store_errors
from src.ct_common.errors import InternalError
from src.ct_order.domain.models import Order
from src.ct_order.infrastructure.db_models import OrderORM


def _orm_to_order(row: OrderORM) -> Order:
    return Order(
        id=row.id,
        account_id=row.account_id,
        amount=row.amount,
        status=row.status,
        created_at=row.created_at,
    )


class OrmOrderRepository:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create_order(self, order: Order) -> Order:
        if order.account_id is None:
            raise InternalError("Order has no owning account")
        row = OrderORM(account_id=order.account_id, amount=order.amount, status=order.status)
        with translate_store_errors():
            self._db.add(row)
            await self._db.flush()
        return replace(order, id=row.id, created_at=row.created_at)

    async def get_by_id(self, order_id: int) -> Order | None:
        with translate_store_errors():
            result = await self._db.execute(select(OrderORM).where(OrderORM.id == order_id))
            row = result.scalar_one_or_none()
        return _orm_to_order(row) if row else None

    async def list_by_account(self, account_id: int) -> list[Order]:
        with translate_store_errors():
            result = await self._db.execute(
                select(OrderORM)
                .where(OrderORM.account_id == account_id)
                .order_by(OrderORM.id)
            )
            rows = result.scalars().all()
        return [_orm_to_order(row) for row in rows]
