"""SqlOrderRepository: raw SQL persistence implementation."""
from dataclasses import replace
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.db_errors import translate_store_errors
from src.ct_common.errors import InternalError
from src.ct_order.domain.models import Order

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (account_id, amount, status)
    VALUES (:account_id, :amount, :status)
    RETURNING id, created_at
""")

_SELECT_COLUMNS = "id, account_id, amount, status, created_at"

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders WHERE id = :id
""")

_LIST_ORDERS_BY_ACCOUNT_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders
    WHERE account_id = :account_id
    ORDER BY id
""")


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=row.id,
        account_id=row.account_id,
        amount=row.amount,
        status=row.status,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class SqlOrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def create_order(self, order: Order) -> Order:
        if order.account_id is None:
            raise InternalError("Order has no owning account")
        with translate_store_errors():
            result = await self._db.execute(
                _INSERT_ORDER_SQL,
                {
                    "account_id": order.account_id,
                    "amount": order.amount,
                    "status": order.status,
                },
            )
            row = result.fetchone()
        if row is None:
            raise InternalError("Order insert returned no rows")
        return replace(order, id=row.id, created_at=row.created_at)

    async def get_by_id(self, order_id: int) -> Order | None:
        with translate_store_errors():
            result = await self._db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
            row = result.fetchone()
        return _row_to_order(row) if row else None

    async def list_by_account(self, account_id: int) -> list[Order]:
        with translate_store_errors():
            result = await self._db.execute(
                _LIST_ORDERS_BY_ACCOUNT_SQL, {"account_id": account_id}
            )
            rows = result.fetchall()
        return [_row_to_order(row) for row in rows]
