"""OrderRepository Protocol: interface contract for persistence layer."""
from typing import Protocol

from src.ct_order.domain.models import Order


class OrderRepositoryProtocol(Protocol):
    async def create_order(self, order: Order) -> Order:
        """Insert and return a copy with id/created_at filled in.

        Raises ConflictError if account_id does not reference an account.
        """
        ...

    async def get_by_id(self, order_id: int) -> Order | None: ...

    async def list_by_account(self, account_id: int) -> list[Order]: ...
