"""Repository Protocol: dependency inversion for testability.

Implementations are bound to one AsyncSession at construction, so a handle
obtained from a unit of work always reads and writes through that scope's
transaction. Two interchangeable backends exist: raw SQL and ORM.
"""

from typing import Protocol

from src.ct_account.domain.models import Account


class AccountRepositoryProtocol(Protocol):
    async def create_account(self, account: Account) -> Account:
        """Insert and return a copy with id/created_at filled in.

        Raises EmailExistsError on a duplicate contact address.
        """
        ...

    async def get_by_id(self, account_id: int) -> Account | None: ...

    async def get_by_email(self, email: str) -> Account | None: ...

    async def update(self, account: Account) -> Account:
        """Replace the mutable columns. Raises AccountNotFoundError if no row."""
        ...

    async def delete(self, account_id: int) -> None:
        """Raises AccountNotFoundError if no row."""
        ...
