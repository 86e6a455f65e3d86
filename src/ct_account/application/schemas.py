"""Pydantic schemas for ct_account API.

The credential hash never appears in any response schema.
"""

from pydantic import BaseModel, EmailStr, Field

from src.ct_account.domain.models import Account, AccountWithOrders
from src.ct_common.enums import Role
from src.ct_order.application.schemas import OrderResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class UpdateAccountRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    password: str | None = Field(None, min_length=1, max_length=128)
    role: Role | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccountResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id or 0,
            name=account.name,
            email=account.email,
            role=account.role,
            created_at=account.created_at.isoformat() if account.created_at else "",
        )


class AccountWithOrdersResponse(BaseModel):
    account: AccountResponse
    orders: list[OrderResponse]

    @classmethod
    def from_domain(cls, result: AccountWithOrders) -> "AccountWithOrdersResponse":
        return cls(
            account=AccountResponse.from_domain(result.account),
            orders=[OrderResponse.from_domain(o) for o in result.orders],
        )
