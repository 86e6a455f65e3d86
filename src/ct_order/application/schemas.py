"""Pydantic schemas for ct_order API."""

from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from src.ct_common.enums import OrderStatus
from src.ct_order.domain.models import Order, OrderItem

_CENTS = Decimal("0.01")

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class OrderItemSchema(BaseModel):
    product_id: int = Field(..., ge=1)
    name: str = Field("", max_length=255)
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)

    @field_validator("price")
    @classmethod
    def to_cents(cls, v: Decimal) -> Decimal:
        return v.quantize(_CENTS)

    def to_domain(self) -> OrderItem:
        return OrderItem(
            product_id=self.product_id,
            name=self.name,
            quantity=self.quantity,
            price=self.price,
        )


class OrderRequest(BaseModel):
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    status: OrderStatus = OrderStatus.PENDING
    items: list[OrderItemSchema] = Field(default_factory=list)

    @field_validator("amount")
    @classmethod
    def to_cents(cls, v: Decimal) -> Decimal:
        return v.quantize(_CENTS)

    def to_domain(self) -> Order:
        return Order(
            amount=self.amount,
            status=self.status.value,
            items=[item.to_domain() for item in self.items],
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class OrderItemResponse(BaseModel):
    product_id: int
    name: str
    quantity: int
    price: Decimal


class OrderResponse(BaseModel):
    id: int
    account_id: int
    amount: Decimal
    status: str
    created_at: str  # ISO8601 string
    items: list[OrderItemResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id or 0,
            account_id=order.account_id or 0,
            amount=order.amount,
            status=order.status,
            created_at=order.created_at.isoformat() if order.created_at else "",
            items=[
                OrderItemResponse(
                    product_id=i.product_id,
                    name=i.name,
                    quantity=i.quantity,
                    price=i.price,
                )
                for i in order.items
            ],
        )
