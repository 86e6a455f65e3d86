"""Order domain model: pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class OrderItem:
    product_id: int
    name: str
    quantity: int
    price: Decimal  # unit price


@dataclass
class Order:
    amount: Decimal
    status: str = "PENDING"
    account_id: int | None = None  # owning account, set before insert
    id: int | None = None
    created_at: datetime | None = None
    # Travels with the order payload only; never written to the orders table
    items: list[OrderItem] = field(default_factory=list)
