"""Domain models for ct_account: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime

from src.ct_order.domain.models import Order


@dataclass
class Account:
    name: str
    email: str
    password_hash: str
    role: str
    id: int | None = None            # assigned by the store on create
    created_at: datetime | None = None


@dataclass
class AccountWithOrders:
    account: Account
    orders: list[Order] = field(default_factory=list)
