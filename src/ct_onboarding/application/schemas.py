"""Schemas for registering an account together with its first order."""

from pydantic import BaseModel

from src.ct_account.application.schemas import AccountResponse
from src.ct_gateway.application.schemas import RegisterRequest
from src.ct_order.application.schemas import OrderRequest, OrderResponse


class RegisterWithOrderRequest(RegisterRequest):
    order: OrderRequest


class RegisterWithOrderResponse(BaseModel):
    account: AccountResponse
    order: OrderResponse
