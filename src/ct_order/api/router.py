"""ct_order REST API: read a single order; any authenticated member may call it."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_common.database import get_db_session
from src.ct_common.enums import Role
from src.ct_common.response import ApiResponse, success_response
from src.ct_gateway.auth.dependencies import require_role
from src.ct_gateway.auth.jwt_handler import Claims
from src.ct_order.application.service import OrderApplicationService
from src.dependencies import get_order_service

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("/{order_id}")
async def get_order(
    order_id: Annotated[int, Path(ge=1)],
    _claims: Annotated[Claims, Depends(require_role(Role.MEMBER))],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderApplicationService, Depends(get_order_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_order(db, order_id)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
