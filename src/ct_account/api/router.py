"""ct_account REST API: 4 endpoints, all require the admin role."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.application.schemas import UpdateAccountRequest
from src.ct_account.application.service import AccountApplicationService
from src.ct_common.database import get_db_session
from src.ct_common.enums import Role
from src.ct_common.response import ApiResponse, success_response
from src.ct_gateway.auth.dependencies import require_role
from src.ct_gateway.auth.jwt_handler import Claims
from src.dependencies import get_account_service

router = APIRouter(prefix="/accounts", tags=["accounts"])

AccountId = Annotated[int, Path(ge=1, description="Account id")]
AdminClaims = Annotated[Claims, Depends(require_role(Role.ADMIN))]
Service = Annotated[AccountApplicationService, Depends(get_account_service)]


@router.get("/{account_id}")
async def get_account(
    account_id: AccountId,
    _claims: AdminClaims,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Service,
    request: Request,
) -> ApiResponse:
    data = await service.get_account(db, account_id)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{account_id}/orders")
async def get_account_with_orders(
    account_id: AccountId,
    _claims: AdminClaims,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Service,
    request: Request,
) -> ApiResponse:
    data = await service.get_account_with_orders(db, account_id)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.put("/{account_id}")
async def update_account(
    account_id: AccountId,
    body: UpdateAccountRequest,
    _claims: AdminClaims,
    service: Service,
    request: Request,
) -> ApiResponse:
    data = await service.update_account(account_id, body)
    resp = success_response(data.model_dump(mode="json"), message="Account updated")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: AccountId,
    _claims: AdminClaims,
    service: Service,
) -> Response:
    await service.delete_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
