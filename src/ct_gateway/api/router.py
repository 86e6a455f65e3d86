"""Auth API router: register, login.

All endpoints return ApiResponse[T]. request_id is read from
request.state (injected by RequestLogMiddleware).
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ct_account.application.schemas import AccountResponse
from src.ct_common.database import get_db_session
from src.ct_common.response import ApiResponse, success_response
from src.ct_gateway.application.schemas import LoginRequest, LoginResponse, RegisterRequest
from src.ct_gateway.application.service import AuthService
from src.dependencies import get_auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Account registration",
)
async def register(
    request: Request,
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse:
    account = await service.register(body.name, str(body.email), body.password)

    resp = success_response(AccountResponse.from_domain(account).model_dump(mode="json"))
    resp.request_id = _get_request_id(request)
    resp.message = "Account registered successfully"
    return resp


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Account login",
)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    service: AuthService = Depends(get_auth_service),
) -> ApiResponse:
    account, access_token = await service.login(db, str(body.email), body.password)

    data = LoginResponse(
        access_token=access_token,
        token_type="Bearer",
        expires_in=service.token_lifetime_seconds,
        account=AccountResponse.from_domain(account),
    )
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = _get_request_id(request)
    resp.message = "Login successful"
    return resp
