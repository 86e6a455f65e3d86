"""Onboarding API router: one endpoint, open to anonymous callers."""

from fastapi import APIRouter, Depends, Request, status

from src.ct_common.response import ApiResponse, success_response
from src.ct_onboarding.application.schemas import RegisterWithOrderRequest
from src.ct_onboarding.application.service import OnboardingService
from src.dependencies import get_onboarding_service

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.post(
    "/register-with-order",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Register an account together with its first order",
)
async def register_with_order(
    request: Request,
    body: RegisterWithOrderRequest,
    service: OnboardingService = Depends(get_onboarding_service),
) -> ApiResponse:
    data = await service.register(body)
    resp = success_response(data.model_dump(mode="json"), message="Account and order created")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
