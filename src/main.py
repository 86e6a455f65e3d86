"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.ct_account.api.router import router as account_router
from src.ct_account.infrastructure.cache import RedisAccountCache
from src.ct_common.database import engine
from src.ct_common.errors import AppError, ValidationError
from src.ct_common.redis_client import close_redis, get_redis, ping_redis
from src.ct_common.response import error_response
from src.ct_gateway.api.router import router as auth_router
from src.ct_gateway.middleware.request_log import RequestLogMiddleware
from src.ct_onboarding.api.router import router as onboarding_router
from src.ct_order.api.router import router as order_router
from src.dependencies import account_cache

logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")
logging.getLogger("ct").setLevel(settings.LOG_LEVEL.upper())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, attach Redis if it answers. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    if isinstance(account_cache, RedisAccountCache):
        # A Redis that is down at startup is still bound; reads just miss until it recovers
        await ping_redis()
        account_cache.bind(await get_redis())
    yield
    # Shutdown
    if isinstance(account_cache, RedisAccountCache):
        account_cache.bind(None)
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.details)
    return JSONResponse(
        status_code=exc.http_status,
        content=jsonable_encoder(resp),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    err = ValidationError("Request validation failed")
    details = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")}
        for e in exc.errors()
    ]
    resp = error_response(err.code, err.message, details)
    return JSONResponse(
        status_code=err.http_status,
        content=jsonable_encoder(resp),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(onboarding_router, prefix="/api/v1")
app.include_router(account_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
