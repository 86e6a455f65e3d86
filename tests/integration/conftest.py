"""Integration-test fixtures (requires running PG + Redis, migrated with `alembic upgrade head`).

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session. The whole directory is skipped
when PostgreSQL cannot be reached.
"""

import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.ct_account.domain.models import Account
from src.ct_account.infrastructure.cache import RedisAccountCache
from src.ct_common.database import engine
from src.ct_common.redis_client import get_redis, ping_redis
from src.ct_gateway.auth.jwt_handler import TokenIssuer
from src.ct_gateway.auth.password import hash_password
from src.dependencies import account_cache, jwt_config, tx_manager
from src.main import app


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def live_store() -> None:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM accounts LIMIT 1"))
    except Exception as exc:  # noqa: BLE001
        pytest.skip(f"PostgreSQL not reachable or not migrated: {exc}")
    if isinstance(account_cache, RedisAccountCache) and await ping_redis():
        account_cache.bind(await get_redis())


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client: keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def admin_headers() -> dict[str, str]:
    """Seeds an admin account directly through a unit of work and returns its bearer header."""
    uid = uuid.uuid4().hex[:8]
    async with tx_manager.scope() as uow:
        admin = await uow.accounts.create_account(
            Account(
                name=f"admin_{uid}",
                email=f"admin_{uid}@example.com",
                password_hash=hash_password("AdminPass1"),
                role="admin",
            )
        )
        await uow.commit()
    return {"Authorization": f"Bearer {TokenIssuer(jwt_config).issue(admin)}"}


def unique_email() -> str:
    return f"test_{uuid.uuid4().hex[:8]}@example.com"
