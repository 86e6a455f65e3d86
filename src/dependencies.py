"""Composition root: builds the process-wide services from settings.

Routers import the getters below and resolve them through Depends(), so tests
can swap any of them with app.dependency_overrides.
"""

from config.settings import settings
from src.ct_account.application.service import AccountApplicationService
from src.ct_account.domain.cache import AccountCacheProtocol, CachedAccountReader
from src.ct_account.infrastructure.cache import (
    InMemoryAccountCache,
    NullAccountCache,
    RedisAccountCache,
)
from src.ct_account.infrastructure.orm_repository import OrmAccountRepository
from src.ct_account.infrastructure.persistence import SqlAccountRepository
from src.ct_common.database import async_session_factory
from src.ct_gateway.application.service import AuthService
from src.ct_gateway.auth.gate import AuthorizationGate
from src.ct_gateway.auth.jwt_handler import JwtConfig, TokenIssuer
from src.ct_onboarding.application.service import OnboardingService
from src.ct_order.application.service import OrderApplicationService
from src.ct_order.infrastructure.orm_repository import OrmOrderRepository
from src.ct_order.infrastructure.persistence import SqlOrderRepository
from src.ct_tx.infrastructure.sqlalchemy_uow import SqlAlchemyTransactionManager

_REPOSITORIES = {
    "sql": (SqlAccountRepository, SqlOrderRepository),
    "orm": (OrmAccountRepository, OrmOrderRepository),
}


def build_account_cache(backend: str) -> AccountCacheProtocol:
    if backend == "redis":
        # Client is attached in the app lifespan; until then reads are misses.
        return RedisAccountCache()
    if backend == "memory":
        return InMemoryAccountCache()
    return NullAccountCache()


jwt_config = JwtConfig(
    secret=settings.JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    expire_hours=settings.JWT_EXPIRE_HOURS,
)
account_repo_factory, order_repo_factory = _REPOSITORIES[settings.REPOSITORY_BACKEND]

account_cache = build_account_cache(settings.CACHE_BACKEND)
cache_reader = CachedAccountReader(account_cache, settings.ACCOUNT_CACHE_TTL_SECONDS)
tx_manager = SqlAlchemyTransactionManager(
    async_session_factory,
    account_repo_factory=account_repo_factory,
    order_repo_factory=order_repo_factory,
    timeout_seconds=settings.REQUEST_TIMEOUT_SECONDS,
)

_gate = AuthorizationGate(jwt_config)
_auth_service = AuthService(
    tx_manager,
    TokenIssuer(jwt_config),
    settings.DEFAULT_ROLE,
    account_repo_factory=account_repo_factory,
)
_account_service = AccountApplicationService(
    tx_manager,
    cache_reader,
    account_repo_factory=account_repo_factory,
    order_repo_factory=order_repo_factory,
)
_order_service = OrderApplicationService(order_repo_factory)
_onboarding_service = OnboardingService(tx_manager, _auth_service)


def get_gate() -> AuthorizationGate:
    return _gate


def get_auth_service() -> AuthService:
    return _auth_service


def get_account_service() -> AccountApplicationService:
    return _account_service


def get_order_service() -> OrderApplicationService:
    return _order_service


def get_onboarding_service() -> OnboardingService:
    return _onboarding_service
