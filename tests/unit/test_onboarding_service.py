"""RegisterAccountWithOrder: both rows become durable together or not at all."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.ct_account.domain.models import Account
from src.ct_common.errors import (
    ConflictError,
    EmailExistsError,
    StoreConnectionError,
)
from src.ct_gateway.application.service import AuthService
from src.ct_gateway.auth.password import verify_password
from src.ct_onboarding.application.schemas import RegisterWithOrderRequest
from src.ct_onboarding.application.service import OnboardingService
from src.ct_order.domain.models import Order
from src.ct_tx.infrastructure.sqlalchemy_uow import SqlAlchemyTransactionManager
from tests.fakes import FakeAccountRepository, FakeOrderRepository, FakeSession, InMemoryStore


def _account(email: str = "ann@x.io") -> Account:
    return Account(name="Ann", email=email, password_hash="hash", role="member")


def _order() -> Order:
    return Order(amount=Decimal("42.50"))


def _service(
    store: InMemoryStore,
    *,
    commit_error: BaseException | None = None,
    order_error: BaseException | None = None,
    order_delay: float = 0.0,
    timeout: float | None = None,
) -> tuple[OnboardingService, list[FakeSession]]:
    sessions: list[FakeSession] = []

    def session_factory() -> FakeSession:
        session = FakeSession(store, commit_error=commit_error)
        sessions.append(session)
        return session

    tx = SqlAlchemyTransactionManager(
        session_factory,  # type: ignore[arg-type]
        account_repo_factory=FakeAccountRepository,  # type: ignore[arg-type]
        order_repo_factory=lambda s: FakeOrderRepository(  # type: ignore[arg-type,return-value]
            s, fail_with=order_error, delay=order_delay
        ),
        timeout_seconds=timeout,
    )
    auth = AuthService(tx, MagicMock(), default_role="member")
    return OnboardingService(tx, auth), sessions


class TestRegisterAccountWithOrder:
    async def test_both_persisted(self) -> None:
        store = InMemoryStore()
        service, sessions = _service(store)

        account, order = await service.register_account_with_order(_account(), _order())

        assert account.id is not None
        assert order.id is not None
        assert order.account_id == account.id
        assert order.amount == Decimal("42.50")
        assert store.accounts[account.id].email == "ann@x.io"
        assert store.orders[order.id].account_id == account.id
        assert sessions[0].committed and sessions[0].closed

    async def test_order_failure_leaves_nothing(self) -> None:
        store = InMemoryStore()
        service, sessions = _service(store, order_error=ConflictError("check violation"))

        with pytest.raises(ConflictError):
            await service.register_account_with_order(_account(), _order())

        assert store.accounts == {}
        assert store.orders == {}
        assert sessions[0].rolled_back and sessions[0].closed

    async def test_duplicate_email_leaves_nothing_new(self) -> None:
        store = InMemoryStore()
        service, _ = _service(store)
        await service.register_account_with_order(_account(), _order())

        with pytest.raises(EmailExistsError):
            await service.register_account_with_order(_account(), _order())

        assert len(store.accounts) == 1
        assert len(store.orders) == 1

    async def test_commit_failure_leaves_nothing(self) -> None:
        store = InMemoryStore()
        service, sessions = _service(
            store, commit_error=OperationalError("COMMIT", {}, Exception("server closed"))
        )

        with pytest.raises(StoreConnectionError):
            await service.register_account_with_order(_account(), _order())

        assert store.accounts == {}
        assert sessions[0].rolled_back

    async def test_deadline_leaves_nothing(self) -> None:
        store = InMemoryStore()
        service, sessions = _service(store, order_delay=1.0, timeout=0.01)

        with pytest.raises(StoreConnectionError):
            await service.register_account_with_order(_account(), _order())

        assert store.accounts == {}
        assert store.orders == {}
        assert sessions[0].rolled_back

    async def test_each_call_gets_its_own_scope(self) -> None:
        store = InMemoryStore()
        service, sessions = _service(store)
        await service.register_account_with_order(_account("a@x.io"), _order())
        await service.register_account_with_order(_account("b@x.io"), _order())
        assert len(sessions) == 2
        assert sessions[0] is not sessions[1]


class TestRegisterRequest:
    async def test_hashes_password_and_applies_default_role(self) -> None:
        store = InMemoryStore()
        service, _ = _service(store)
        req = RegisterWithOrderRequest.model_validate(
            {"name": "Ann", "email": "ann@x.io", "password": "pw", "order": {"amount": 42.5}}
        )

        resp = await service.register(req)

        stored = store.accounts[resp.account.id]
        assert stored.role == "member"
        assert stored.password_hash != "pw"
        assert verify_password("pw", stored.password_hash)
        assert resp.order.account_id == resp.account.id
        assert resp.order.amount == Decimal("42.50")
        assert "password" not in resp.model_dump()["account"]
