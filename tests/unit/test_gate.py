"""Unit tests for AuthorizationGate."""

from datetime import timedelta

import pytest

from src.ct_account.domain.models import Account
from src.ct_common.enums import Role
from src.ct_common.errors import ForbiddenError, UnauthenticatedError
from src.ct_gateway.auth.gate import AuthorizationGate
from src.ct_gateway.auth.jwt_handler import JwtConfig, TokenIssuer

CONFIG = JwtConfig(secret="gate-test-secret")


def _token(role: str, lifetime: timedelta | None = None) -> str:
    account = Account(id=1, name="Ann", email="ann@x.io", password_hash="h", role=role)
    return TokenIssuer(CONFIG).issue(account, lifetime=lifetime)


@pytest.fixture
def gate() -> AuthorizationGate:
    return AuthorizationGate(CONFIG)


class TestAuthenticate:
    def test_missing_token(self, gate: AuthorizationGate) -> None:
        with pytest.raises(UnauthenticatedError):
            gate.authenticate(None)
        with pytest.raises(UnauthenticatedError):
            gate.authenticate("")

    def test_expired_token(self, gate: AuthorizationGate) -> None:
        with pytest.raises(UnauthenticatedError):
            gate.authenticate(_token("admin", lifetime=timedelta(seconds=-5)))

    def test_valid_token(self, gate: AuthorizationGate) -> None:
        claims = gate.authenticate(_token("member"))
        assert claims.subject == "1"
        assert claims.role == "member"


class TestAuthorize:
    def test_member_on_admin_endpoint_not_allowed(self, gate: AuthorizationGate) -> None:
        claims = gate.authenticate(_token("member"))
        result = gate.authorize(claims, Role.ADMIN)
        assert result.allowed is False
        assert result.claims == claims

    def test_admin_on_member_endpoint_allowed(self, gate: AuthorizationGate) -> None:
        claims = gate.authenticate(_token("admin"))
        assert gate.authorize(claims, Role.MEMBER).allowed is True

    def test_unknown_role_satisfies_nothing(self, gate: AuthorizationGate) -> None:
        claims = gate.authenticate(_token("superuser"))
        assert gate.authorize(claims, Role.MEMBER).allowed is False


class TestCheck:
    def test_forbidden(self, gate: AuthorizationGate) -> None:
        with pytest.raises(ForbiddenError):
            gate.check(_token("member"), Role.ADMIN)

    def test_unauthenticated_before_forbidden(self, gate: AuthorizationGate) -> None:
        with pytest.raises(UnauthenticatedError):
            gate.check(None, Role.ADMIN)

    def test_allowed_returns_claims(self, gate: AuthorizationGate) -> None:
        claims = gate.check(_token("admin"), Role.ADMIN)
        assert claims.role == "admin"
