"""Authorization gate: token -> claims -> role check.

Runs before any handler logic and never touches the store. A request without
a valid token is UnauthenticatedError; a valid token whose role does not
satisfy the endpoint's required role is ForbiddenError.
"""

import logging
from dataclasses import dataclass

from src.ct_common.enums import Role
from src.ct_common.errors import ForbiddenError, UnauthenticatedError
from src.ct_gateway.auth.jwt_handler import Claims, JwtConfig, decode_token

logger = logging.getLogger("ct.auth")


@dataclass(frozen=True)
class AuthResult:
    allowed: bool
    claims: Claims


class AuthorizationGate:
    def __init__(self, config: JwtConfig) -> None:
        self._config = config

    def authenticate(self, token: str | None) -> Claims:
        if not token:
            raise UnauthenticatedError("Missing token")
        return decode_token(token, self._config)

    def authorize(self, claims: Claims, required_role: Role) -> AuthResult:
        try:
            role = Role(claims.role)
        except ValueError:
            # Unknown role tags satisfy nothing
            return AuthResult(allowed=False, claims=claims)
        return AuthResult(allowed=role.satisfies(required_role), claims=claims)

    def check(self, token: str | None, required_role: Role) -> Claims:
        """authenticate + authorize, raising on either failure."""
        claims = self.authenticate(token)
        result = self.authorize(claims, required_role)
        if not result.allowed:
            logger.info(
                "forbidden: subject=%s role=%s required=%s",
                claims.subject,
                claims.role,
                required_role.value,
            )
            raise ForbiddenError(required_role.value)
        return result.claims
