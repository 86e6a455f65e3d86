"""FastAPI dependency: require_role.

Usage in any protected router:
    from src.ct_gateway.auth.dependencies import require_role

    @router.get("/protected")
    async def protected(claims: Claims = Depends(require_role(Role.ADMIN))):
        ...

The gate only decodes the bearer token; it never reads the store.
"""

from collections.abc import Awaitable, Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.ct_common.enums import Role
from src.ct_gateway.auth.gate import AuthorizationGate
from src.ct_gateway.auth.jwt_handler import Claims
from src.dependencies import get_gate

# auto_error=False so a missing header reaches the gate and gets our 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


def require_role(required_role: Role) -> Callable[..., Awaitable[Claims]]:
    async def dependency(
        request: Request,
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
        gate: AuthorizationGate = Depends(get_gate),
    ) -> Claims:
        token = credentials.credentials if credentials else None
        claims = gate.check(token, required_role)
        request.state.claims = claims
        return claims

    return dependency
