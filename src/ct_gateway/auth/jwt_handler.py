"""JWT token issuing and verification.

HS256 with one shared secret. The secret and lifetime arrive through an
explicit JwtConfig built at the composition root; nothing in this module
reads the environment.

No token revocation: once issued, a token is valid until it expires.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from src.ct_account.domain.models import Account
from src.ct_common.errors import UnauthenticatedError


@dataclass(frozen=True)
class JwtConfig:
    secret: str
    algorithm: str = "HS256"
    expire_hours: int = 72

    @property
    def lifetime(self) -> timedelta:
        return timedelta(hours=self.expire_hours)


@dataclass(frozen=True)
class Claims:
    subject: str  # account id
    name: str
    email: str
    role: str
    expires_at: datetime

    @property
    def account_id(self) -> int:
        return int(self.subject)


class TokenIssuer:
    def __init__(self, config: JwtConfig) -> None:
        self._config = config

    @property
    def lifetime_seconds(self) -> int:
        return int(self._config.lifetime.total_seconds())

    def issue(self, account: Account, lifetime: timedelta | None = None) -> str:
        """Sign a bearer token for an account (default lifetime: 72 hours)."""
        now = datetime.now(UTC)
        payload = {
            "sub": str(account.id),
            "name": account.name,
            "email": account.email,
            "role": account.role,
            "iat": now,
            "exp": now + (lifetime if lifetime is not None else self._config.lifetime),
        }
        return str(jwt.encode(payload, self._config.secret, algorithm=self._config.algorithm))


def decode_token(token: str, config: JwtConfig) -> Claims:
    """Validate signature and expiry, then extract claims.

    Raises:
        UnauthenticatedError: malformed, tampered or expired token, or a token
            without a subject or role.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            config.secret,
            algorithms=[config.algorithm],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise UnauthenticatedError("Invalid or expired token") from None

    subject = payload.get("sub")
    role = payload.get("role")
    expires = payload.get("exp")
    if not subject or not role or expires is None:
        raise UnauthenticatedError("Token is missing required claims")

    return Claims(
        subject=str(subject),
        name=str(payload.get("name", "")),
        email=str(payload.get("email", "")),
        role=str(role),
        expires_at=datetime.fromtimestamp(int(expires), UTC),
    )
