"""Account lookup cache: cache-aside over the account repository.

Read path for get_by_id:
  - Cache key: f"account:{account_id}"
  - Read: cache first; a hit with a decodable snapshot returns without
    touching the store.
  - Miss (absent key, cache unreachable, undecodable entry): read the store.
    A missing row raises AccountNotFoundError and is NOT cached.
  - Store hit: best-effort SET with a fixed TTL (default 10 minutes). A failed
    SET is logged and swallowed.

Writes invalidate the key after commit (best effort). Redis expiry remains the
upper bound on staleness when an invalidation races a concurrent populate.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

import pydantic
from pydantic import BaseModel

from src.ct_account.domain.models import Account
from src.ct_account.domain.repository import AccountRepositoryProtocol
from src.ct_common.errors import AccountNotFoundError

logger = logging.getLogger("ct.cache")

ACCOUNT_CACHE_TTL_SECONDS = 600


class CacheUnavailableError(Exception):
    """Raised by cache adapters when the backend cannot serve the call."""


class AccountCacheProtocol(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> None: ...

    async def delete(self, key: str) -> None: ...


def account_cache_key(account_id: int) -> str:
    return f"account:{account_id}"


class AccountSnapshot(BaseModel):
    """Serialized form of an Account as stored in the cache."""

    id: int
    name: str
    email: str
    password_hash: str
    role: str
    created_at: datetime | None = None

    @classmethod
    def from_domain(cls, account: Account) -> "AccountSnapshot":
        if account.id is None:
            raise ValueError("Cannot snapshot an account without an id")
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            password_hash=account.password_hash,
            role=account.role,
            created_at=account.created_at,
        )

    def to_domain(self) -> Account:
        return Account(
            id=self.id,
            name=self.name,
            email=self.email,
            password_hash=self.password_hash,
            role=self.role,
            created_at=self.created_at,
        )


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    store_reads: int = 0
    populate_failures: int = 0


class CachedAccountReader:
    """Process-wide, stateless apart from its counters; safe to share across requests."""

    def __init__(
        self,
        cache: AccountCacheProtocol,
        ttl_seconds: int = ACCOUNT_CACHE_TTL_SECONDS,
    ) -> None:
        self._cache = cache
        self._ttl = ttl_seconds
        self.stats = CacheStats()

    async def get_by_id(
        self, repo: AccountRepositoryProtocol, account_id: int
    ) -> Account:
        key = account_cache_key(account_id)

        cached = await self._read(key)
        if cached is not None:
            self.stats.hits += 1
            logger.debug("cache hit %s", key)
            return cached

        self.stats.misses += 1
        self.stats.store_reads += 1
        logger.debug("cache miss %s", key)
        account = await repo.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        await self._populate(key, account)
        return account

    async def invalidate(self, account_id: int) -> None:
        key = account_cache_key(account_id)
        try:
            await self._cache.delete(key)
        except CacheUnavailableError as exc:
            logger.warning("cache invalidate failed for %s: %s", key, exc)

    async def _read(self, key: str) -> Account | None:
        try:
            raw = await self._cache.get(key)
        except CacheUnavailableError as exc:
            logger.warning("cache read failed for %s: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return AccountSnapshot.model_validate_json(raw).to_domain()
        except pydantic.ValidationError:
            logger.warning("discarding undecodable cache entry %s", key)
            return None

    async def _populate(self, key: str, account: Account) -> None:
        try:
            payload = AccountSnapshot.from_domain(account).model_dump_json()
            await self._cache.set(key, payload, self._ttl)
        except (CacheUnavailableError, ValueError) as exc:
            self.stats.populate_failures += 1
            logger.warning("cache populate failed for %s: %s", key, exc)
