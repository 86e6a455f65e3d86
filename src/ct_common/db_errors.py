"""Translate SQLAlchemy / driver exceptions into the application taxonomy.

Repositories wrap every statement in `translate_store_errors()` so that no
driver-specific exception (or "no rows" sentinel) leaks past the repository
boundary.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    InterfaceError,
    OperationalError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from src.ct_common.errors import AppError, ConflictError, StoreConnectionError

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def sqlstate_of(exc: DBAPIError) -> str | None:
    """Best-effort SQLSTATE lookup across asyncpg / psycopg adapters."""
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(exc: IntegrityError) -> bool:
    state = sqlstate_of(exc)
    if state is not None:
        return state == UNIQUE_VIOLATION
    # Drivers without SQLSTATE (e.g. sqlite) only expose the message
    return "unique" in str(exc.orig).lower()


def to_store_error(exc: BaseException) -> AppError | None:
    """Map connection-class failures to StoreConnectionError, else None."""
    if isinstance(exc, (OperationalError, InterfaceError, PoolTimeoutError, OSError)):
        return StoreConnectionError(f"Store unavailable: {type(exc).__name__}")
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreConnectionError("Store connection lost")
    return None


@contextmanager
def translate_store_errors(
    on_duplicate: Callable[[], AppError] | None = None,
) -> Iterator[None]:
    """Re-raise store exceptions as AppError subclasses.

    Args:
        on_duplicate: factory for the error raised on a unique violation.
                      Any other integrity violation becomes ConflictError.
    """
    try:
        yield
    except IntegrityError as exc:
        if on_duplicate is not None and is_unique_violation(exc):
            raise on_duplicate() from exc
        raise ConflictError(f"Constraint violation: {sqlstate_of(exc) or 'unknown'}") from exc
    except (DBAPIError, PoolTimeoutError, OSError) as exc:
        mapped = to_store_error(exc)
        if mapped is None:
            raise
        raise mapped from exc
