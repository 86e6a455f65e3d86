"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth
  2xxx: Account
  4xxx: Order
  9xxx: System / generic taxonomy

Every failure is scoped to one request. The app-level exception handler maps
an AppError to the error envelope {error, code, details} with its http_status.
"""

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        details: Any = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.details = details
        super().__init__(message)


# --- 9xxx: generic taxonomy ---

class ValidationError(AppError):
    """Malformed or missing input. Caller's fault, do not retry."""

    def __init__(self, message: str = "Invalid input", details: Any = None) -> None:
        super().__init__(9001, message, 400, details)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class StoreConnectionError(AppError):
    """Store or cache unreachable. Safe to retry at the caller's discretion."""

    def __init__(self, detail: str = "Store unavailable") -> None:
        super().__init__(9003, detail, 503)


class NotFoundError(AppError):
    def __init__(self, message: str = "Not found", code: int = 9004) -> None:
        super().__init__(code, message, 404)


class InvalidStateError(AppError):
    """A unit-of-work scope was used after it was finalized."""

    def __init__(self, message: str) -> None:
        super().__init__(9005, message, 500)


class DuplicateKeyError(AppError):
    """Unique-constraint violation on create/update."""

    def __init__(self, message: str = "Duplicate key", code: int = 9009) -> None:
        super().__init__(code, message, 409)


class ConflictError(AppError):
    """Constraint violation detected by the store, typically at commit."""

    def __init__(self, message: str = "Conflict with current state") -> None:
        super().__init__(9010, message, 409)


# --- 1xxx: Auth ---

class UnauthenticatedError(AppError):
    def __init__(self, message: str = "Invalid or missing token", code: int = 1001) -> None:
        super().__init__(code, message, 401)


class InvalidCredentialsError(UnauthenticatedError):
    def __init__(self) -> None:
        super().__init__("Invalid email or password", 1002)


class ForbiddenError(AppError):
    def __init__(self, required_role: str) -> None:
        super().__init__(1003, f"Role '{required_role}' required", 403)


# --- 2xxx: Account ---

class AccountNotFoundError(NotFoundError):
    def __init__(self, account_id: int | str) -> None:
        super().__init__(f"Account not found: {account_id}", 2001)


class EmailExistsError(DuplicateKeyError):
    def __init__(self) -> None:
        super().__init__("Email already exists", 2002)


# --- 4xxx: Order ---

class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: int | str) -> None:
        super().__init__(f"Order not found: {order_id}", 4001)
