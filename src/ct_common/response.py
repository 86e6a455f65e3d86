"""Unified API response wrappers.

Successful endpoints return:
{
    "code": 0,
    "message": "success",
    "data": { ... },
    "timestamp": "...",
    "request_id": "..."
}

Failures return the error envelope:
{
    "error": "Account not found: 7",
    "code": 2001,
    "details": null
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


class ErrorResponse(BaseModel):
    error: str
    code: int
    details: Any = None


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(code=0, message=message, data=data)


def error_response(code: int, message: str, details: Any = None) -> ErrorResponse:
    return ErrorResponse(error=message, code=code, details=details)
