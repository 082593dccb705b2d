"""
Typed failures raised by the auth resolver and the songwriting service.

Each failure is an HTTPException whose detail has a predictable JSON shape:
    {"error": "<KIND>", "message": "<human readable>"}
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class ActionError(HTTPException):
    """Base class; subclasses pin the error kind and HTTP status."""

    code = "INTERNAL_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        detail: Dict[str, Any] = {"error": self.code, "message": message}
        if extra:
            detail.update(extra)
        super().__init__(status_code=self.http_status, detail=detail)
        self.message = message


class Unauthorized(ActionError):
    code = "UNAUTHORIZED"
    http_status = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "You must be signed in to perform this action.") -> None:
        super().__init__(message)
        self.headers = {"WWW-Authenticate": "Bearer"}


class NotFound(ActionError):
    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class ValidationFailed(ActionError):
    code = "VALIDATION_ERROR"
    http_status = 422
