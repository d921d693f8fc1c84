"""
HTTP errors carrying a machine-readable code.

Raised from services and dependencies; FastAPI renders them as
``{"detail": {"message": ..., "code": ..., "details": ...}}``.
"""

from typing import Optional, Any, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """HTTPException whose detail is a ``{message, code, details}`` dict."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: Optional[str] = None,
        details: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        payload: Dict[str, Any] = {"message": message}
        if code:
            payload["code"] = code
        if details is not None:
            payload["details"] = details
        super().__init__(status_code=status_code, detail=payload, headers=headers)

    @property
    def message(self) -> str:
        return self.detail["message"]

    @property
    def code(self) -> Optional[str]:
        return self.detail.get("code")


class NotFoundException(APIException):
    """404: the addressed record does not exist."""

    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND", details: Optional[Any] = None):
        super().__init__(404, message, code, details)


class ValidationException(APIException):
    """422: input passed schema validation but breaks a domain rule."""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(422, message, code, details)
