# ruff: noqa: D107
"""Base exception classes."""

from datetime import datetime
from typing import Any

from fastapi import HTTPException


class BaseAppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(
            status_code=status_code,
            detail={"message": message, "error_code": error_code, "details": details},
        )


class NotFoundError(BaseAppException):
    """Exception raised when a resource is not found."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: dict[str, Any] | None = None,
        error_code: str = "NOT_FOUND",
    ):
        super().__init__(message=message, status_code=404, error_code=error_code, details=details)


class AppPermissionError(BaseAppException):
    """Exception raised when user doesn't have permission to access a resource."""

    def __init__(
        self,
        message: str = "Permission denied",
        details: dict[str, Any] | None = None,
        error_code: str = "PERMISSION_DENIED",
    ):
        super().__init__(
            message=message,
            status_code=403,
            error_code=error_code,
            details=details,
        )


class ValidationError(BaseAppException):
    """Exception raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
        error_code: str = "VALIDATION_ERROR",
    ):
        super().__init__(
            message=message,
            status_code=422,
            error_code=error_code,
            details=details,
        )


class ConflictError(BaseAppException):
    """Exception raised when a write was based on a stale version of a resource.

    The caller can refetch and retry; the server never retries on its own.
    """

    def __init__(
        self,
        current_version: int | None,
        expected_version: int,
        updated_at: datetime | None = None,
        message: str = "This project was changed by someone else. Refresh and try again.",
    ):
        self.current_version = current_version
        self.expected_version = expected_version
        self.updated_at = updated_at
        super().__init__(
            message=message,
            status_code=409,
            error_code="VERSION_CONFLICT",
            details={
                "current_version": current_version,
                "expected_version": expected_version,
                "updated_at": updated_at.isoformat() if updated_at else None,
            },
        )
