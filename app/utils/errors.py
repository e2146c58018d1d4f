"""Custom exception hierarchy for the Users API."""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error in the API standard shape."""
        return {"error": self.message, "code": self.code}


class MalformedRequestError(AppError):
    """Raised when the body is missing or the route identifier is invalid."""

    def __init__(self, reason: str = "Malformed request") -> None:
        super().__init__(message=reason, code="MALFORMED_REQUEST", status_code=400)


class NotFoundError(AppError):
    """Raised when a requested resource does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(message=f"{resource} not found", code="NOT_FOUND", status_code=404)


class ConflictError(AppError):
    """Raised on duplicate/conflicting operations."""

    def __init__(self, reason: str, code: str = "CONFLICT") -> None:
        super().__init__(message=reason, code=code, status_code=409)


class UnsupportedMediaTypeError(AppError):
    """Raised when a request body arrives in a format we cannot read."""

    def __init__(self, media_type: str) -> None:
        super().__init__(
            message=f"Unsupported media type: {media_type}",
            code="UNSUPPORTED_MEDIA_TYPE",
            status_code=415,
        )


class ValidationFailedError(AppError):
    """Raised when request fields fail validation.

    Carries a field-level error map, keyed by the field's wire name.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__(
            message="One or more fields are invalid",
            code="VALIDATION_FAILED",
            status_code=422,
        )

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = self.errors
        return payload


class StorageError(AppError):
    """Raised when the backing store rejects a request."""

    def __init__(self, reason: str = "Storage request failed") -> None:
        super().__init__(message=reason, code="STORAGE_ERROR", status_code=502)
