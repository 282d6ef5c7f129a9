"""Custom exceptions."""
from typing import Optional
from fastapi import HTTPException, status


class TaskboardError(Exception):
    """Base class for failures raised below the service facade."""

    kind = "internal"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StorageFailure(TaskboardError):
    """Local persistence unavailable or write rejected."""

    kind = "storage"


class NetworkFailure(TaskboardError):
    """Remote fetch or push failed or timed out."""

    kind = "network"


class ValidationFailure(TaskboardError):
    """Input rejected before any I/O."""

    kind = "validation"


class NotFoundError(HTTPException):
    """Resource not found exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail or "Resource not found")


class ValidationError(HTTPException):
    """Validation exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail or "Validation error",
        )


class ConflictError(HTTPException):
    """Conflict exception."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail or "Resource conflict")


class ServiceUnavailableError(HTTPException):
    """Storage or remote backend unavailable."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail or "Service unavailable",
        )


def raise_for_result(result) -> None:
    """Translate a failed service ``Result`` into the matching HTTP error."""
    if result.ok:
        return
    if result.kind == ValidationFailure.kind:
        raise ValidationError(result.message)
    if result.kind == "not_found":
        raise NotFoundError(result.message)
    if result.kind == "conflict":
        raise ConflictError(result.message)
    raise ServiceUnavailableError(result.message)
