"""Domain error hierarchy for clean exception handling.

Every error a caller can see belongs to this closed family. Each class carries
a stable machine-readable ``code`` and an HTTP status, plus the metadata that
is safe to show (``extensions``). The error formatter dispatches on the class,
never on the message text.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence


class ErrorCode(str, Enum):
    """Stable error codes callers can branch on."""

    NOT_FOUND = "NOT_FOUND"
    BAD_USER_INPUT = "BAD_USER_INPUT"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


@dataclass(frozen=True)
class FieldError:
    """One field-level validation failure."""
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


class AppError(Exception):
    """Base for all application errors."""

    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def expected(self) -> bool:
        """Expected errors are normal request outcomes, not bugs."""
        return True

    def extensions(self) -> Dict[str, Any]:
        """Metadata that is safe to return to the caller."""
        return {}

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} code={self.code.value} message={self.message!r}>"


class NotFoundError(AppError):
    """Resource not found."""

    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None) -> None:
        self.resource = resource
        self.resource_id = None if resource_id is None else str(resource_id)
        if self.resource_id is not None:
            message = f"{resource} with id '{self.resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message)

    def extensions(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"resource": self.resource}
        if self.resource_id is not None:
            data["resourceId"] = self.resource_id
        return data


class ValidationFailedError(AppError):
    """Invalid input; carries every field-level problem at once."""

    code = ErrorCode.BAD_USER_INPUT
    status_code = 400

    def __init__(self, errors: Sequence[FieldError]) -> None:
        if not errors:
            raise ValueError("ValidationFailedError requires at least one FieldError")
        self.errors = tuple(errors)
        super().__init__("Validation failed")

    def extensions(self) -> Dict[str, Any]:
        return {"fieldErrors": [error.to_dict() for error in self.errors]}


class UnauthenticatedError(AppError):
    """No valid credentials were presented."""

    code = ErrorCode.UNAUTHENTICATED
    status_code = 401

    def __init__(self, message: str = "You must be logged in to perform this action") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    """Authenticated, but not allowed to do this."""

    code = ErrorCode.FORBIDDEN
    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this action") -> None:
        super().__init__(message)


class ConflictError(AppError):
    """Resource conflict (e.g., duplicate name)."""

    code = ErrorCode.CONFLICT
    status_code = 409


class InternalError(AppError):
    """Unexpected failure. The cause is logged, never returned."""

    code = ErrorCode.INTERNAL_SERVER_ERROR
    status_code = 500

    def __init__(self, cause: BaseException | str | None = None) -> None:
        if isinstance(cause, str):
            cause = RuntimeError(cause)
        self.cause = cause
        super().__init__("Internal server error")
        if cause is not None:
            self.__cause__ = cause

    @property
    def expected(self) -> bool:
        return False
