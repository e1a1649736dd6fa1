"""Error formatting at the response boundary.

``format_error`` is the only place that decides how much of a failure a
caller may see. Expected errors (every ``AppError`` except ``InternalError``)
keep their message, code and metadata in every environment. Anything else is
masked in production and fully described in development. Every error is
logged here, so call sites never log-and-rethrow.
"""
from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from launchpad.domain.errors import AppError, ErrorCode, InternalError
from launchpad.log import get_request_id

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred."

# REST clients branch on VALIDATION_ERROR, GraphQL clients on BAD_USER_INPUT
REST_CODE_OVERRIDES: Dict[str, str] = {
    ErrorCode.BAD_USER_INPUT.value: "VALIDATION_ERROR",
}


@dataclass(frozen=True)
class FormattedError:
    """What a transport may return for one error."""
    message: str
    code: str
    status_code: int = 500
    extensions: Dict[str, Any] = field(default_factory=dict)
    expected: bool = False
    request_id: Optional[str] = None


def format_error(
    error: BaseException,
    is_production: bool,
    *,
    request_id: Optional[str] = None,
    path: Any = None,
) -> FormattedError:
    """Decide what to reveal about ``error`` and log it.

    Args:
        error: Any exception that reached the boundary
        is_production: Mask unexpected errors when true
        request_id: Request/trace id; defaults to the one in the logging context
        path: Request path or GraphQL field path, for the log record

    Returns:
        FormattedError; ``code`` is the same in every environment
    """
    request_id = request_id or get_request_id()

    if isinstance(error, AppError) and error.expected:
        code = error.code.value
        logger.info(
            f"Expected error: {error.message}",
            extra={"type": "expected", "code": code, "path": path, "request_id": request_id},
        )
        return FormattedError(
            message=error.message,
            code=code,
            status_code=error.status_code,
            extensions={"code": code, **error.extensions()},
            expected=True,
            request_id=request_id,
        )

    code = ErrorCode.INTERNAL_SERVER_ERROR.value
    original = _original(error)
    logger.error(
        f"Unexpected error: {type(original).__name__}: {original}",
        exc_info=(type(error), error, error.__traceback__),
        extra={"type": "unexpected", "code": code, "path": path, "request_id": request_id},
    )

    if is_production:
        return FormattedError(
            message=GENERIC_MESSAGE,
            code=code,
            extensions={"code": code},
            request_id=request_id,
        )

    return FormattedError(
        message=str(original) or type(original).__name__,
        code=code,
        extensions={
            "code": code,
            "exception": type(original).__name__,
            "stacktrace": _stacktrace(error),
        },
        request_id=request_id,
    )


def _original(error: BaseException) -> BaseException:
    if isinstance(error, InternalError) and error.cause is not None:
        return error.cause
    return error


def _stacktrace(error: BaseException) -> List[str]:
    lines = traceback.format_exception(type(error), error, error.__traceback__)
    return "".join(lines).splitlines()


def rest_error_body(formatted: FormattedError) -> Dict[str, Any]:
    """Render ``{"error": {code, message, details?, requestId?}}``."""
    body: Dict[str, Any] = {
        "code": REST_CODE_OVERRIDES.get(formatted.code, formatted.code),
        "message": formatted.message,
    }

    metadata = {key: value for key, value in formatted.extensions.items() if key != "code"}
    if "fieldErrors" in metadata:
        body["details"] = metadata["fieldErrors"]
    elif metadata:
        body["details"] = metadata

    if formatted.request_id:
        body["requestId"] = formatted.request_id
    return {"error": body}


def graphql_error_entry(formatted: FormattedError, path: Optional[List[Any]] = None) -> Dict[str, Any]:
    """Render one entry of a GraphQL ``errors`` list."""
    return {
        "message": formatted.message,
        "path": path,
        "extensions": dict(formatted.extensions),
    }


def graphql_response(data: Optional[Dict[str, Any]], errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Combine (possibly partial) data with error entries."""
    response: Dict[str, Any] = {"data": data}
    if errors:
        response["errors"] = errors
    return response
