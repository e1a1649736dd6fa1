"""Exception handlers that render every failure as the REST error envelope."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from launchpad.application.error_formatter import format_error, rest_error_body
from launchpad.application.validation import field_errors
from launchpad.config import Settings
from launchpad.domain.errors import AppError, FieldError, ValidationFailedError

# Location prefixes FastAPI puts in front of the field name
_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def request_validation_to_app_error(exc: RequestValidationError) -> ValidationFailedError:
    """Convert FastAPI's parameter errors into field errors with dotted paths."""
    errors = []
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if loc and loc[0] in _LOCATIONS:
            loc = loc[1:]
        errors.append({**error, "loc": loc})
    return ValidationFailedError(field_errors(errors) or [FieldError("input", "Invalid request")])


def install_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Register handlers for AppError, RequestValidationError and Exception on ``app``."""

    def respond(request: Request, error: BaseException) -> JSONResponse:
        formatted = format_error(
            error,
            settings.is_production,
            request_id=getattr(request.state, "request_id", None),
            path=request.url.path,
        )
        return JSONResponse(status_code=formatted.status_code, content=rest_error_body(formatted))

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return respond(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return respond(request, request_validation_to_app_error(exc))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        return respond(request, exc)
