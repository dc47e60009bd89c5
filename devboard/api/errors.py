"""
API error handling and exception mapping.

Validation problems become HTTP 400 before any streaming starts; everything
else is rendered as ``{"error": ...}`` with the matching status.
"""

from typing import Any, Iterable

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from devboard.api.schemas import ErrorResponse
from devboard.infra.config.logging_config import get_logger

logger = get_logger("api.errors")

_REQUIRED_TYPES = {"missing", "string_too_short"}


def _is_required_error(error: dict) -> bool:
    if error.get("type") in _REQUIRED_TYPES:
        return True
    # an explicit null for a required string
    return error.get("type") == "string_type" and error.get("input") is None


def _field_path(error: dict) -> list[str]:
    return [str(part) for part in error.get("loc", ()) if part != "body"]


def summarize_validation_errors(errors: Iterable[dict]) -> str:
    """One-line message for the first actionable validation error."""
    errors = list(errors)
    for error in errors:
        path = _field_path(error)
        if _is_required_error(error) and len(path) == 1:
            name = path[0]
            return f"{name[:1].upper()}{name[1:]} is required"
    if any(error.get("type") == "json_invalid" for error in errors):
        return "Invalid JSON body"
    return "Invalid request"


def format_validation_details(errors: Iterable[dict]) -> str:
    formatted = []
    for error in errors:
        location = " -> ".join(_field_path(error)) or "body"
        formatted.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(formatted)


def _error_response(status_code: int, error: str, details: Any = None, headers=None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    logger.info("request.invalid", errors=len(errors))
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        summarize_validation_errors(errors),
        format_validation_details(errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.info("http.error", status_code=exc.status_code, detail=str(exc.detail))
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled.error", error_type=type(exc).__name__)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def setup_error_handlers(app) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
