"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses. Every error body has the same shape:
``{success: false, error, message, details}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import get_settings
from app.domain.exceptions import CaseFileException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status
_ERROR_CODE_STATUS: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "INVALID_SECTION": 400,
    "AUTHENTICATION_ERROR": 401,
    "RESOURCE_NOT_FOUND": 404,
    "CASE_NUMBER_CONFLICT": 409,
    "FILE_TOO_LARGE": 413,
    "UNSUPPORTED_MEDIA_TYPE": 415,
    "SERVICE_UNAVAILABLE": 503,
}

_HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "AUTHENTICATION_ERROR",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "REQUEST_TOO_LARGE",
    429: "RATE_LIMITED",
}


def status_for_error_code(error_code: str) -> int:
    """HTTP status for a domain error code. STORAGE_* codes are server errors."""
    if error_code in _ERROR_CODE_STATUS:
        return _ERROR_CODE_STATUS[error_code]
    if error_code.startswith("STORAGE_"):
        return 500
    return 400


def error_body(
    error: str, message: str, details: Any = None
) -> dict[str, Any]:
    return {"success": False, "error": error, "message": message, "details": details}


def _case_file_exception_handler(
    request: Request, exc: CaseFileException
) -> JSONResponse:
    """Return JSON from CaseFileException.to_dict() with appropriate status code."""
    status = status_for_error_code(exc.error_code)
    content = exc.to_dict()
    if status >= 500:
        logger.error(
            "%s on %s %s: %s %s",
            exc.error_code,
            request.method,
            request.url.path,
            exc.message,
            exc.details,
        )
        if not get_settings().debug:
            # Storage details carry internal paths.
            content["details"] = None
    headers = {"WWW-Authenticate": "Bearer"} if status == 401 else None
    return JSONResponse(status_code=status, content=content, headers=headers)


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 with the pydantic error list."""
    return JSONResponse(
        status_code=400,
        content=error_body(
            "VALIDATION_ERROR",
            "Request validation failed",
            jsonable_encoder(exc.errors()),
        ),
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return the envelope for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(
            _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"), str(exc.detail)
        ),
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content=error_body("INTERNAL_ERROR", detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: CaseFileException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(CaseFileException, _case_file_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
