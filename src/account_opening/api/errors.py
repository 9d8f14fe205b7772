"""
account_opening.api.errors

Maps the domain error taxonomy onto HTTP responses.

Responsibilities:
- Choose a status code per error family.
- Render every failure as the standard `{"success": false, "message": ...}` envelope.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from account_opening.errors import (
    AuthError,
    ConflictError,
    DomainError,
    Forbidden,
    NotFoundError,
    RoleNotGranted,
    StorageError,
    ValidationError,
)
from account_opening.observability.logging import get_logger

log = get_logger(__name__)

# Most specific first.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (Forbidden, HTTP_403_FORBIDDEN),
    (RoleNotGranted, HTTP_403_FORBIDDEN),
    (AuthError, HTTP_401_UNAUTHORIZED),
    (ValidationError, HTTP_400_BAD_REQUEST),
    (NotFoundError, HTTP_404_NOT_FOUND),
    (ConflictError, HTTP_409_CONFLICT),
    (StorageError, HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return HTTP_500_INTERNAL_SERVER_ERROR


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status = status_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status == HTTP_401_UNAUTHORIZED else None
    if status >= HTTP_500_INTERNAL_SERVER_ERROR:
        log.error("request.failed", error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status,
        content={"success": False, "message": exc.message},
        headers=headers,
    )


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Malformed bodies, paths and queries are client input errors like any ValidationError.
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "path", "query"))
    reason = first.get("msg", "Invalid input")
    message = f"Invalid input: {field}: {reason}" if field else f"Invalid input: {reason}"
    return JSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Routing failures (unknown path, wrong method) keep their status but use the envelope.
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)


# --- Module Notes -----------------------------------------------------------
# Routers raise domain errors (or let services raise them); none of them builds error
# responses by hand.
