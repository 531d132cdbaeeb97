"""Error Handlers — global exception handlers producing {success: false, message, details?}.

Invariants:
    - AppError → its status code and message
    - RequestValidationError → 400 "Validation failed"; field details outside production only
    - IntegrityError → 409 for unique violations, 400 for other constraint failures
    - Starlette HTTPException (unknown route, wrong method) → same envelope
    - Exception (catch-all) → 500, never leaks internals in production

Design Decisions:
    - Handlers registered in one place; main.py only calls register_error_handlers
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api.config import get_settings
from blog_api.core.errors import AppError, error_response

logger = logging.getLogger(__name__)

_UNIQUE_MARKERS = ("unique", "duplicate key")


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_app_error_handler(app)
    _register_validation_error_handler(app)
    _register_integrity_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _include_details() -> bool:
    return not get_settings().is_production


def _register_app_error_handler(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_response(include_details=_include_details()),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        details = build_validation_details(exc) if _include_details() else None
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_response("Validation failed", details),
        )


def _register_integrity_error_handler(app: FastAPI) -> None:

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        reason = str(exc.orig).lower()
        logger.warning(
            f"Integrity error on {request.url.path}: {reason}",
        )
        if any(marker in reason for marker in _UNIQUE_MARKERS):
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content=error_response("Resource already exists"),
            )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_response("Invalid reference to a related resource"),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(message),
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details in production."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        details = str(exc) if _include_details() else None
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response("Internal server error", details),
        )


def build_validation_details(exc: RequestValidationError) -> list[dict]:
    """Per-field validation details: dotted field path (minus the location prefix) and message."""
    details = []
    for e in exc.errors():
        loc = [str(part) for part in e["loc"]]
        if loc and loc[0] in ("body", "query", "path", "cookie", "header"):
            loc = loc[1:]
        details.append({
            "field": ".".join(loc) or "body",
            "message": e["msg"],
        })
    return details
