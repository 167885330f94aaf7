"""Error Handlers — global exception handlers translating failures into the envelope.

Invariants:
    - InkwellError → its own http_status + {success: false, error, message}
    - RequestValidationError → 400 "Validation error" with field-level message
    - Unknown route (Starlette 404/405) → envelope, not Starlette's default body
    - SQLAlchemyError / TimeoutError → translate_storage_error (409, 503 or 500)
    - Exception (catch-all) → 500 with the exception message; stack logged, never returned

Design Decisions:
    - Layered handlers: domain, validation, routing, storage, catch-all
    - 4xx logged at warning, 5xx at error
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell.core.errors import InkwellError
from inkwell.infrastructure.database import translate_storage_error

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_inkwell_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_storage_error_handler(app)
    _register_generic_error_handler(app)


def error_response(exc: InkwellError, request: Request) -> JSONResponse:
    level = logging.WARNING if exc.http_status < 500 else logging.ERROR
    logger.log(
        level,
        f"{type(exc).__name__}: {exc.message}",
        extra={"error_code": exc.code, "path": request.url.path},
    )
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(),
    )


def _register_inkwell_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(InkwellError)
    async def inkwell_error_handler(request: Request, exc: InkwellError):
        return error_response(exc, request)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register handler for routing-level HTTP errors (unknown path, bad method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            content = {
                "success": False,
                "error": "Not found",
                "message": f"Route {request.url.path} does not exist",
            }
        else:
            content = {"success": False, "error": str(exc.detail)}
        return JSONResponse(
            status_code=exc.status_code, content=content,
            headers=getattr(exc, "headers", None),
        )


def _register_storage_error_handler(app: FastAPI) -> None:
    """Register handler for storage errors that escaped the session manager."""

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        return error_response(translate_storage_error(exc), request)

    @app.exception_handler(TimeoutError)
    async def timeout_error_handler(request: Request, exc: TimeoutError):
        return error_response(translate_storage_error(exc), request)


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: 500 carrying the exception message; stack goes to the log only."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Internal server error",
                "message": str(exc) or type(exc).__name__,
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build the envelope for request validation errors."""
    details = "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    )
    return {
        "success": False,
        "error": "Validation error",
        "message": details or "Invalid request data",
    }
