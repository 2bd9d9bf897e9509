"""Error taxonomy and the HTTP envelope it is rendered with.

Handlers raise the domain errors below; the exception handlers registered in
``app.main`` turn them (and request validation / store constraint failures)
into ``{"code", "message", "details"?}`` responses.
"""

from functools import wraps
from typing import Any

import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

log = structlog.get_logger(__name__)


class DashboardError(Exception):
    """Base class for domain errors raised by the access functions."""


class NotFoundError(DashboardError):
    """The row targeted by an update or aggregation lookup does not exist."""

    def __init__(self, entity: str, identifier: int):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ReferentialIntegrityError(DashboardError):
    """A dependent row references an owning user that does not exist."""

    def __init__(self, entity: str, identifier: int):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ErrorCodes:
    NOT_FOUND = "NOT_FOUND"
    REFERENCE_NOT_FOUND = "REFERENCE_NOT_FOUND"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    VALIDATION_ERROR = "VALIDATION_ERROR"


def log_failures(event: str):
    """Log any exception raised by the wrapped coroutine under ``event``, then re-raise it."""

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as exc:
                log.error(event, error=str(exc), error_type=type(exc).__name__)
                raise

        return wrapper

    return decorator


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
) -> JSONResponse:
    content: dict[str, Any] = {"code": code, "message": message}
    if details:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return create_error_response(
        status.HTTP_404_NOT_FOUND,
        ErrorCodes.NOT_FOUND,
        str(exc),
        {"entity": exc.entity, "id": exc.identifier},
    )


async def handle_reference_not_found(request: Request, exc: ReferentialIntegrityError) -> JSONResponse:
    return create_error_response(
        status.HTTP_409_CONFLICT,
        ErrorCodes.REFERENCE_NOT_FOUND,
        str(exc),
        {"entity": exc.entity, "id": exc.identifier},
    )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    log.error("constraint_violation", path=request.url.path, error=str(exc.orig))
    return create_error_response(
        status.HTTP_409_CONFLICT,
        ErrorCodes.CONSTRAINT_VIOLATION,
        "The store rejected the write because of a constraint violation",
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
    return create_error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorCodes.VALIDATION_ERROR,
        "Request input failed validation",
        exc.errors(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(ReferentialIntegrityError, handle_reference_not_found)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
