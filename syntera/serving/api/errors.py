"""
API Error Handling

Maps the error taxonomy onto HTTP responses. Every error body has the shape
``{"error": ...}`` where the value is a message string, or the list of field
errors for a validation failure.
"""

from typing import Optional, TypeVar

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from syntera.database.results import Err, StoreResult

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ApiError(Exception):
    """An error with a fixed status code and a client-facing message"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def unwrap(result: StoreResult[T], failure_message: str, conflict_message: Optional[str] = None) -> T:
    """
    Return the value of a store result or raise the matching ApiError.

    Args:
        result: Store operation result
        failure_message: Opaque message for a store fault (500)
        conflict_message: Message for a constraint violation (400); when not
            given a conflict is reported as a fault
    """
    if isinstance(result, Err):
        if result.is_conflict and conflict_message:
            raise ApiError(400, conflict_message)
        raise ApiError(500, failure_message)
    return result.value


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, status_code=exc.status_code, error=exc.message)
    else:
        logger.info("Request rejected", path=request.url.path, status_code=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    logger.info("Request validation failed", path=request.url.path, errors=len(errors))
    return JSONResponse(status_code=400, content={"error": jsonable_encoder(errors)})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
