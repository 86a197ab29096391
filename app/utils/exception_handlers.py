from typing import cast

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException

from app.core.exceptions import PersistenceError, RateLimitError, ValidationError
from app.schemas.common import ErrorResponse

INTERNAL_ERROR_MESSAGE = "Internal server error"
RATE_LIMIT_MESSAGE = "Too many submissions. Try again in a minute."


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump(), headers=headers
    )


def http_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(HTTPException, exc)
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


def request_validation_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(RequestValidationError, exc)
    logger.debug(f"Rejected request body: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


def validation_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    exc = cast(ValidationError, exc)
    return error_response(status.HTTP_400_BAD_REQUEST, exc.message)


def rate_limit_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    exc = cast(RateLimitError, exc)
    logger.warning(f"Rate limit hit on {request.method} {request.url.path}")
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        RATE_LIMIT_MESSAGE,
        headers={**exc.headers, "Retry-After": str(exc.retry_after)},
    )


def persistence_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"{request.method} {request.url.path} failed")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)
