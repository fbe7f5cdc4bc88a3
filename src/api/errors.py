"""Maps the portfolio error taxonomy onto HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.components.bootstrap import OWNER_EXISTS_MESSAGE
from src.domain.errors import (
    AggregationError,
    AuthorizationError,
    NotFoundError,
    StoreError,
    UploadError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ValidationError)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": exc.message,
            "missingFields": list(exc.missing_fields),
            "invalidFields": list(exc.invalid_fields),
        },
    )


async def authorization_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, AuthorizationError)
    code = (
        status.HTTP_403_FORBIDDEN
        if exc.message == OWNER_EXISTS_MESSAGE
        else status.HTTP_401_UNAUTHORIZED
    )
    return JSONResponse(status_code=code, content={"error": exc.message})


async def store_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, StoreError)
    if isinstance(exc, NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": exc.message})
    if exc.permission_denied:
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"error": exc.message})
    logger.error("Store failure on %s: %s", exc.table, exc.message)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": exc.message, "retryable": True},
    )


async def aggregation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, AggregationError)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": str(exc), "collection": exc.collection, "retryable": True},
    )


async def upload_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, UploadError)
    code = (
        status.HTTP_502_BAD_GATEWAY
        if exc.code == "storage_failed"
        else status.HTTP_400_BAD_REQUEST
    )
    return JSONResponse(status_code=code, content={"error": exc.message, "code": exc.code})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(AuthorizationError, authorization_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(AggregationError, aggregation_error_handler)
    app.add_exception_handler(UploadError, upload_error_handler)
