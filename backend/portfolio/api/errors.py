"""
Exception handlers mapping service errors to JSON responses.

Every handled error has the body {"error": <message>}. Authentication
errors log their internal reason but only expose the terse message.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio.core.errors import AppError, AuthError
from portfolio.core.logging_config import get_logger


logger = get_logger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    extra = {
        "path": request.url.path,
        "status_code": exc.status_code,
        "request_id": getattr(request.state, "request_id", None),
        "error_type": type(exc).__name__,
        "reason": exc.reason,
    }
    if isinstance(exc, AuthError):
        logger.info("Authentication failed", extra=extra)
    else:
        logger.info("Request failed", extra=extra)

    headers = {"WWW-Authenticate": "Cookie"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "details": jsonable_encoder(details)},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error: {exc}",
        extra={
            "path": request.url.path,
            "request_id": getattr(request.state, "request_id", None),
            "exception_type": type(exc).__name__,
        },
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
