"""
Exception handlers for the Watch Together API.

Every error leaves the API as one JSON body:
    {"success": false, "error": "<ErrorCode>", "message": ..., "status_code": ..., "details": {...}}
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from watchroom.config import settings
from watchroom.exceptions import AppException, ErrorCode
from watchroom.utils.logging_config import fastapi_logger


def error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "success": False,
        "error": code.value,
        "message": message,
        "status_code": status_code,
    }
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "client": request.client.host if request.client else None,
    }


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers to ``app``; called from ``create_app``."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        log = fastapi_logger.error if exc.status_code >= 500 else fastapi_logger.warning
        log(
            "Request failed",
            extra={"error": exc.code.value, **_request_context(request), **exc.details}
        )
        return error_response(exc.code, exc.message, exc.status_code, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # loc starts with body/query/path
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"][1:]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exc.errors()
        ]
        fastapi_logger.warning(
            "Request rejected",
            extra={"validation_errors": errors, **_request_context(request)}
        )
        return error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request validation failed",
            422,
            {"validation_errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        # unknown routes and unsupported methods
        code = ErrorCode.NOT_FOUND if exc.status_code == 404 else ErrorCode.VALIDATION_ERROR
        return error_response(code, str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        fastapi_logger.exception("Unhandled error", extra=_request_context(request))
        message = f"{type(exc).__name__}: {exc}" if settings.DEBUG else "Internal server error"
        return error_response(ErrorCode.INTERNAL_SERVER_ERROR, message, 500)
