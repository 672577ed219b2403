"""
Tea API — Errors
Every failure leaves the service as {code, message, details?}.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = structlog.get_logger()


class ApiError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationFailed(ApiError):
    """Malformed input, or a brew pointing at a missing teapot or tea."""

    status_code = 400
    code = "VALIDATION_ERROR"


class NotFound(ApiError):
    status_code = 404
    code = "NOT_FOUND"


# ── Handlers ──────────────────────────────────────────────────────────────────

async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
    log.info("tea_api.request_rejected",
        path=request.url.path,
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_unmatched_route(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and unsupported methods both read as "no such route"
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={
            "code": "NOT_FOUND",
            "message": f"Cannot {request.method} {request.url.path}",
        })
    return JSONResponse(status_code=exc.status_code, content={
        "code": "HTTP_ERROR",
        "message": str(exc.detail),
    })


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    log.error("tea_api.internal_error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={
        "code": "INTERNAL_ERROR",
        "message": "An unexpected error occurred",
    })


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_unmatched_route)
    app.add_exception_handler(Exception, handle_unexpected)
