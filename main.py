"""
Tea API — Server
Teapots, teas, brews and steeps, kept in process memory.

Usage:
    pip install -e .
    uvicorn main:app --reload --port 3000

Then:
    curl http://localhost:3000/brew
"""

import logging
import time
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from config import settings
from errors import register_error_handlers
from routes import router
from stores import AppContext


# ── Structured logging ────────────────────────────────────────────────────────

def configure_logging(level: str) -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


log = structlog.get_logger()


# ── Middleware ────────────────────────────────────────────────────────────────

class RequestLogMiddleware(BaseHTTPMiddleware):
    """One log line per request: method, path, status and timing."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log.info("tea_api.request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )


# ── App ───────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("tea_api.startup",
        version=settings.api_version,
        stores=[store.name for store in app.state.context.stores()],
        tif_signature=f"http://{settings.host}:{settings.port}/brew",
    )
    yield


def create_app(context: AppContext | None = None) -> FastAPI:
    """
    Build the application around ``context``.
    A fresh AppContext (empty stores) is created when none is given.
    """
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        description="Teapots, teas, brews and steeps. TIF-compliant: cannot brew coffee.",
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.context = context if context is not None else AppContext()

    app.add_middleware(RequestLogMiddleware)
    register_error_handlers(app)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
