from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from leave_approval.api.v1.router import router as api_v1_router
from leave_approval.config.settings import settings
from leave_approval.core.exceptions import BaseAppException
from leave_approval.core.logging import get_logger, setup_logging
from leave_approval.core.middleware import RequestLoggingMiddleware
from leave_approval.db.init_db import init_db

logger = get_logger(__name__)


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """Render typed application errors as `{"error": {...}}` with their status code."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        f"Application exception: {exc.error_code.value} - {exc.message}",
        extra={
            "error_code": exc.error_code.value,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures logging, title, version and debug mode from Settings.
    - Registers request logging and the application exception handler.
    - Includes the versioned API router under /api/v1.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(BaseAppException, app_exception_handler)

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    # Initialize DB schema outside production (production uses migrations)
    @app.on_event("startup")
    async def on_startup() -> None:
        if not settings.is_production():
            init_db()

    return app


app = create_app()
