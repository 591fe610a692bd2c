"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from identity.core.config import settings
from identity.core.exceptions import IdentityError
from identity.core.logging import configure_logging
from identity.models.database import init_db, close_db
from identity.api.routes import router as api_router
from identity.api.middleware import LoggingMiddleware, RequestIdMiddleware, get_request_id
from identity.utils.timezone import utc_now

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    logger.info(
        "starting identity service",
        version=settings.app_version,
        environment=settings.environment,
    )
    if settings.database.create_tables:
        await init_db()

    yield

    logger.info("shutting down identity service")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        description="Identity service for managing users and feature flags",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # Middleware (last added is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routes
    app.include_router(api_router, prefix="/api")

    # Exception handlers
    @app.exception_handler(IdentityError)
    async def identity_error_handler(request: Request, exc: IdentityError):
        """Map domain errors to status codes."""
        message = exc.message
        if exc.status_code >= 500:
            logger.error(
                "request failed",
                error=exc.code,
                message=exc.message,
                request_id=get_request_id(),
                exc_info=exc,
            )
            # Storage detail stays in the log
            if not settings.debug:
                message = "An error occurred"
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "message": message},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error(
            "unhandled exception",
            path=request.url.path,
            request_id=getattr(request.state, "request_id", None),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": str(exc) if settings.debug else "An error occurred",
            },
        )

    @app.get("/health")
    async def health_check():
        """Liveness probe."""
        return {
            "status": "healthy",
            "time": utc_now().isoformat(),
            "version": settings.app_version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "identity.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        workers=settings.workers,
        log_config=None,
    )
