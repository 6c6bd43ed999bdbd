"""
FastAPI Main Application
Newsletter API Service
"""

import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from newsletter_api.api.v1.router import api_router
from newsletter_api.core.config import settings
from newsletter_api.core.database import AsyncSessionLocal, check_database_health, close_database, init_database
from newsletter_api.core.logging import setup_logging
from newsletter_api.middleware.logging import LoggingMiddleware
from newsletter_api.repositories.newsletter import newsletter_repository
from newsletter_api.repositories.user import user_repository
from newsletter_api.services.bootstrap_admin import ensure_bootstrap_admin_exists
from newsletter_api.services.newsletter import NewsletterService
from newsletter_api.services.user import UserService

# Setup structured logging
setup_logging()
logger = structlog.get_logger()

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Newsletter API Service", version=VERSION)

    await init_database()
    async with AsyncSessionLocal() as session:
        await ensure_bootstrap_admin_exists(session)

    yield

    logger.info("Shutting down Newsletter API Service")
    await close_database()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as a list of field errors"""
    logger.info("Request validation failed", path=request.url.path, error_count=len(exc.errors()))
    return JSONResponse(
        status_code=422,
        content={"errors": jsonable_encoder(exc.errors())},
    )


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred"
        }
    )


def create_app() -> FastAPI:
    """Build the application and wire its services"""
    app = FastAPI(
        title="Newsletter API",
        description="Newsletter and user management API",
        version=VERSION,
        docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
        lifespan=lifespan
    )

    # Services are built once per process and handed to endpoints via Depends
    app.state.user_service = UserService(user_repository)
    app.state.newsletter_service = NewsletterService(newsletter_repository, user_repository)

    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
            expose_headers=["X-Request-ID"],
            max_age=600,
        )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        """Health check endpoint for containers and load balancers"""
        if await check_database_health():
            return {
                "status": "healthy",
                "service": "newsletter-api",
                "version": VERSION,
                "timestamp": time.time(),
                "database": "connected"
            }
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "service": "newsletter-api",
                "version": VERSION,
                "timestamp": time.time(),
                "database": "unreachable"
            }
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "newsletter_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower()
    )
