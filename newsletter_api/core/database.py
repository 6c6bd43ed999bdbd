"""
Database Configuration and Session Management
Async SQLAlchemy engine, session factory and request-scoped sessions
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import text
import structlog

from newsletter_api.core.config import settings, DATABASE_CONFIG

logger = structlog.get_logger()


def build_database_url(url: str) -> str:
    """Rewrite sync driver URLs to their async counterparts"""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


database_url = build_database_url(settings.DATABASE_URL)

engine_kwargs = {
    "echo": settings.ENVIRONMENT == "development" and settings.DEBUG,
}

# Pool tuning only applies to server databases
if not database_url.startswith("sqlite"):
    engine_kwargs.update(DATABASE_CONFIG)
    engine_kwargs["connect_args"] = {
        "server_settings": {
            "application_name": "newsletter-api",
        }
    }

engine = create_async_engine(database_url, **engine_kwargs)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Create declarative base
Base = declarative_base()


# Database dependency for FastAPI
async def get_db() -> AsyncSession:
    """
    Database session dependency for FastAPI endpoints
    Ensures proper session cleanup and error handling
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_database_health() -> bool:
    """
    Check database connectivity
    Used by the health check endpoint
    """
    try:
        async with engine.begin() as conn:
            result = await conn.execute(text("SELECT 1"))
            return result.scalar() == 1
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return False


async def init_database():
    """
    Create tables for every registered model
    Called during application startup
    """
    try:
        async with engine.begin() as conn:
            # Import all models to ensure they're registered
            from newsletter_api.models import feed, newsletter, user  # noqa: F401

            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Database initialization failed", error=str(e))
        raise


async def close_database():
    """
    Close database connections
    Called during application shutdown
    """
    try:
        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error("Error closing database connections", error=str(e))
