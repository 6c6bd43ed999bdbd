"""
Application Configuration
Environment variables and settings management
"""

from pydantic_settings import BaseSettings, NoDecode
from pydantic import Field, field_validator
from typing import Annotated, List


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    ENVIRONMENT: str = Field(default="development", description="Application environment")
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./newsletter.db",
        description="Database URL (PostgreSQL or SQLite)"
    )
    DB_POOL_SIZE: int = Field(default=10, description="Database connection pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Database max overflow connections")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Database pool timeout in seconds")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database pool recycle time in seconds")

    # JWT Authentication
    JWT_SECRET_KEY: str = Field(
        default="change-me-newsletter-api-secret-key-at-least-32-chars",
        description="JWT secret key"
    )
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30, description="JWT access token expiration")

    # Security
    BCRYPT_ROUNDS: int = Field(default=12, description="Bcrypt hashing rounds")
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(default=[], description="CORS allowed origins")

    # Pagination
    DEFAULT_PAGE_SIZE: int = Field(default=10, description="Page size when none is requested")
    MAX_PAGE_SIZE: int = Field(default=100, description="Largest page size a client may request")

    # Bootstrap super user
    BOOTSTRAP_ADMIN_NAME: str = Field(default="Administrator", description="Bootstrap admin name")
    BOOTSTRAP_ADMIN_EMAIL: str = Field(default="admin@newsletter.local", description="Bootstrap admin email")
    BOOTSTRAP_ADMIN_PASSWORD: str = Field(default="Newsletter", description="Bootstrap admin password")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v if isinstance(v, list) else []

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value"""
        allowed = ["development", "staging", "production", "test"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


# Create settings instance
settings = Settings()

# Derived settings
DATABASE_CONFIG = {
    "pool_size": settings.DB_POOL_SIZE,
    "max_overflow": settings.DB_MAX_OVERFLOW,
    "pool_timeout": settings.DB_POOL_TIMEOUT,
    "pool_recycle": settings.DB_POOL_RECYCLE,
    "pool_pre_ping": True,
}

JWT_CONFIG = {
    "secret_key": settings.JWT_SECRET_KEY,
    "algorithm": settings.JWT_ALGORITHM,
    "access_token_expire_minutes": settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES,
}
