"""
Bootstrap admin creation service.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter_api.core.config import settings
from newsletter_api.core.security import get_password_hash
from newsletter_api.models.user import User
from newsletter_api.repositories.user import user_repository

logger = structlog.get_logger()


async def ensure_bootstrap_admin_exists(db: AsyncSession) -> User:
    """Create a confirmed super user unless one with the bootstrap email exists."""
    admin_email = settings.BOOTSTRAP_ADMIN_EMAIL.lower().strip()

    existing = await user_repository.get_by_email(db, admin_email, include_deleted=True)
    if existing:
        logger.info("Bootstrap admin already exists", email=admin_email, user_id=existing.id)
        return existing

    bootstrap_user = await user_repository.create(
        db,
        obj_in={
            "name": settings.BOOTSTRAP_ADMIN_NAME,
            "email": admin_email,
            "hashed_password": get_password_hash(settings.BOOTSTRAP_ADMIN_PASSWORD),
            "is_super": True,
            "pending_confirm": False,
            "pending_password": False,
        },
    )

    logger.info("Bootstrap admin created", email=admin_email, user_id=bootstrap_user.id)
    return bootstrap_user
