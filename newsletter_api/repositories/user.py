"""
User Repository
Database operations for user management.
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter_api.models.user import User
from newsletter_api.repositories.base import CRUDBase
from newsletter_api.schemas.user import UserCreate, UserUpdate

logger = structlog.get_logger()


class UserRepository(CRUDBase[User, UserCreate, UserUpdate]):
    async def get_by_email(self, db: AsyncSession, email: str, include_deleted: bool = False) -> Optional[User]:
        query = select(User).where(User.email == email.lower().strip())
        if not include_deleted:
            query = query.where(User.is_deleted == False)  # noqa: E712

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def filter_users(
        self,
        db: AsyncSession,
        *,
        name: Optional[str],
        skip: int,
        limit: int,
    ) -> tuple[list[User], int]:
        query = self._base_query()

        if name:
            query = query.where(User.name.ilike(f"%{name.strip()}%"))

        return await self.get_page(db, query, skip=skip, limit=limit)


user_repository = UserRepository(User)
