"""
User Service
Persistence-facing operations behind the user controller.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter_api.core.exceptions import ConflictError
from newsletter_api.core.pagination import PageFilter
from newsletter_api.core.security import get_password_hash
from newsletter_api.models.user import User
from newsletter_api.repositories.user import UserRepository
from newsletter_api.schemas.user import UserCreate

logger = structlog.get_logger()


class UserService:
    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def _ensure_email_available(self, db: AsyncSession, email: str, exclude_id: Optional[int] = None) -> None:
        existing = await self.repository.get_by_email(db, email, include_deleted=True)
        if existing and existing.id != exclude_id:
            raise ConflictError("Email already registered")

    async def _prepare_changes(self, db: AsyncSession, user_id: Optional[int], data: dict[str, Any]) -> dict[str, Any]:
        changes = {key: value for key, value in data.items() if value is not None}
        if "email" in changes:
            await self._ensure_email_available(db, changes["email"], exclude_id=user_id)
        if "password" in changes:
            changes["hashed_password"] = await asyncio.to_thread(get_password_hash, changes.pop("password"))
        return changes

    async def find_by_id(self, db: AsyncSession, user_id: int) -> Optional[User]:
        return await self.repository.get(db, id=user_id)

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        return await self.repository.get_by_email(db, email)

    async def find_all(self, db: AsyncSession, page_filter: PageFilter) -> tuple[list[User], int]:
        return await self.repository.filter_users(
            db,
            name=page_filter.name,
            skip=page_filter.offset,
            limit=page_filter.size,
        )

    async def save(self, db: AsyncSession, data: UserCreate) -> User:
        """Create a user whose password must be changed on first use.

        A super grant made at creation time starts out pending confirmation.
        """
        await self._ensure_email_available(db, data.email)

        hashed_password = await asyncio.to_thread(get_password_hash, data.password)
        user = await self.repository.create(
            db,
            obj_in={
                "name": data.name,
                "email": data.email,
                "hashed_password": hashed_password,
                "is_super": data.is_super,
                "pending_confirm": data.is_super,
                "pending_password": True,
            },
        )

        logger.info("User created", user_id=user.id, email=user.email, is_super=user.is_super)
        return user

    async def edit(self, db: AsyncSession, user: User, data: dict[str, Any]) -> User:
        changes = await self._prepare_changes(db, user.id, data)
        edited = await self.repository.update(db, db_obj=user, obj_in=changes)
        logger.info("User edited", user_id=user.id, fields=sorted(changes))
        return edited

    async def edit_by_id(self, db: AsyncSession, user_id: int, data: dict[str, Any]) -> Optional[User]:
        user = await self.repository.get(db, id=user_id)
        if user is None:
            return None
        return await self.edit(db, user, data)

    async def change_password(self, db: AsyncSession, user: User, new_password: str) -> User:
        hashed_password = await asyncio.to_thread(get_password_hash, new_password)
        changed = await self.repository.update(
            db,
            db_obj=user,
            obj_in={"hashed_password": hashed_password, "pending_password": False},
        )
        logger.info("User password changed", user_id=user.id)
        return changed

    async def remove(self, db: AsyncSession, user: User) -> User:
        removed = await self.repository.delete(db, db_obj=user)
        logger.info("User removed", user_id=user.id, email=user.email)
        return removed

    async def promote(self, db: AsyncSession, user_id: int) -> Optional[User]:
        """Grant super privileges pending confirmation; confirmed supers are left as they are."""
        user = await self.repository.get(db, id=user_id)
        if user is None:
            return None
        if user.is_super:
            return user

        promoted = await self.repository.update(
            db,
            db_obj=user,
            obj_in={"is_super": True, "pending_confirm": True},
        )
        logger.info("User promoted", user_id=user.id)
        return promoted
