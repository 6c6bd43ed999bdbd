"""
Newsletter Service
Persistence-facing operations behind the newsletter controller
"""

from typing import List, Optional, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter_api.core.exceptions import NotFoundError
from newsletter_api.core.pagination import PageFilter
from newsletter_api.models.newsletter import Newsletter
from newsletter_api.repositories.newsletter import NewsletterRepository
from newsletter_api.repositories.user import UserRepository
from newsletter_api.schemas.newsletter import NewsletterCreate, NewsletterUpdate

logger = structlog.get_logger()


class NewsletterService:
    """Service for newsletter management"""

    def __init__(self, repository: NewsletterRepository, user_repository: UserRepository):
        self.repository = repository
        self.user_repository = user_repository

    async def find_all(self, db: AsyncSession, page_filter: PageFilter) -> Tuple[List[Newsletter], int]:
        return await self.repository.filter_newsletters(
            db,
            name=page_filter.name,
            user_id=page_filter.user_id,
            skip=page_filter.offset,
            limit=page_filter.size,
        )

    async def find_by_id(self, db: AsyncSession, newsletter_id: int) -> Optional[Newsletter]:
        return await self.repository.get(db, id=newsletter_id)

    async def save(self, db: AsyncSession, newsletter_in: NewsletterCreate) -> Newsletter:
        await self._validate_owner(db, newsletter_in.user_id)

        newsletter = await self.repository.create(db, obj_in=newsletter_in)
        logger.info("Newsletter created", id=newsletter.id, user_id=newsletter.user_id)
        return newsletter

    async def edit(self, db: AsyncSession, newsletter: Newsletter, newsletter_in: NewsletterUpdate) -> Newsletter:
        if newsletter_in.user_id != newsletter.user_id:
            await self._validate_owner(db, newsletter_in.user_id)

        edited = await self.repository.update(db, db_obj=newsletter, obj_in=newsletter_in)
        logger.info("Newsletter edited", id=newsletter.id)
        return edited

    async def activate(self, db: AsyncSession, newsletter: Newsletter) -> Newsletter:
        return await self._set_active(db, newsletter, True)

    async def deactivate(self, db: AsyncSession, newsletter: Newsletter) -> Newsletter:
        return await self._set_active(db, newsletter, False)

    async def remove(self, db: AsyncSession, newsletter: Newsletter) -> Newsletter:
        removed = await self.repository.delete(db, db_obj=newsletter)
        logger.info("Newsletter removed", id=newsletter.id)
        return removed

    async def _set_active(self, db: AsyncSession, newsletter: Newsletter, active: bool) -> Newsletter:
        updated = await self.repository.update(db, db_obj=newsletter, obj_in={"active": active})
        logger.info("Newsletter status changed", id=newsletter.id, active=active)
        return updated

    async def _validate_owner(self, db: AsyncSession, user_id: int) -> None:
        """Ensure the owning user exists"""
        if await self.user_repository.get(db, id=user_id) is None:
            raise NotFoundError(f"User {user_id} not found")
