"""
Newsletter Repository
Database operations for newsletters
"""

from typing import List, Optional, Tuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter_api.models.newsletter import Newsletter
from newsletter_api.repositories.base import CRUDBase
from newsletter_api.schemas.newsletter import NewsletterCreate, NewsletterUpdate

logger = structlog.get_logger()


class NewsletterRepository(CRUDBase[Newsletter, NewsletterCreate, NewsletterUpdate]):
    """Repository for newsletter operations"""

    async def filter_newsletters(
        self,
        db: AsyncSession,
        *,
        name: Optional[str] = None,
        user_id: Optional[int] = None,
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Newsletter], int]:
        """Page of newsletters, optionally restricted to one owner and a name fragment"""
        query = self._base_query()

        if user_id is not None:
            query = query.where(Newsletter.user_id == user_id)
        if name:
            query = query.where(Newsletter.name.ilike(f"%{name.strip()}%"))

        return await self.get_page(db, query, skip=skip, limit=limit)


newsletter_repository = NewsletterRepository(Newsletter)
