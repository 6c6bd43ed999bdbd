"""
Base CRUD Repository Pattern
Generic repository with common database operations
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.sql import Select
from pydantic import BaseModel
import structlog

from newsletter_api.core.database import Base
from newsletter_api.models.base import MAX_RECORD_ID

logger = structlog.get_logger()

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Base CRUD repository with generic database operations
    """

    def __init__(self, model: Type[ModelType]):
        """
        Initialize CRUD repository

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    def _base_query(self, include_deleted: bool = False) -> Select:
        query = select(self.model)
        if hasattr(self.model, 'is_deleted') and not include_deleted:
            query = query.where(self.model.is_deleted == False)  # noqa: E712
        return query

    async def get(
        self,
        db: AsyncSession,
        id: int,
        include_deleted: bool = False
    ) -> Optional[ModelType]:
        """
        Get a single record by ID

        Args:
            db: Database session
            id: Record ID
            include_deleted: Include soft-deleted records

        Returns:
            Model instance or None
        """
        if not 0 < id <= MAX_RECORD_ID:
            logger.debug("Record id out of range", model=self.model.__name__, id=id)
            return None

        try:
            query = self._base_query(include_deleted).where(self.model.id == id)
            result = await db.execute(query)
            record = result.scalar_one_or_none()

            if record:
                logger.debug("Record retrieved", model=self.model.__name__, id=id)
            else:
                logger.debug("Record not found", model=self.model.__name__, id=id)

            return record

        except Exception as e:
            logger.error("Error retrieving record", model=self.model.__name__, id=id, error=str(e))
            raise

    async def get_page(
        self,
        db: AsyncSession,
        query: Select,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[List[ModelType], int]:
        """
        Run a filtered query and return one page of it with the total count

        Args:
            db: Database session
            query: Filtered select over the model
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            (records, total) tuple
        """
        try:
            count_query = select(func.count()).select_from(query.subquery())
            total = (await db.execute(count_query)).scalar() or 0

            query = query.order_by(self.model.id.asc()).offset(skip).limit(limit)
            result = await db.execute(query)
            records = list(result.scalars().all())

            logger.debug(
                "Page retrieved",
                model=self.model.__name__,
                count=len(records),
                total=total,
                skip=skip,
                limit=limit
            )
            return records, total

        except Exception as e:
            logger.error("Error retrieving page", model=self.model.__name__, error=str(e))
            raise

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]],
        commit: bool = True
    ) -> ModelType:
        """
        Create a new record

        Args:
            db: Database session
            obj_in: Pydantic model or dict with creation data
            commit: Whether to commit the transaction

        Returns:
            Created model instance
        """
        try:
            obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
            db_obj = self.model(**obj_in_data)

            db.add(db_obj)

            if commit:
                await db.commit()
                await db.refresh(db_obj)
            else:
                await db.flush()

            logger.info("Record created", model=self.model.__name__, id=db_obj.id)
            return db_obj

        except Exception as e:
            if commit:
                await db.rollback()
            logger.error("Error creating record", model=self.model.__name__, error=str(e))
            raise

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        commit: bool = True
    ) -> ModelType:
        """
        Update an existing record

        Args:
            db: Database session
            db_obj: Existing model instance
            obj_in: Pydantic model or dict with update data
            commit: Whether to commit the transaction

        Returns:
            Updated model instance
        """
        try:
            if isinstance(obj_in, dict):
                update_data = obj_in
            else:
                update_data = obj_in.model_dump(exclude_unset=True)

            for field, value in update_data.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            if commit:
                await db.commit()
                await db.refresh(db_obj)
            else:
                await db.flush()

            logger.info("Record updated", model=self.model.__name__, id=db_obj.id)
            return db_obj

        except Exception as e:
            if commit:
                await db.rollback()
            logger.error("Error updating record", model=self.model.__name__, id=db_obj.id, error=str(e))
            raise

    async def delete(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        soft_delete: bool = True,
        commit: bool = True
    ) -> ModelType:
        """
        Delete a record (soft or hard delete)

        Args:
            db: Database session
            db_obj: Model instance to delete
            soft_delete: Use soft delete if model supports it
            commit: Whether to commit the transaction

        Returns:
            Deleted model instance
        """
        record_id = db_obj.id
        soft = soft_delete and hasattr(db_obj, 'is_deleted')
        try:
            if soft:
                db_obj.is_deleted = True
                if hasattr(db_obj, 'deleted_at'):
                    db_obj.deleted_at = func.now()
            else:
                await db.delete(db_obj)

            if commit:
                await db.commit()
                if soft:
                    await db.refresh(db_obj)
            else:
                await db.flush()

            logger.info("Record deleted", model=self.model.__name__, id=record_id, soft_delete=soft)
            return db_obj

        except Exception as e:
            if commit:
                await db.rollback()
            logger.error("Error deleting record", model=self.model.__name__, id=record_id, error=str(e))
            raise
