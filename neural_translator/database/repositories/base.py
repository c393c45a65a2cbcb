"""
Base repository with the CRUD operations shared by history repositories.
"""

from abc import ABC
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from neural_translator.database.connection import Base
from neural_translator.utils.exceptions import DatabaseError
from neural_translator.utils.logging import TranslationLogger

logger = TranslationLogger(__name__, "repository")

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """Abstract base repository bound to one session and one model class."""

    def __init__(self, session: AsyncSession, model_class: Type[ModelType]):
        self.session = session
        self.model_class = model_class

    async def create(self, entity: ModelType) -> ModelType:
        try:
            self.session.add(entity)
            await self.session.flush()
            await self.session.refresh(entity)
            return entity
        except Exception as e:
            logger.error(f"Error creating {self.model_class.__name__}: {str(e)}", exc_info=True)
            raise DatabaseError(f"Failed to create {self.model_class.__name__}: {str(e)}", "create")

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count entities with optional equality filters."""
        try:
            stmt = select(self.model_class)
            if filters:
                stmt = self._apply_filters(stmt, filters)
            count_stmt = select(func.count()).select_from(stmt.subquery())
            result = await self.session.execute(count_stmt)
            return result.scalar() or 0
        except Exception as e:
            logger.error(f"Error counting {self.model_class.__name__}: {str(e)}", exc_info=True)
            raise DatabaseError(f"Failed to count {self.model_class.__name__}: {str(e)}", "count")

    async def delete_all(self) -> int:
        try:
            result = await self.session.execute(delete(self.model_class))
            return result.rowcount
        except Exception as e:
            logger.error(f"Error deleting {self.model_class.__name__} rows: {str(e)}", exc_info=True)
            raise DatabaseError(f"Failed to delete {self.model_class.__name__}: {str(e)}", "delete_all")

    def _apply_filters(self, stmt: Select, filters: Dict[str, Any]) -> Select:
        for key, value in filters.items():
            if hasattr(self.model_class, key):
                column = getattr(self.model_class, key)
                if isinstance(value, list):
                    stmt = stmt.where(column.in_(value))
                else:
                    stmt = stmt.where(column == value)
        return stmt

    async def _list(self, stmt: Select) -> List[ModelType]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
