"""
Repository for translation history records.
"""

from typing import Any, Dict, List

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from neural_translator.database.models import TranslationHistoryRecord
from neural_translator.database.repositories.base import BaseRepository
from neural_translator.models.interfaces import HistoryEntry
from neural_translator.utils.exceptions import DatabaseError
from neural_translator.utils.logging import TranslationLogger

logger = TranslationLogger(__name__, "history-repository")


class HistoryRepository(BaseRepository[TranslationHistoryRecord]):
    """Newest-first access to the bounded history table."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, TranslationHistoryRecord)

    async def append(self, entry: HistoryEntry) -> TranslationHistoryRecord:
        record = TranslationHistoryRecord(
            source_text=entry.source_text,
            translated_text=entry.translated_text,
            from_language=entry.from_language,
            to_language=entry.to_language,
            engine=entry.engine,
            latency_ms=entry.latency_ms,
            cache_hit=entry.cache_hit
        )
        return await self.create(record)

    async def list_recent(self, limit: int = 50) -> List[TranslationHistoryRecord]:
        """Most recent records first."""
        try:
            stmt = (
                select(self.model_class)
                .order_by(desc(self.model_class.timestamp), desc(self.model_class.id))
                .limit(limit)
            )
            return await self._list(stmt)
        except Exception as e:
            logger.error(f"Error listing history: {str(e)}", exc_info=True)
            raise DatabaseError(f"Failed to list history: {str(e)}", "list_recent")

    async def trim(self, max_entries: int) -> int:
        """Delete the oldest records beyond ``max_entries``. Returns rows removed."""
        try:
            keep = (
                select(self.model_class.id)
                .order_by(desc(self.model_class.timestamp), desc(self.model_class.id))
                .limit(max_entries)
            )
            stmt = delete(self.model_class).where(self.model_class.id.not_in(keep))
            result = await self.session.execute(stmt)
            removed = result.rowcount or 0
            if removed:
                logger.info(f"Trimmed {removed} old history entries", event="history_trim")
            return removed
        except Exception as e:
            logger.error(f"Error trimming history: {str(e)}", exc_info=True)
            raise DatabaseError(f"Failed to trim history: {str(e)}", "trim")

    async def clear(self) -> int:
        return await self.delete_all()

    async def get_stats(self) -> Dict[str, Any]:
        """Totals, cache-hit count and average latency per engine."""
        try:
            total = await self.count()
            cache_hits = await self.count({"cache_hit": True})

            stmt = (
                select(
                    self.model_class.engine,
                    func.count(self.model_class.id),
                    func.avg(self.model_class.latency_ms)
                )
                .where(self.model_class.engine.is_not(None))
                .group_by(self.model_class.engine)
            )
            result = await self.session.execute(stmt)
            engines = {
                engine: {
                    "count": count,
                    "avg_latency_ms": round(float(avg_latency), 1) if avg_latency is not None else None
                }
                for engine, count, avg_latency in result.all()
            }

            return {
                "total_entries": total,
                "cache_hits": cache_hits,
                "engines": engines
            }
        except DatabaseError:
            raise
        except Exception as e:
            logger.error(f"Error computing history stats: {str(e)}", exc_info=True)
            raise DatabaseError(f"Failed to compute history stats: {str(e)}", "get_stats")
