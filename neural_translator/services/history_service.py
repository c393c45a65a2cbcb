"""
History sink backed by the local SQLite history store.
"""

from typing import Any, Dict, List

from neural_translator.config.config import HistoryConfig, PreferencesConfig, config
from neural_translator.database.connection import DatabaseManager
from neural_translator.database.repositories.history_repository import HistoryRepository
from neural_translator.models.interfaces import HistoryEntry, HistorySink
from neural_translator.utils.exceptions import DatabaseError
from neural_translator.utils.logging import history_logger as logger


class HistoryService(HistorySink):
    """Records settled translations. Storage failures are logged, never raised
    from ``append_history``."""

    def __init__(self, db_manager: DatabaseManager = None, preferences: PreferencesConfig = None,
                 history_config: HistoryConfig = None):
        self.history_config = history_config or config.history
        self.db_manager = db_manager or DatabaseManager(self.history_config.database_url)
        self.preferences = preferences or config.preferences

    async def initialize(self):
        await self.db_manager.initialize()

    async def close(self):
        await self.db_manager.close()

    def _should_record(self, entry: HistoryEntry) -> bool:
        if not self.preferences.save_history:
            return False
        if not entry.source_text.strip() or not entry.translated_text.strip():
            return False
        if entry.cache_hit and not self.preferences.record_cache_hits:
            return False
        return True

    async def append_history(self, entry: HistoryEntry) -> None:
        if not self._should_record(entry):
            return

        try:
            if not self.db_manager.is_initialized:
                await self.db_manager.initialize()

            async with self.db_manager.get_session() as session:
                repo = HistoryRepository(session)
                record = await repo.append(entry)
                await repo.trim(self.history_config.max_entries)

            logger.debug(
                "Translation saved to history",
                event="history_saved",
                metadata={"id": record.id, "engine": entry.engine, "cache_hit": entry.cache_hit}
            )
        except DatabaseError as e:
            logger.error(f"Failed to save translation history: {e.message}", event="history_failed")

    async def get_recent(self, limit: int = 50) -> List[Dict[str, Any]]:
        async with self.db_manager.get_session() as session:
            records = await HistoryRepository(session).list_recent(limit)
            return [record.to_dict() for record in records]

    async def clear(self) -> int:
        async with self.db_manager.get_session() as session:
            removed = await HistoryRepository(session).clear()
        logger.info(f"Cleared {removed} history entries", event="history_cleared")
        return removed

    async def get_stats(self) -> Dict[str, Any]:
        async with self.db_manager.get_session() as session:
            return await HistoryRepository(session).get_stats()
