"""
Unit tests for the history repository and history service.
"""

from unittest.mock import AsyncMock

import pytest

from neural_translator.config.config import HistoryConfig, PreferencesConfig
from neural_translator.database.repositories.history_repository import HistoryRepository
from neural_translator.models.interfaces import HistoryEntry
from neural_translator.services.history_service import HistoryService
from neural_translator.utils.exceptions import DatabaseError


def make_entry(text: str = "Hello", engine: str = "ollama", cache_hit: bool = False,
               latency_ms: int = 120) -> HistoryEntry:
    return HistoryEntry(
        source_text=text,
        translated_text=f"translated {text}",
        from_language="English",
        to_language="Japanese",
        engine=engine,
        latency_ms=latency_ms,
        cache_hit=cache_hit
    )


class TestHistoryRepository:
    """Test history persistence against in-memory SQLite."""

    @pytest.mark.asyncio
    async def test_append_and_list_recent(self, db_manager):
        async with db_manager.get_session() as session:
            repo = HistoryRepository(session)
            for i in range(3):
                await repo.append(make_entry(f"text {i}"))

        async with db_manager.get_session() as session:
            records = await HistoryRepository(session).list_recent(limit=2)

        assert [record.source_text for record in records] == ["text 2", "text 1"]
        assert records[0].id
        assert records[0].timestamp is not None

    @pytest.mark.asyncio
    async def test_trim_removes_oldest(self, db_manager):
        async with db_manager.get_session() as session:
            repo = HistoryRepository(session)
            for i in range(5):
                await repo.append(make_entry(f"text {i}"))
            removed = await repo.trim(3)

        async with db_manager.get_session() as session:
            repo = HistoryRepository(session)
            remaining = await repo.list_recent(limit=10)
            total = await repo.count()

        assert removed == 2
        assert total == 3
        assert [record.source_text for record in remaining] == ["text 4", "text 3", "text 2"]

    @pytest.mark.asyncio
    async def test_clear(self, db_manager):
        async with db_manager.get_session() as session:
            repo = HistoryRepository(session)
            await repo.append(make_entry())
            await repo.append(make_entry("Bye"))
            removed = await repo.clear()

        assert removed == 2

    @pytest.mark.asyncio
    async def test_stats(self, db_manager):
        async with db_manager.get_session() as session:
            repo = HistoryRepository(session)
            await repo.append(make_entry("a", latency_ms=100))
            await repo.append(make_entry("b", latency_ms=300))
            await repo.append(make_entry("c", engine="ml", latency_ms=50))
            await repo.append(make_entry("d", engine=None, cache_hit=True, latency_ms=None))
            stats = await repo.get_stats()

        assert stats["total_entries"] == 4
        assert stats["cache_hits"] == 1
        assert stats["engines"]["ollama"] == {"count": 2, "avg_latency_ms": 200.0}
        assert stats["engines"]["ml"]["count"] == 1

    @pytest.mark.asyncio
    async def test_to_dict(self, db_manager):
        async with db_manager.get_session() as session:
            record = await HistoryRepository(session).append(make_entry())

        data = record.to_dict()
        assert data["source_text"] == "Hello"
        assert data["engine"] == "ollama"
        assert data["cache_hit"] is False


class TestHistoryService:
    """Test the history sink policy."""

    @pytest.fixture
    def service(self, db_manager):
        return HistoryService(
            db_manager,
            PreferencesConfig(save_history=True, record_cache_hits=False),
            HistoryConfig(database_url="sqlite+aiosqlite:///:memory:", max_entries=3)
        )

    @pytest.mark.asyncio
    async def test_records_engine_results(self, service):
        await service.append_history(make_entry())

        recent = await service.get_recent()
        assert len(recent) == 1
        assert recent[0]["translated_text"] == "translated Hello"

    @pytest.mark.asyncio
    async def test_skips_cache_hits_by_default(self, service):
        await service.append_history(make_entry(cache_hit=True, engine=None, latency_ms=None))

        assert await service.get_recent() == []

    @pytest.mark.asyncio
    async def test_records_cache_hits_when_enabled(self, service):
        service.preferences.record_cache_hits = True

        await service.append_history(make_entry(cache_hit=True, engine=None, latency_ms=None))

        recent = await service.get_recent()
        assert recent[0]["cache_hit"] is True
        assert recent[0]["latency_ms"] is None

    @pytest.mark.asyncio
    async def test_respects_save_history_preference(self, service):
        service.preferences.save_history = False

        await service.append_history(make_entry())

        assert await service.get_recent() == []

    @pytest.mark.asyncio
    async def test_skips_blank_text(self, service):
        await service.append_history(make_entry(text="   "))

        assert await service.get_recent() == []

    @pytest.mark.asyncio
    async def test_bounded_by_max_entries(self, service):
        for i in range(5):
            await service.append_history(make_entry(f"text {i}"))

        stats = await service.get_stats()
        assert stats["total_entries"] == 3

    @pytest.mark.asyncio
    async def test_clear(self, service):
        await service.append_history(make_entry())

        assert await service.clear() == 1
        assert await service.get_recent() == []

    @pytest.mark.asyncio
    async def test_storage_failure_is_swallowed(self):
        db_manager = AsyncMock()
        db_manager.is_initialized = False
        db_manager.initialize.side_effect = DatabaseError("disk full", "initialize")
        service = HistoryService(db_manager, PreferencesConfig(), HistoryConfig())

        await service.append_history(make_entry())

        db_manager.initialize.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_initializes_lazily(self):
        service = HistoryService(
            preferences=PreferencesConfig(),
            history_config=HistoryConfig(database_url="sqlite+aiosqlite:///:memory:")
        )

        await service.append_history(make_entry())

        assert service.db_manager.is_initialized
        assert len(await service.get_recent()) == 1
        await service.close()
