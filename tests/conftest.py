"""
Pytest configuration and fixtures for the translation orchestration tests.
"""

import asyncio
from typing import Callable, Dict, List, Optional

import pytest
import pytest_asyncio

from neural_translator.config.config import (
    Config,
    EngineConfig,
    EngineKind,
    HistoryConfig,
    OrchestrationConfig,
    PreferencesConfig,
)
from neural_translator.database.connection import DatabaseManager
from neural_translator.models.interfaces import ClipboardProvider, TranslationBackend, TranslationRequest
from neural_translator.models.languages import detect_script_language
from neural_translator.services.cache_manager import TranslationCache
from neural_translator.services.engine_gateway import EngineGateway
from neural_translator.services.health_monitor import EngineHealth
from neural_translator.services.language_resolver import LanguagePairResolver
from neural_translator.services.orchestrator import RequestOrchestrator

# Test database configuration
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeBackend(TranslationBackend):
    """Scriptable backend that records every call it receives."""

    def __init__(self, kind: EngineKind, prefix: str = None, healthy: bool = True):
        self.kind = kind
        self.prefix = prefix or f"[{kind.value}]"
        self.healthy = healthy
        self.translate_error: Optional[Exception] = None
        self.detect_error: Optional[Exception] = None
        self.detected_language: Optional[str] = None
        self.delays: Dict[str, float] = {}
        self.translate_calls: List[TranslationRequest] = []
        self.detect_calls: List[str] = []
        self.improve_calls: List[tuple] = []
        self.closed = False

    async def detect_language(self, text: str) -> str:
        self.detect_calls.append(text)
        if self.detect_error:
            raise self.detect_error
        return self.detected_language or detect_script_language(text)

    async def translate(self, request: TranslationRequest) -> str:
        self.translate_calls.append(request)
        delay = self.delays.get(request.text)
        if delay:
            await asyncio.sleep(delay)
        if self.translate_error:
            raise self.translate_error
        return f"{self.prefix} {request.text} ({request.from_language}->{request.to_language})"

    async def improve_text(self, text: str, language: str) -> str:
        self.improve_calls.append((text, language))
        if self.translate_error:
            raise self.translate_error
        return f"{self.prefix} improved {text}"

    async def check_health(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True


class FakeClipboard(ClipboardProvider):
    """In-memory clipboard."""

    def __init__(self, text: str = ""):
        self.text = text
        self.writes: List[str] = []

    async def get_text(self) -> str:
        return self.text

    async def set_text(self, text: str) -> None:
        self.text = text
        self.writes.append(text)


class RecordingSink:
    """History sink that keeps entries in memory."""

    def __init__(self, error: Exception = None):
        self.entries = []
        self.error = error

    async def append_history(self, entry) -> None:
        if self.error:
            raise self.error
        self.entries.append(entry)


@pytest.fixture
def ollama_backend() -> FakeBackend:
    return FakeBackend(EngineKind.OLLAMA)


@pytest.fixture
def ml_backend() -> FakeBackend:
    return FakeBackend(EngineKind.ML)


@pytest.fixture
def backends(ollama_backend, ml_backend) -> Dict[EngineKind, FakeBackend]:
    return {EngineKind.OLLAMA: ollama_backend, EngineKind.ML: ml_backend}


@pytest.fixture
def health() -> EngineHealth:
    """Both engines healthy, Ollama preferred."""
    return EngineHealth(
        preferred=EngineKind.OLLAMA,
        flags={EngineKind.OLLAMA: True, EngineKind.ML: True}
    )


@pytest.fixture
def gateway(backends, health) -> EngineGateway:
    return EngineGateway(backends, health)


@pytest.fixture
def cache() -> TranslationCache:
    return TranslationCache(capacity=100, delimiter="§")


@pytest.fixture
def preferences() -> PreferencesConfig:
    return PreferencesConfig(native_language="Japanese", save_history=True)


@pytest.fixture
def history_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def orchestrator_factory(gateway, cache, preferences, history_sink) -> Callable[..., RequestOrchestrator]:
    def factory(**overrides) -> RequestOrchestrator:
        options = {
            "cache": cache,
            "resolver": LanguagePairResolver(),
            "history_sink": history_sink,
            "preferences": preferences,
            "discard_stale_results": False,
        }
        options.update(overrides)
        return RequestOrchestrator(gateway, **options)

    return factory


@pytest.fixture
def orchestrator(orchestrator_factory) -> RequestOrchestrator:
    return orchestrator_factory()


@pytest.fixture
def test_config() -> Config:
    """Configuration with short timers and an in-memory history database."""
    return Config(
        engine=EngineConfig(ollama_models=["llama3.1:8b"]),
        orchestration=OrchestrationConfig(
            debounce_ms=20,
            clipboard_poll_interval_seconds=0.01,
            health_check_interval_seconds=60
        ),
        preferences=PreferencesConfig(native_language="Japanese"),
        history=HistoryConfig(database_url=TEST_DATABASE_URL, max_entries=5)
    )


@pytest_asyncio.fixture
async def db_manager():
    """Initialized in-memory history database."""
    manager = DatabaseManager(TEST_DATABASE_URL)
    await manager.initialize()
    yield manager
    await manager.close()


@pytest.fixture
def failing_history_sink() -> RecordingSink:
    return RecordingSink(error=RuntimeError("disk full"))


@pytest.fixture
def make_clipboard():
    """Factory for in-memory clipboards."""
    return FakeClipboard
