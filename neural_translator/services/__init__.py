"""
Services package for the translation orchestration core.
"""

from .cache_manager import TranslationCache
from .engine_gateway import EngineGateway
from .health_monitor import EngineHealth, HealthMonitor
from .history_service import HistoryService
from .language_resolver import LanguagePairResolver
from .ml_backend import AcceleratedBackend
from .ollama_backend import OllamaBackend
from .orchestrator import RequestOrchestrator
from .translation_state import TranslationState

__all__ = [
    "TranslationCache",
    "EngineGateway",
    "EngineHealth",
    "HealthMonitor",
    "HistoryService",
    "LanguagePairResolver",
    "AcceleratedBackend",
    "OllamaBackend",
    "RequestOrchestrator",
    "TranslationState"
]
