"""
Models package for the translation orchestration core.
"""

from .interfaces import (
    TranslationRequest,
    ResolvedPair,
    TranslationResult,
    DetectionResult,
    HistoryEntry,
    OrchestrationPhase,
    TranslationBackend,
    HistorySink,
    ClipboardProvider
)

from .languages import (
    AUTO,
    FALLBACK_TARGET,
    LANGUAGES,
    SUPPORTED_LANGUAGES,
    Language,
    detect_script_language,
    normalize_language
)

__all__ = [
    "TranslationRequest",
    "ResolvedPair",
    "TranslationResult",
    "DetectionResult",
    "HistoryEntry",
    "OrchestrationPhase",
    "TranslationBackend",
    "HistorySink",
    "ClipboardProvider",
    "AUTO",
    "FALLBACK_TARGET",
    "LANGUAGES",
    "SUPPORTED_LANGUAGES",
    "Language",
    "detect_script_language",
    "normalize_language"
]
