"""
Utilities package for the translation orchestration core.
"""

from .logging import (
    TranslationLogger,
    engine_logger,
    cache_logger,
    orchestrator_logger,
    trigger_logger,
    history_logger,
    app_logger
)

from .exceptions import (
    TranslatorException,
    ValidationError,
    LanguageResolutionError,
    DetectionFailedError,
    TransportError,
    EngineConnectionError,
    ModelUnavailableError,
    EngineUnavailableError,
    CacheError,
    DatabaseError,
    ConfigurationError,
    ClipboardError,
    user_message_for,
    create_error_response
)

__all__ = [
    "TranslationLogger",
    "engine_logger",
    "cache_logger",
    "orchestrator_logger",
    "trigger_logger",
    "history_logger",
    "app_logger",
    "TranslatorException",
    "ValidationError",
    "LanguageResolutionError",
    "DetectionFailedError",
    "TransportError",
    "EngineConnectionError",
    "ModelUnavailableError",
    "EngineUnavailableError",
    "CacheError",
    "DatabaseError",
    "ConfigurationError",
    "ClipboardError",
    "user_message_for",
    "create_error_response"
]
