"""
Custom exceptions for the translation orchestration core.
"""

from typing import Any, Dict, List, Optional


class TranslatorException(Exception):
    """Base exception for translator errors."""

    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "SYSTEM_ERROR"
        self.details = details or {}


class ValidationError(TranslatorException):
    """Exception for request validation errors."""

    def __init__(self, message: str, field: str = None, details: Dict[str, Any] = None):
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class LanguageResolutionError(ValidationError):
    """Exception for language pairs that cannot be resolved to concrete tags."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "language", details)
        self.error_code = "LANGUAGE_RESOLUTION_ERROR"


class DetectionFailedError(TranslatorException):
    """Exception for language detection failures. Never fatal for a request."""

    def __init__(self, message: str = "Language detection failed", details: Dict[str, Any] = None):
        super().__init__(message, "DETECTION_FAILED", details)


class TransportError(TranslatorException):
    """A single backend call failed."""

    def __init__(self, message: str, engine: str = None, details: Dict[str, Any] = None,
                 error_code: str = "TRANSPORT_ERROR"):
        super().__init__(message, error_code, details)
        self.engine = engine


class EngineConnectionError(TransportError):
    """The backend could not be reached at all."""

    def __init__(self, message: str, engine: str = None, details: Dict[str, Any] = None):
        super().__init__(message, engine, details, "ENGINE_CONNECTION_ERROR")


class ModelUnavailableError(TransportError):
    """The backend is reachable but has no model able to serve the request."""

    def __init__(self, message: str, engine: str = None, details: Dict[str, Any] = None):
        super().__init__(message, engine, details, "MODEL_UNAVAILABLE")


class EngineUnavailableError(TranslatorException):
    """Every eligible backend was unhealthy or failed."""

    NO_BACKEND_REACHABLE = "no_backend_reachable"
    NO_CAPABILITY = "no_capability"
    UNKNOWN = "unknown"

    def __init__(self, reason: str = UNKNOWN, attempts: Optional[List[TransportError]] = None,
                 message: str = None, details: Dict[str, Any] = None):
        attempts = attempts or []
        message = message or f"No translation engine available ({reason})"
        details = details or {}
        details.update({
            "reason": reason,
            "attempts": [
                {"engine": attempt.engine, "code": attempt.error_code, "message": attempt.message}
                for attempt in attempts
            ],
        })
        super().__init__(message, "ENGINE_UNAVAILABLE", details)
        self.reason = reason
        self.attempts = attempts

    @classmethod
    def from_attempts(cls, attempts: List[TransportError]) -> "EngineUnavailableError":
        """Classify exhausted attempts by the most specific failure seen."""
        if not attempts:
            return cls(cls.NO_BACKEND_REACHABLE, attempts)
        if any(isinstance(attempt, ModelUnavailableError) for attempt in attempts):
            return cls(cls.NO_CAPABILITY, attempts)
        if all(isinstance(attempt, EngineConnectionError) for attempt in attempts):
            return cls(cls.NO_BACKEND_REACHABLE, attempts)
        return cls(cls.UNKNOWN, attempts)


class CacheError(TranslatorException):
    """Exception for cache operations."""

    def __init__(self, message: str, cache_key: str = None, details: Dict[str, Any] = None):
        super().__init__(message, "CACHE_ERROR", details)
        self.cache_key = cache_key


class DatabaseError(TranslatorException):
    """Exception for history database operations."""

    def __init__(self, message: str, operation: str = None, details: Dict[str, Any] = None):
        super().__init__(message, "DATABASE_ERROR", details)
        self.operation = operation


class ConfigurationError(TranslatorException):
    """Exception for configuration errors."""

    def __init__(self, message: str, config_key: str = None, details: Dict[str, Any] = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)
        self.config_key = config_key


class ClipboardError(TranslatorException):
    """Exception for clipboard read/write failures."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "CLIPBOARD_ERROR", details)


# User-facing templates, one per failure classification
MESSAGE_CONNECTION_REFUSED = (
    "Cannot connect to Ollama. Make sure Ollama is running.\n\nStart it with: ollama serve"
)
MESSAGE_NO_MODEL = (
    "No suitable translation model was found.\n\n"
    "Install one with: ollama pull llama3.1:8b"
)
MESSAGE_MODEL_LOADING = "The model failed to load. Please wait a moment and try again."
MESSAGE_NO_ENGINE = "No translation engine is available.\n\nStart Ollama with: ollama serve"
MESSAGE_GENERIC = "A translation error occurred. Please try again."


def user_message_for(error: Exception) -> str:
    """Pick the single human-readable message shown in place of a result."""
    if isinstance(error, EngineUnavailableError):
        if error.reason == EngineUnavailableError.NO_CAPABILITY:
            return MESSAGE_NO_MODEL
        if error.reason == EngineUnavailableError.NO_BACKEND_REACHABLE:
            if any(isinstance(a, EngineConnectionError) for a in error.attempts):
                return MESSAGE_CONNECTION_REFUSED
            return MESSAGE_NO_ENGINE
        if any("model" in attempt.message.lower() for attempt in error.attempts):
            return MESSAGE_MODEL_LOADING
        return MESSAGE_GENERIC
    if isinstance(error, EngineConnectionError):
        return MESSAGE_CONNECTION_REFUSED
    if isinstance(error, ModelUnavailableError):
        return MESSAGE_NO_MODEL
    return MESSAGE_GENERIC


def create_error_response(exception: TranslatorException, include_details: bool = True) -> Dict[str, Any]:
    """Create standardized error payload for the presentation layer."""
    response = {
        "error": {
            "code": exception.error_code,
            "message": user_message_for(exception),
        }
    }

    if include_details and exception.details:
        response["error"]["details"] = exception.details

    return response
