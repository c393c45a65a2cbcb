"""
Configuration management for the translation orchestration core.
Values are read from environment variables with desktop-friendly defaults.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Environment(Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class EngineKind(Enum):
    OLLAMA = "ollama"
    ML = "ml"

    @property
    def other(self) -> "EngineKind":
        return EngineKind.ML if self is EngineKind.OLLAMA else EngineKind.OLLAMA


DEFAULT_OLLAMA_MODELS = [
    "aya:8b",
    "qwen2.5:3b",
    "llama3.3:8b-instruct",
    "llama3.1:8b",
    "gemma3:3b",
    "phi4-mini",
]

DEFAULT_STOP_SEQUENCES = ["\n\n", "Translation:", "Explanation:", "Note:", "Context:"]


def _default_history_dir() -> str:
    return os.path.join(os.path.expanduser("~"), ".local", "share", "NeuraL")


@dataclass
class EngineConfig:
    ollama_base_url: str = "http://localhost:11434"
    request_timeout_seconds: float = 60.0
    ollama_models: List[str] = field(default_factory=lambda: list(DEFAULT_OLLAMA_MODELS))
    temperature: float = 0.3
    top_p: float = 0.9
    num_predict: int = 1024
    stop_sequences: List[str] = field(default_factory=lambda: list(DEFAULT_STOP_SEQUENCES))
    preferred_engine: EngineKind = EngineKind.OLLAMA
    ml_model_template: str = "Helsinki-NLP/opus-mt-{src}-{tgt}"
    ml_max_length: int = 512
    ml_use_gpu: bool = True


@dataclass
class OrchestrationConfig:
    cache_capacity: int = 100
    cache_key_delimiter: str = "§"
    debounce_ms: int = 500
    clipboard_poll_interval_seconds: float = 1.0
    health_check_interval_seconds: float = 30.0
    discard_stale_results: bool = False


@dataclass
class PreferencesConfig:
    native_language: str = "Japanese"
    save_history: bool = True
    record_cache_hits: bool = False
    auto_translate: bool = False


@dataclass
class HistoryConfig:
    database_url: str = ""
    max_entries: int = 1000

    def __post_init__(self):
        if not self.database_url:
            path = os.path.join(_default_history_dir(), "history.db")
            self.database_url = f"sqlite+aiosqlite:///{path}"


@dataclass
class ShortcutConfig:
    double_tap_timeout_ms: int = 300
    min_tap_interval_ms: int = 50


@dataclass
class MonitoringConfig:
    log_level: str = "INFO"


@dataclass
class Config:
    environment: Environment = Environment.DEVELOPMENT
    engine: EngineConfig = field(default_factory=EngineConfig)
    orchestration: OrchestrationConfig = field(default_factory=OrchestrationConfig)
    preferences: PreferencesConfig = field(default_factory=PreferencesConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    shortcuts: ShortcutConfig = field(default_factory=ShortcutConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _env_list(name: str, default: List[str]) -> List[str]:
    raw: Optional[str] = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def validate_config(cfg: Config) -> Config:
    """Reject values the orchestration core cannot work with."""
    from neural_translator.models.languages import SUPPORTED_LANGUAGES
    from neural_translator.utils.exceptions import ConfigurationError

    if cfg.orchestration.cache_capacity <= 0:
        raise ConfigurationError("Cache capacity must be positive", "cache_capacity")
    if cfg.orchestration.debounce_ms < 0:
        raise ConfigurationError("Debounce period cannot be negative", "debounce_ms")
    if cfg.orchestration.clipboard_poll_interval_seconds <= 0:
        raise ConfigurationError(
            "Clipboard poll interval must be positive", "clipboard_poll_interval_seconds"
        )
    if cfg.orchestration.health_check_interval_seconds <= 0:
        raise ConfigurationError(
            "Health check interval must be positive", "health_check_interval_seconds"
        )
    if not cfg.engine.ollama_models:
        raise ConfigurationError("At least one Ollama model must be configured", "ollama_models")
    if cfg.preferences.native_language not in SUPPORTED_LANGUAGES:
        raise ConfigurationError(
            f"Unsupported native language: {cfg.preferences.native_language}",
            "native_language",
        )
    if cfg.history.max_entries <= 0:
        raise ConfigurationError("History size must be positive", "max_entries")
    return cfg


def load_config() -> Config:
    """Load configuration based on environment variables."""
    env = Environment(os.getenv("ENVIRONMENT", "development"))

    preferred_engine = EngineKind(os.getenv("PREFERRED_ENGINE", "ollama").lower())

    engine_config = EngineConfig(
        ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
        request_timeout_seconds=float(os.getenv("ENGINE_TIMEOUT_SECONDS", "60")),
        ollama_models=_env_list("OLLAMA_MODELS", DEFAULT_OLLAMA_MODELS),
        temperature=float(os.getenv("OLLAMA_TEMPERATURE", "0.3")),
        top_p=float(os.getenv("OLLAMA_TOP_P", "0.9")),
        num_predict=int(os.getenv("OLLAMA_NUM_PREDICT", "1024")),
        preferred_engine=preferred_engine,
        ml_model_template=os.getenv("ML_MODEL_TEMPLATE", "Helsinki-NLP/opus-mt-{src}-{tgt}"),
        ml_max_length=int(os.getenv("ML_MAX_LENGTH", "512")),
        ml_use_gpu=_env_bool("ML_USE_GPU", "true"),
    )

    orchestration_config = OrchestrationConfig(
        cache_capacity=int(os.getenv("CACHE_CAPACITY", "100")),
        debounce_ms=int(os.getenv("DEBOUNCE_MS", "500")),
        clipboard_poll_interval_seconds=float(os.getenv("CLIPBOARD_POLL_SECONDS", "1.0")),
        health_check_interval_seconds=float(os.getenv("HEALTH_CHECK_SECONDS", "30")),
        discard_stale_results=_env_bool("DISCARD_STALE_RESULTS", "false"),
    )

    preferences_config = PreferencesConfig(
        native_language=os.getenv("NATIVE_LANGUAGE", "Japanese"),
        save_history=_env_bool("SAVE_HISTORY", "true"),
        record_cache_hits=_env_bool("RECORD_CACHE_HITS", "false"),
        auto_translate=_env_bool("AUTO_TRANSLATE", "false"),
    )

    history_config = HistoryConfig(
        database_url=os.getenv("HISTORY_DATABASE_URL", ""),
        max_entries=int(os.getenv("HISTORY_MAX_ENTRIES", "1000")),
    )

    shortcut_config = ShortcutConfig(
        double_tap_timeout_ms=int(os.getenv("DOUBLE_TAP_TIMEOUT_MS", "300")),
        min_tap_interval_ms=int(os.getenv("MIN_TAP_INTERVAL_MS", "50")),
    )

    monitoring_config = MonitoringConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )

    return Config(
        environment=env,
        engine=engine_config,
        orchestration=orchestration_config,
        preferences=preferences_config,
        history=history_config,
        shortcuts=shortcut_config,
        monitoring=monitoring_config,
    )


# Global configuration instance
config = load_config()
