"""
Configuration package for the translation orchestration core.
"""

from .config import (
    Config,
    EngineConfig,
    EngineKind,
    Environment,
    HistoryConfig,
    MonitoringConfig,
    OrchestrationConfig,
    PreferencesConfig,
    ShortcutConfig,
    config,
    load_config,
    validate_config,
)

__all__ = [
    "Config",
    "EngineConfig",
    "EngineKind",
    "Environment",
    "HistoryConfig",
    "MonitoringConfig",
    "OrchestrationConfig",
    "PreferencesConfig",
    "ShortcutConfig",
    "config",
    "load_config",
    "validate_config",
]
