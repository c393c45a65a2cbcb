"""
Application wiring: builds every component from configuration and owns
their lifecycle.
"""

from dataclasses import replace
from typing import Dict, Optional

from neural_translator.config.config import Config, EngineKind, config as default_config, validate_config
from neural_translator.database.connection import DatabaseManager
from neural_translator.models.interfaces import ClipboardProvider, TranslationBackend, TranslationResult
from neural_translator.models.languages import SUPPORTED_LANGUAGES, normalize_language
from neural_translator.services.cache_manager import TranslationCache
from neural_translator.services.engine_gateway import EngineGateway
from neural_translator.services.health_monitor import EngineHealth, HealthMonitor
from neural_translator.services.history_service import HistoryService
from neural_translator.services.language_resolver import LanguagePairResolver
from neural_translator.services.ml_backend import AcceleratedBackend
from neural_translator.services.ollama_backend import OllamaBackend
from neural_translator.services.orchestrator import RequestOrchestrator
from neural_translator.triggers.clipboard import PyperclipClipboard
from neural_translator.triggers.clipboard_monitor import ClipboardMonitor
from neural_translator.triggers.debounce import DebouncedTrigger
from neural_translator.triggers.shortcuts import (
    CLEAR_TEXT,
    COPY_RESULT,
    LANGUAGE_SWAP,
    ShortcutHandler,
)
from neural_translator.utils.exceptions import ClipboardError, DatabaseError, ValidationError
from neural_translator.utils.logging import app_logger as logger


class TranslatorApp:
    """Composes backends, health monitoring, the orchestrator and the trigger
    sources behind the operations a presentation layer calls."""

    def __init__(self, cfg: Config = None,
                 backends: Optional[Dict[EngineKind, TranslationBackend]] = None,
                 clipboard: ClipboardProvider = None,
                 history: HistoryService = None):
        self.config = cfg or default_config
        # owned copy; preference setters must not reach the shared config
        self.preferences = replace(self.config.preferences)

        self.backends = backends if backends is not None else {
            EngineKind.OLLAMA: OllamaBackend(self.config.engine),
            EngineKind.ML: AcceleratedBackend(self.config.engine),
        }
        self.health = EngineHealth(preferred=self.config.engine.preferred_engine)
        self.health_monitor = HealthMonitor(
            self.backends, self.health, self.config.orchestration.health_check_interval_seconds
        )
        self.gateway = EngineGateway(self.backends, self.health)
        self.cache = TranslationCache(
            self.config.orchestration.cache_capacity, self.config.orchestration.cache_key_delimiter
        )
        if history is None:
            history = HistoryService(
                DatabaseManager(self.config.history.database_url), self.preferences, self.config.history
            )
        self.history = history
        self.orchestrator = RequestOrchestrator(
            self.gateway,
            cache=self.cache,
            resolver=LanguagePairResolver(),
            history_sink=self.history,
            preferences=self.preferences,
            discard_stale_results=self.config.orchestration.discard_stale_results
        )
        self.state = self.orchestrator.state

        self.clipboard = clipboard if clipboard is not None else PyperclipClipboard()
        self.debounce = DebouncedTrigger(self.orchestrator.handle, self.config.orchestration.debounce_ms)
        self.clipboard_monitor = ClipboardMonitor(
            self.clipboard, self.translate_external,
            self.config.orchestration.clipboard_poll_interval_seconds
        )
        self.shortcuts = ShortcutHandler(
            self.clipboard,
            self.translate_external,
            actions={
                LANGUAGE_SWAP: self._swap_action,
                CLEAR_TEXT: self._clear_action,
                COPY_RESULT: self.copy_result,
            }
        )
        self._started = False

    async def start(self):
        """Validate configuration, open history and start background loops."""
        if self._started:
            return

        logger.info("Starting translator")
        validate_config(self.config)

        if self.preferences.save_history:
            try:
                await self.history.initialize()
            except DatabaseError as e:
                logger.error(f"History unavailable, continuing without it: {e.message}", event="startup")

        await self.health_monitor.refresh()
        await self.health_monitor.start()

        if self.preferences.auto_translate:
            await self.clipboard_monitor.start()

        self._started = True
        logger.info("Translator started", metadata={"health": self.health.snapshot()})

    async def stop(self):
        if not self._started:
            return

        logger.info("Stopping translator")
        self.debounce.cancel()
        await self.clipboard_monitor.stop()
        await self.clipboard_monitor.wait_idle()
        await self.health_monitor.stop()
        await self.orchestrator.wait_for_history()

        for kind, backend in self.backends.items():
            try:
                await backend.close()
            except Exception as e:
                logger.error(f"Error closing {kind.value} backend: {str(e)}", exc_info=True)

        await self.history.close()
        self._started = False
        logger.info("Translator stopped")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    def on_input_changed(self, text: str) -> None:
        """Typing in the source area; translation starts after the quiet period."""
        self.state.update(input_text=text)
        self.debounce.notify(text)

    async def translate_external(self, text: str) -> Optional[TranslationResult]:
        """Text arriving from the clipboard or a shortcut replaces the input at once."""
        self.debounce.cancel()
        self.state.update(input_text=text)
        return await self.orchestrator.handle(text)

    async def translate_now(self) -> Optional[TranslationResult]:
        self.debounce.cancel()
        return await self.orchestrator.handle(self.state.input_text)

    async def improve_text(self) -> Optional[TranslationResult]:
        self.debounce.cancel()
        return await self.orchestrator.improve(self.state.input_text)

    async def retry(self) -> Optional[TranslationResult]:
        return await self.orchestrator.retry()

    def swap_languages(self) -> bool:
        """Swap languages and texts, then translate the new input after the quiet period."""
        if not self.orchestrator.swap_languages():
            logger.debug("Swap ignored while source is Auto", event=LANGUAGE_SWAP)
            return False
        self.debounce.notify(self.state.input_text)
        return True

    def clear_text(self) -> None:
        self.debounce.cancel()
        self.state.update(
            input_text="",
            translated_text="",
            error_message=None,
            engine_used=None,
            latency_ms=None,
            from_cache=False
        )

    async def copy_result(self) -> bool:
        text = self.state.translated_text
        if not text:
            return False
        try:
            await self.clipboard.set_text(text)
        except ClipboardError as e:
            logger.warning(f"Copy failed: {e.message}", event=COPY_RESULT)
            return False
        return True

    async def _swap_action(self):
        self.swap_languages()

    async def _clear_action(self):
        self.clear_text()

    async def set_auto_translate(self, enabled: bool) -> None:
        self.preferences.auto_translate = enabled
        if enabled:
            await self.clipboard_monitor.start()
        else:
            await self.clipboard_monitor.stop()

    def set_native_language(self, language: str) -> None:
        tag = normalize_language(language)
        if tag not in SUPPORTED_LANGUAGES:
            raise ValidationError(f"Unsupported native language: {language}", "native_language")
        self.preferences.native_language = tag

    def set_preferred_engine(self, engine) -> None:
        try:
            self.health.preferred = EngineKind(engine)
        except ValueError:
            raise ValidationError(f"Unknown engine: {engine}", "preferred_engine")
        logger.info(f"Preferred engine set to {self.health.preferred.value}", event="preferences")


def create_app(cfg: Config = None, **overrides) -> TranslatorApp:
    """Create a translator application."""
    return TranslatorApp(cfg, **overrides)
