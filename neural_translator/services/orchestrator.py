"""
Request orchestrator: turns trigger events into settled translations.
"""

import asyncio
from typing import Optional, Set

from neural_translator.config.config import PreferencesConfig, config
from neural_translator.models.interfaces import (
    HistoryEntry,
    HistorySink,
    OrchestrationPhase,
    ResolvedPair,
    TranslationRequest,
    TranslationResult,
)
from neural_translator.models.languages import (
    AUTO,
    detect_script_language,
    is_auto,
    normalize_language,
)
from neural_translator.services.cache_manager import TranslationCache
from neural_translator.services.engine_gateway import EngineGateway
from neural_translator.services.language_resolver import LanguagePairResolver
from neural_translator.services.translation_state import TranslationState
from neural_translator.utils.exceptions import (
    DetectionFailedError,
    EngineUnavailableError,
    TranslatorException,
    user_message_for,
)
from neural_translator.utils.logging import orchestrator_logger as logger


class RequestOrchestrator:
    """Coordinates detection, pair resolution, caching and engine calls.

    ``handle`` calls are not serialized: several may be in flight at once and
    the one that completes last owns the visible result. Setting
    ``discard_stale_results`` drops completions that were overtaken by a
    newer request instead; the newest request then also owns
    ``is_translating``.
    """

    def __init__(self, gateway: EngineGateway, cache: TranslationCache = None,
                 resolver: LanguagePairResolver = None, history_sink: HistorySink = None,
                 preferences: PreferencesConfig = None, state: TranslationState = None,
                 discard_stale_results: bool = None):
        self.gateway = gateway
        self.cache = cache if cache is not None else TranslationCache()
        self.resolver = resolver if resolver is not None else LanguagePairResolver()
        self.history_sink = history_sink
        self.preferences = preferences if preferences is not None else config.preferences
        self.state = state if state is not None else TranslationState(target_language=self.preferences.native_language)
        self.discard_stale_results = (
            discard_stale_results if discard_stale_results is not None
            else config.orchestration.discard_stale_results
        )
        self._sequence = 0
        self._last_text: Optional[str] = None
        self._history_tasks: Set[asyncio.Task] = set()

    @property
    def native_language(self) -> str:
        return self.preferences.native_language

    def _next_request_id(self) -> int:
        self._sequence += 1
        return self._sequence

    def _may_publish(self, request_id: int) -> bool:
        if not self.discard_stale_results or request_id == self._sequence:
            return True
        logger.debug("Discarding stale completion", request_id=request_id, event="stale_result")
        return False

    def _publish(self, request_id: int, **changes) -> None:
        if self._may_publish(request_id):
            self.state.update(**changes)

    async def handle(self, raw_text: str) -> Optional[TranslationResult]:
        """Run one orchestration pass for ``raw_text``.

        Blank input is ignored without touching any state. Returns the
        result, or ``None`` when the input was blank or the request failed.
        """
        if not raw_text or not raw_text.strip():
            logger.debug("Ignoring empty input", event="empty_input")
            return None

        request_id = self._next_request_id()
        self._last_text = raw_text

        pair = await self._resolve_pair(request_id, raw_text)

        self._publish(request_id, phase=OrchestrationPhase.CACHE_CHECK)
        cache_key = self.cache.fingerprint(raw_text, pair)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return self._settle_from_cache(request_id, raw_text, pair, cached)

        return await self._translate(request_id, raw_text, pair, cache_key)

    async def retry(self) -> Optional[TranslationResult]:
        """Re-run the most recent non-blank input."""
        if self._last_text is None:
            return None
        return await self.handle(self._last_text)

    async def _detect(self, request_id: int, text: str) -> str:
        """Detect the source language, falling back to the script heuristic."""
        self._publish(request_id, phase=OrchestrationPhase.DETECTING)
        try:
            detection = await self.gateway.detect_language(text)
        except DetectionFailedError as e:
            fallback = detect_script_language(text)
            logger.detection_failed(request_id, e.message, fallback)
            return fallback

        self._publish(request_id, source_language=detection.language)
        return detection.language

    async def _resolve_pair(self, request_id: int, text: str) -> ResolvedPair:
        declared = self.state.source_language
        detected = await self._detect(request_id, text) if is_auto(declared) else None

        self._publish(request_id, phase=OrchestrationPhase.RESOLVING)
        pair = self.resolver.resolve(
            declared, self.state.target_language, self.native_language, detected
        )
        self._publish(request_id, target_language=pair.effective_to)
        return pair

    def _settle_from_cache(self, request_id: int, text: str, pair: ResolvedPair,
                           cached: str) -> TranslationResult:
        logger.cache_hit(request_id, pair.effective_from, pair.effective_to, self.cache.size())
        changes = dict(
            translated_text=cached,
            error_message=None,
            from_cache=True,
            phase=OrchestrationPhase.SETTLED
        )
        if self.discard_stale_results:
            # older requests can no longer publish, so the newest one clears the flag
            changes["is_translating"] = False
        self._publish(request_id, **changes)
        self._publish(request_id, phase=OrchestrationPhase.IDLE)

        self._forward_history(HistoryEntry(
            source_text=text,
            translated_text=cached,
            from_language=pair.effective_from,
            to_language=pair.effective_to,
            engine=None,
            latency_ms=None,
            cache_hit=True
        ))
        return TranslationResult(
            translated_text=cached,
            engine_used=None,
            latency_ms=None,
            from_language=pair.effective_from,
            to_language=pair.effective_to,
            cache_hit=True
        )

    async def _translate(self, request_id: int, text: str, pair: ResolvedPair,
                         cache_key: str) -> Optional[TranslationResult]:
        self._publish(request_id, phase=OrchestrationPhase.TRANSLATING, is_translating=True)
        request = TranslationRequest(text, pair.effective_from, pair.effective_to)

        try:
            result = await self.gateway.translate(request)
        except EngineUnavailableError as e:
            self._fail(request_id, e, pair)
            return None

        self.cache.put(cache_key, result.translated_text)
        logger.translation_completed(
            request_id, result.engine_used.value, result.latency_ms,
            pair.effective_from, pair.effective_to, len(text)
        )
        self._publish(
            request_id,
            translated_text=result.translated_text,
            error_message=None,
            engine_used=result.engine_used,
            latency_ms=result.latency_ms,
            from_cache=False,
            is_translating=False,
            phase=OrchestrationPhase.SETTLED
        )
        self._publish(request_id, phase=OrchestrationPhase.IDLE)

        self._forward_history(HistoryEntry(
            source_text=text,
            translated_text=result.translated_text,
            from_language=pair.effective_from,
            to_language=pair.effective_to,
            engine=result.engine_used.value,
            latency_ms=result.latency_ms
        ))
        return result

    def _fail(self, request_id: int, error: TranslatorException, pair: ResolvedPair) -> None:
        logger.translation_failed(
            request_id, error.error_code, error.message, pair.effective_from, pair.effective_to
        )
        self._publish(
            request_id,
            translated_text="",
            error_message=user_message_for(error),
            from_cache=False,
            is_translating=False,
            phase=OrchestrationPhase.ERROR
        )

    async def improve(self, raw_text: str) -> Optional[TranslationResult]:
        """Rewrite ``raw_text`` in its own language. Not cached, not recorded."""
        if not raw_text or not raw_text.strip():
            return None

        request_id = self._next_request_id()
        language = self.state.source_language
        if is_auto(language):
            language = await self._detect(request_id, raw_text)

        self._publish(request_id, phase=OrchestrationPhase.TRANSLATING, is_translating=True)
        try:
            result = await self.gateway.improve_text(raw_text, language)
        except EngineUnavailableError as e:
            self._fail(request_id, e, ResolvedPair(language, language))
            return None

        self._publish(
            request_id,
            translated_text=result.translated_text,
            error_message=None,
            engine_used=result.engine_used,
            latency_ms=result.latency_ms,
            from_cache=False,
            is_translating=False,
            phase=OrchestrationPhase.SETTLED
        )
        self._publish(request_id, phase=OrchestrationPhase.IDLE)
        return result

    def _forward_history(self, entry: HistoryEntry) -> None:
        if self.history_sink is None:
            return
        task = asyncio.create_task(self._append_history(entry))
        self._history_tasks.add(task)
        task.add_done_callback(self._history_tasks.discard)

    async def _append_history(self, entry: HistoryEntry) -> None:
        try:
            await self.history_sink.append_history(entry)
        except Exception as e:
            logger.error(f"Failed to record translation history: {str(e)}", event="history_failed", exc_info=True)

    async def wait_for_history(self) -> None:
        """Wait until every pending history write has finished."""
        if self._history_tasks:
            await asyncio.gather(*list(self._history_tasks), return_exceptions=True)

    def select_source_language(self, language: str) -> None:
        self.state.update(source_language=normalize_language(language) or AUTO)

    def select_target_language(self, language: str) -> None:
        target = normalize_language(language)
        if is_auto(target):
            raise ValueError("Target language must be a concrete language")
        self.state.update(target_language=target)

    def swap_languages(self) -> bool:
        """Swap texts and languages at once. Disabled while the source is Auto."""
        if not self.state.can_swap:
            return False
        state = self.state
        state.update(
            source_language=state.target_language,
            target_language=state.source_language,
            input_text=state.translated_text,
            translated_text=state.input_text,
            error_message=None
        )
        return True
