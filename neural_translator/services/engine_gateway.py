"""
Uniform entry point over the baseline and accelerated engines with single fallback.
"""

import time
from typing import Awaitable, Callable, List, Mapping, Tuple, TypeVar

from neural_translator.config.config import EngineKind
from neural_translator.models.interfaces import (
    DetectionResult,
    TranslationBackend,
    TranslationRequest,
    TranslationResult,
)
from neural_translator.models.languages import normalize_language
from neural_translator.services.health_monitor import EngineHealth
from neural_translator.utils.exceptions import (
    DetectionFailedError,
    EngineUnavailableError,
    TransportError,
)
from neural_translator.utils.logging import engine_logger as logger

T = TypeVar("T")


class EngineGateway:
    """Selects a backend per call and falls back to the other one at most once.

    Health flags are read from ``EngineHealth`` and never written here.
    Reported latency covers only the call that produced the result.
    """

    def __init__(self, backends: Mapping[EngineKind, TranslationBackend], health: EngineHealth):
        self.backends = backends
        self.health = health

    async def _run(self, operation: str,
                   call: Callable[[TranslationBackend], Awaitable[T]]) -> Tuple[T, EngineKind, int]:
        attempts: List[TransportError] = []
        skipped: List[EngineKind] = []

        for kind in self.health.attempt_order():
            backend = self.backends.get(kind)
            if backend is None or not self.health.is_healthy(kind):
                skipped.append(kind)
                continue

            if attempts:
                logger.engine_fallback(attempts[-1].engine, kind.value, operation, attempts[-1].error_code)
            elif skipped:
                logger.engine_fallback(skipped[-1].value, kind.value, operation, "unhealthy")

            started = time.perf_counter()
            try:
                value = await call(backend)
            except TransportError as e:
                if e.engine is None:
                    e.engine = kind.value
                attempts.append(e)
                continue
            except Exception as e:
                logger.error(
                    f"Unclassified {operation} failure on {kind.value}: {str(e)}",
                    event="engine_error",
                    exc_info=True
                )
                attempts.append(TransportError(str(e) or e.__class__.__name__, engine=kind.value))
                continue

            latency_ms = int((time.perf_counter() - started) * 1000)
            return value, kind, latency_ms

        error = EngineUnavailableError.from_attempts(attempts)
        logger.error(
            f"All engines exhausted for {operation}",
            event="engine_unavailable",
            metadata={"reason": error.reason, "health": self.health.snapshot()}
        )
        raise error

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        translated, kind, latency_ms = await self._run(
            "translate", lambda backend: backend.translate(request)
        )
        return TranslationResult(
            translated_text=translated,
            engine_used=kind,
            latency_ms=latency_ms,
            from_language=request.from_language,
            to_language=request.to_language
        )

    async def detect_language(self, text: str) -> DetectionResult:
        try:
            language, kind, _ = await self._run(
                "detect_language", lambda backend: backend.detect_language(text)
            )
        except EngineUnavailableError as e:
            raise DetectionFailedError(details={"reason": e.reason})
        return DetectionResult(language=normalize_language(language), engine_used=kind)

    async def improve_text(self, text: str, language: str) -> TranslationResult:
        improved, kind, latency_ms = await self._run(
            "improve_text", lambda backend: backend.improve_text(text, language)
        )
        return TranslationResult(
            translated_text=improved,
            engine_used=kind,
            latency_ms=latency_ms,
            from_language=language,
            to_language=language
        )
