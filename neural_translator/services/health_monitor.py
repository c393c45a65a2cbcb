"""
Engine health state and the out-of-band probe loop that refreshes it.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from neural_translator.config.config import EngineKind, config
from neural_translator.models.interfaces import TranslationBackend
from neural_translator.utils.logging import engine_logger as logger


@dataclass
class EngineHealth:
    """Per-backend health flags plus the user's preferred backend."""
    preferred: EngineKind = EngineKind.OLLAMA
    flags: Dict[EngineKind, bool] = field(
        default_factory=lambda: {EngineKind.OLLAMA: False, EngineKind.ML: False}
    )

    def is_healthy(self, kind: EngineKind) -> bool:
        return self.flags.get(kind, False)

    def set_healthy(self, kind: EngineKind, healthy: bool) -> None:
        self.flags[kind] = healthy

    def attempt_order(self) -> List[EngineKind]:
        """Preferred backend first, then the alternate."""
        return [self.preferred, self.preferred.other]

    @property
    def any_healthy(self) -> bool:
        return any(self.flags.values())

    def snapshot(self) -> Dict[str, bool]:
        return {kind.value: healthy for kind, healthy in self.flags.items()}


class HealthMonitor:
    """Probes every backend periodically and writes the results to ``EngineHealth``."""

    def __init__(self, backends: Mapping[EngineKind, TranslationBackend], health: EngineHealth,
                 interval_seconds: float = None):
        self.backends = backends
        self.health = health
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None
            else config.orchestration.health_check_interval_seconds
        )
        self._monitoring_task = None
        self._is_monitoring = False

    async def refresh(self) -> Dict[str, bool]:
        """Probe all backends concurrently and update the flags."""
        kinds = list(self.backends.keys())
        results = await asyncio.gather(
            *(self.backends[kind].check_health() for kind in kinds),
            return_exceptions=True
        )

        for kind, result in zip(kinds, results):
            if isinstance(result, Exception):
                logger.warning(
                    f"Health probe for {kind.value} raised: {str(result)}",
                    event="health_probe_error"
                )
                result = False
            previous = self.health.is_healthy(kind)
            self.health.set_healthy(kind, bool(result))
            if previous != bool(result):
                logger.info(
                    f"Engine {kind.value} is now {'healthy' if result else 'unhealthy'}",
                    event="health_changed",
                    metadata={"engine": kind.value, "healthy": bool(result)}
                )

        return self.health.snapshot()

    async def start(self):
        """Start continuous health monitoring."""
        if self._is_monitoring:
            logger.warning("Health monitoring is already running")
            return

        self._is_monitoring = True
        self._monitoring_task = asyncio.create_task(self._monitoring_loop())

        logger.info("Health monitoring started")

    async def stop(self):
        """Stop health monitoring."""
        if not self._is_monitoring:
            return

        self._is_monitoring = False

        if self._monitoring_task:
            self._monitoring_task.cancel()
            try:
                await self._monitoring_task
            except asyncio.CancelledError:
                pass
            self._monitoring_task = None

        logger.info("Health monitoring stopped")

    async def _monitoring_loop(self):
        while self._is_monitoring:
            try:
                await self.refresh()
                await asyncio.sleep(self.interval_seconds)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in health monitoring loop: {str(e)}", exc_info=True)
                await asyncio.sleep(self.interval_seconds)
