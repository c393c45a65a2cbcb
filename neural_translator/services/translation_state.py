"""
Observable state the orchestrator exposes to the presentation layer.
"""

from dataclasses import dataclass, field, fields
from typing import Callable, List, Optional, Set

from neural_translator.config.config import EngineKind
from neural_translator.models.interfaces import OrchestrationPhase
from neural_translator.models.languages import AUTO
from neural_translator.utils.logging import orchestrator_logger as logger

StateListener = Callable[["TranslationState", Set[str]], None]


@dataclass
class TranslationState:
    input_text: str = ""
    source_language: str = AUTO
    target_language: str = "Japanese"
    translated_text: str = ""
    error_message: Optional[str] = None
    engine_used: Optional[EngineKind] = None
    latency_ms: Optional[int] = None
    from_cache: bool = False
    is_translating: bool = False
    phase: OrchestrationPhase = OrchestrationPhase.IDLE
    _listeners: List[StateListener] = field(default_factory=list, repr=False, compare=False)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes) -> Set[str]:
        """Apply ``changes`` and notify listeners of the fields that actually changed."""
        known = {f.name for f in fields(self) if not f.name.startswith("_")}
        unknown = set(changes) - known
        if unknown:
            raise AttributeError(f"Unknown state fields: {', '.join(sorted(unknown))}")

        changed = set()
        for name, value in changes.items():
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed.add(name)

        if changed:
            for listener in list(self._listeners):
                try:
                    listener(self, changed)
                except Exception as e:
                    logger.error(f"State listener failed: {str(e)}", event="state_listener", exc_info=True)
        return changed

    @property
    def can_swap(self) -> bool:
        return self.source_language != AUTO
