"""
Core data types and abstract contracts for the translation orchestration core.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from neural_translator.config.config import EngineKind


@dataclass(frozen=True)
class TranslationRequest:
    """One translate call, built fresh for every trigger event."""
    text: str
    from_language: str
    to_language: str

    def __post_init__(self):
        if not self.text:
            raise ValueError("Translation request text must not be empty")


@dataclass(frozen=True)
class ResolvedPair:
    """Concrete (source, target) pair after auto-resolution."""
    effective_from: str
    effective_to: str


@dataclass(frozen=True)
class TranslationResult:
    """Outcome of a successful translation."""
    translated_text: str
    engine_used: Optional[EngineKind]
    latency_ms: Optional[int]
    from_language: str
    to_language: str
    cache_hit: bool = False


@dataclass(frozen=True)
class DetectionResult:
    language: str
    engine_used: EngineKind


@dataclass(frozen=True)
class HistoryEntry:
    """Payload forwarded to the history sink after a settled translation."""
    source_text: str
    translated_text: str
    from_language: str
    to_language: str
    engine: Optional[str]
    latency_ms: Optional[int]
    cache_hit: bool = False


class OrchestrationPhase(Enum):
    IDLE = "idle"
    DETECTING = "detecting"
    RESOLVING = "resolving"
    CACHE_CHECK = "cache_check"
    TRANSLATING = "translating"
    SETTLED = "settled"
    ERROR = "error"


class TranslationBackend(ABC):
    """Contract shared by the baseline and accelerated inference engines."""

    kind: EngineKind

    @abstractmethod
    async def detect_language(self, text: str) -> str:
        """Return the catalog tag of the language ``text`` is written in."""
        pass

    @abstractmethod
    async def translate(self, request: TranslationRequest) -> str:
        """Translate text between two concrete languages."""
        pass

    @abstractmethod
    async def improve_text(self, text: str, language: str) -> str:
        """Rewrite text in the same language to read more naturally."""
        pass

    @abstractmethod
    async def check_health(self) -> bool:
        """Probe the engine. Must not raise."""
        pass

    async def close(self) -> None:
        """Release transport resources."""
        return None


class HistorySink(ABC):
    """External collaborator that records settled translations."""

    @abstractmethod
    async def append_history(self, entry: HistoryEntry) -> None:
        pass


class ClipboardProvider(ABC):
    """Clipboard read/write primitives used by trigger adapters and copy actions."""

    @abstractmethod
    async def get_text(self) -> str:
        pass

    @abstractmethod
    async def set_text(self, text: str) -> None:
        pass
