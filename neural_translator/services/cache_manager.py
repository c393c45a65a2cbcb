"""
In-memory translation cache keyed by text and resolved language pair.
"""

from collections import OrderedDict
from typing import Any, Dict, Optional

from neural_translator.config.config import config
from neural_translator.models.interfaces import ResolvedPair
from neural_translator.utils.exceptions import CacheError
from neural_translator.utils.logging import cache_logger as logger


class TranslationCache:
    """Bounded FIFO cache of finished translations.

    Entries are evicted strictly in insertion order once ``capacity`` is
    reached; reads never reorder entries. The cache lives for the lifetime
    of the process and is only touched from the event loop thread.
    """

    def __init__(self, capacity: int = None, delimiter: str = None):
        self.capacity = capacity if capacity is not None else config.orchestration.cache_capacity
        self.delimiter = delimiter if delimiter is not None else config.orchestration.cache_key_delimiter
        if self.capacity <= 0:
            raise CacheError("Cache capacity must be positive")
        self._entries: "OrderedDict[str, str]" = OrderedDict()

        self.stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0,
            "writes": 0
        }

    def fingerprint(self, text: str, pair: ResolvedPair) -> str:
        """Build the composite key for ``text`` under ``pair``."""
        return self.delimiter.join((text, pair.effective_from, pair.effective_to))

    def get(self, key: str) -> Optional[str]:
        value = self._entries.get(key)
        if value is None:
            self.stats["misses"] += 1
            return None
        self.stats["hits"] += 1
        return value

    def put(self, key: str, value: str) -> None:
        if key in self._entries:
            # Same key replaces the value and keeps its original position
            self._entries[key] = value
            return

        if len(self._entries) >= self.capacity:
            evicted_key, _ = self._entries.popitem(last=False)
            self.stats["evictions"] += 1
            logger.debug(
                "Evicted oldest cache entry",
                event="cache_eviction",
                metadata={"key_prefix": evicted_key[:16]}
            )

        self._entries[key] = value
        self.stats["writes"] += 1

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache performance statistics."""
        lookups = self.stats["hits"] + self.stats["misses"]
        return {
            **self.stats,
            "size": len(self._entries),
            "capacity": self.capacity,
            "hit_ratio": self.stats["hits"] / lookups if lookups else 0.0
        }
