"""
Result cache keyed by document content hash.

The cache is an explicit collaborator handed to the orchestrator; nothing in
the analysis code reaches for a global cache.
"""
import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Protocol, Tuple

from pdfqc.core.constants import CACHE_KEY_PREFIX

logger = logging.getLogger(__name__)


class ResultCache(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def clear(self) -> None:
        ...


def make_cache_key(content_hash: str, analysis: str, variant: str = "") -> str:
    """Cache key for one analysis of one document, e.g. ``pdf:<sha256>:visual:<thresholds>``."""
    key = f"{CACHE_KEY_PREFIX}:{content_hash}:{analysis}"
    return f"{key}:{variant}" if variant else key


class InMemoryTTLCache:
    """Thread-safe LRU cache whose entries expire ``ttl_seconds`` after being stored."""

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None

            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + self.ttl_seconds, value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Cache full, evicted: {evicted}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
