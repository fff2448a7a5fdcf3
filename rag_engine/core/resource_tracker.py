"""
Embedding cache and memory accounting.

Owned by the RAG manager and handed to the embedding provider. Vectors are
cached under the SHA-256 of their text; the memory counter grows by eight
bytes per vector component. Once the counter passes the limit, or the
cleanup interval elapses, the whole cache is dropped.

Dependencies: hashlib (stdlib)
System role: Bounded embedding cache for batched ingestion
"""

import hashlib
import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

BYTES_PER_COMPONENT = 8
BYTES_PER_MB = 1024 * 1024


class ResourceTracker:
    """Content-addressed embedding cache with a memory ceiling."""

    def __init__(
        self,
        memory_limit_mb: int = 512,
        cleanup_interval_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize tracker.

        Args:
            memory_limit_mb: Cache size that triggers a cleanup
            cleanup_interval_seconds: Maximum time between cleanups
            clock: Monotonic time source, injectable for tests
        """
        self._cache: dict[str, list[float]] = {}
        self._memory_usage = 0
        self._memory_limit = memory_limit_mb * BYTES_PER_MB
        self._interval = cleanup_interval_seconds
        self._clock = clock
        self._last_cleanup_tick = clock()
        self.last_cleanup: datetime | None = None

    @staticmethod
    def key_for(text: str) -> str:
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    @property
    def memory_usage_bytes(self) -> int:
        return self._memory_usage

    @property
    def memory_limit_bytes(self) -> int:
        return self._memory_limit

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, text: str) -> list[float] | None:
        return self._cache.get(self.key_for(text))

    def put(self, text: str, vector: list[float]) -> None:
        key = self.key_for(text)
        if key not in self._cache:
            self._memory_usage += len(vector) * BYTES_PER_COMPONENT
        self._cache[key] = vector

    def should_cleanup(self) -> bool:
        """True when usage is over the limit or the interval has elapsed."""
        if self._memory_usage > self._memory_limit:
            return True
        return self._clock() - self._last_cleanup_tick >= self._interval

    def cleanup(self) -> int:
        """
        Drop every cached vector and reset the counter.

        Returns:
            int: Number of vectors dropped
        """
        dropped = len(self._cache)
        freed = self._memory_usage
        self._cache.clear()
        self._memory_usage = 0
        self._last_cleanup_tick = self._clock()
        self.last_cleanup = datetime.now(timezone.utc)
        logger.info(f"{__name__}:cleanup - Cleared {dropped} cached embeddings ({freed} bytes)")
        return dropped

    def maybe_cleanup(self) -> bool:
        """Run cleanup() when should_cleanup() holds; returns whether it ran."""
        if self.should_cleanup():
            self.cleanup()
            return True
        return False

    def set_memory_limit(self, memory_limit_mb: int) -> None:
        if memory_limit_mb < 1:
            raise ValueError("memory_limit_mb must be at least 1")
        self._memory_limit = memory_limit_mb * BYTES_PER_MB
        logger.info(f"{__name__}:set_memory_limit - Memory limit set to {memory_limit_mb}MB")

    def stats(self) -> dict[str, Any]:
        return {
            "cached_embeddings": len(self._cache),
            "memory_usage_bytes": self._memory_usage,
            "memory_limit_bytes": self._memory_limit,
            "last_cleanup": self.last_cleanup,
        }
