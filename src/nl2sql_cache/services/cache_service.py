"""Semantic cache service.

Keeps question → SQL mappings in memory, answers lookups by exact cosine
similarity over every stored embedding, and flushes the whole entry list to
a CacheStorage backend after each change.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from nl2sql_cache.config import settings
from nl2sql_cache.entities import CacheEntryEntity
from nl2sql_cache.exceptions import PersistenceError
from nl2sql_cache.models import PerformanceMetrics
from nl2sql_cache.protocols import CacheStorage, EmbeddingProvider
from nl2sql_cache.utils import cosine_similarity

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class SemanticCacheService:
    """Process-wide semantic cache for generated SQL.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStorage: a local JSON file, a Redis key, etc.
    - EmbeddingProvider: Ollama, a hosted API, a test fake, etc.

    Construct one instance at startup and hand it to every request handler.

    Failure policy: embedding or storage errors never reach the caller. A
    lookup that cannot embed its question is a miss; an insert that cannot
    embed is dropped; a failed write keeps the in-memory change.

    Example:
        ```python
        cache = SemanticCacheService.create(
            storage=JsonFileCacheRepository.create(),
            embedding_provider=OllamaEmbeddingProvider.create(),
        )

        sql = await cache.find_similar("show top 10 users")
        if sql is None:
            sql = await generate(...)
            await cache.cache_result("show top 10 users", sql)
        ```
    """

    def __init__(
        self,
        storage: CacheStorage,
        embedding_provider: EmbeddingProvider,
        similarity_threshold: float | None = None,
        max_size: int | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize the cache and load any persisted entries.

        Args:
            storage: Snapshot storage backend (required).
            embedding_provider: Embedding generation service (required).
            similarity_threshold: Minimum cosine similarity for a hit, in (0, 1].
                Defaults to settings.
            max_size: Maximum number of entries kept. Defaults to settings.
            clock: Returns the current time in milliseconds. Defaults to wall clock.
        """
        self._storage = storage
        self._embeddings = embedding_provider
        self._threshold = (
            settings.semantic_cache_threshold if similarity_threshold is None else similarity_threshold
        )
        self._max_size = settings.semantic_cache_max_size if max_size is None else max_size
        self._clock = clock or _now_ms

        if not 0 < self._threshold <= 1:
            raise ValueError("Similarity threshold must be in (0, 1]")
        if self._max_size <= 0:
            raise ValueError("Max size must be positive")

        self._entries: list[CacheEntryEntity] = []
        self._last_modified: int | None = None
        self._lock = asyncio.Lock()
        self._metrics = PerformanceMetrics()

        self._load()

    @classmethod
    def create(
        cls,
        storage: CacheStorage,
        embedding_provider: EmbeddingProvider,
        similarity_threshold: float | None = None,
        max_size: int | None = None,
    ) -> "SemanticCacheService":
        """Factory method to create SemanticCacheService with settings defaults."""
        return cls(
            storage=storage,
            embedding_provider=embedding_provider,
            similarity_threshold=similarity_threshold,
            max_size=max_size,
        )

    def _storage_mtime(self) -> int | None:
        try:
            return self._storage.last_modified()
        except Exception as e:
            logger.warning("Could not read cache storage modification time: %s", e)
            return None

    def _load(self) -> None:
        self._last_modified = self._storage_mtime()
        try:
            self._entries = self._storage.load()
        except PersistenceError as e:
            logger.warning("Failed to load semantic cache, starting empty: %s", e)
            self._entries = []
            return
        except Exception:
            logger.exception("Unexpected error loading semantic cache, starting empty")
            self._entries = []
            return

        if self._entries:
            logger.info("Semantic cache loaded: %d entries", len(self._entries))
        else:
            logger.info("No existing cache at %s. Starting with empty cache", self._storage.location)

    def _reload_if_modified(self) -> None:
        """Pick up writes made by other processes sharing the storage.

        Any storage error keeps the in-memory entries; the next call retries.
        """
        modified = self._storage_mtime()
        if modified is None:
            return
        if self._last_modified is not None and modified <= self._last_modified:
            return

        logger.info("Cache storage modified externally, reloading")
        try:
            self._entries = self._storage.load()
        except PersistenceError as e:
            logger.warning("Failed to reload semantic cache: %s", e)
            return
        except Exception:
            logger.exception("Unexpected error reloading semantic cache")
            return
        self._last_modified = modified
        logger.info("Cache reloaded: %d entries", len(self._entries))

    def _persist(self) -> None:
        try:
            self._storage.save(self._entries)
        except PersistenceError as e:
            logger.warning("Failed to save semantic cache, keeping in-memory state: %s", e)
            return
        except Exception:
            logger.exception("Unexpected error saving semantic cache, keeping in-memory state")
            return
        self._last_modified = self._storage_mtime()

    def _dimension_conflict(self, vector: list[float]) -> str | None:
        """Why ``vector`` cannot join the store, or None if it can."""
        if not vector:
            return "empty embedding"
        if self._entries and len(self._entries[0].embedding) != len(vector):
            return f"embedding has {len(vector)} dimensions, store has {len(self._entries[0].embedding)}"
        return None

    def _best_match(self, vector: list[float]) -> tuple[CacheEntryEntity | None, float]:
        # Strict ">" keeps the first entry in storage order on ties.
        best: CacheEntryEntity | None = None
        best_score = float("-inf")
        for entry in self._entries:
            score = cosine_similarity(vector, entry.embedding)
            if score > best_score:
                best, best_score = entry, score
        return best, best_score

    async def find_similar(self, question: str) -> str | None:
        """Return cached SQL for a semantically equivalent question.

        Business logic:
        1. Reload entries if another process changed the storage
        2. Embed the question (any failure is a miss)
        3. Score every entry by cosine similarity, keep the best
        4. Hit iff the best score is >= the threshold

        Args:
            question: The natural-language question

        Returns:
            The cached SQL, or None on a miss
        """
        start_time = time.perf_counter()
        self._reload_if_modified()
        logger.debug("Checking cache for: %r", question)

        try:
            vector = await self._embeddings.encode(question)
        except Exception as e:
            logger.warning("Embedding failed during cache lookup, treating as miss: %s", e)
            self._metrics.record_provider_failure()
            self._metrics.record_miss((time.perf_counter() - start_time) * 1000)
            return None

        best, score = self._best_match(vector)
        lookup_time_ms = (time.perf_counter() - start_time) * 1000

        if best is not None and score >= self._threshold:
            logger.info("Cache HIT (similarity %.4f) for: %r", score, question)
            self._metrics.record_hit(lookup_time_ms)
            return best.sql

        if best is not None:
            logger.info("Cache MISS (max similarity %.4f) for: %r", score, question)
        else:
            logger.info("Cache MISS (empty cache) for: %r", question)
        self._metrics.record_miss(lookup_time_ms)
        return None

    async def cache_result(self, question: str, sql: str) -> None:
        """Store a question → SQL mapping.

        Business logic:
        1. Embed the question (any failure drops the insert silently)
        2. Under the store lock, reload if stale; drop an empty embedding or
           one whose dimension differs from the stored entries
        3. Append the entry
        4. Evict the oldest entries by timestamp while over capacity
        5. Overwrite the persisted snapshot

        Args:
            question: The original natural-language question
            sql: The validated, formatted SQL
        """
        try:
            vector = await self._embeddings.encode(question)
        except Exception as e:
            logger.warning("Embedding failed, not caching %r: %s", question, e)
            self._metrics.record_provider_failure()
            return

        async with self._lock:
            self._reload_if_modified()
            conflict = self._dimension_conflict(vector)
            if conflict:
                logger.warning("Not caching %r: %s", question, conflict)
                return

            self._entries.append(
                CacheEntryEntity(question=question, embedding=vector, sql=sql, timestamp=self._clock())
            )

            if len(self._entries) > self._max_size:
                self._entries.sort(key=lambda entry: entry.timestamp)
                while len(self._entries) > self._max_size:
                    removed = self._entries.pop(0)
                    logger.info(
                        "Cache full (%d), removed oldest entry: %r", self._max_size, removed.question
                    )

            self._persist()

        logger.info("Cached new result for: %r", question)

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with entryCount, storageLocation, maxSize and threshold
        """
        return {
            "entryCount": len(self._entries),
            "storageLocation": self._storage.location,
            "maxSize": self._max_size,
            "threshold": self._threshold,
        }

    async def clear_cache(self) -> dict:
        """Remove every entry and persist the empty cache. Irreversible."""
        async with self._lock:
            self._entries = []
            self._persist()
        logger.info("Semantic cache cleared manually")
        return {"message": "Cache cleared successfully"}

    async def health_report(self) -> dict[str, bool]:
        """Check whether the storage and the embedding provider are reachable.

        Returns:
            Dictionary with cache_healthy and embedding_healthy
        """
        try:
            storage_healthy = self._storage.health_check()
        except Exception as e:
            logger.warning("Cache storage health check failed: %s", e)
            storage_healthy = False
        embeddings_healthy = await self._embeddings.is_available()
        return {"cache_healthy": storage_healthy, "embedding_healthy": embeddings_healthy}

    @property
    def entries(self) -> tuple[CacheEntryEntity, ...]:
        """Snapshot of the current entries, in storage order."""
        return tuple(self._entries)

    @property
    def metrics(self) -> PerformanceMetrics:
        return self._metrics

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def max_size(self) -> int:
        return self._max_size
