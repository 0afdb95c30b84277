"""Redis implementation of CacheStorage.

Stores the same JSON snapshot the file backend writes, as a single Redis
string, next to a companion key holding the write time in nanoseconds. Lets
several API replicas on different hosts share one cache.
"""

import logging
import time

import redis

from nl2sql_cache.config import get_redis_client, settings
from nl2sql_cache.entities import CacheEntryEntity
from nl2sql_cache.exceptions import PersistenceError

from .snapshot import dump_entries, load_entries

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis snapshot storage.

    This class satisfies the CacheStorage protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key: str | None = None,
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key: Redis key holding the snapshot. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._key = key or settings.semantic_cache_redis_key
        self._mtime_key = f"{self._key}:mtime"

    @classmethod
    def create(cls, key: str | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults."""
        return cls(key=key)

    @property
    def location(self) -> str:
        return f"redis://{self._key}"

    def load(self) -> list[CacheEntryEntity]:
        try:
            raw = self._client.get(self._key)
        except redis.RedisError as e:
            raise PersistenceError(f"Failed to read cache snapshot from Redis: {e}") from e
        if raw is None:
            return []
        return load_entries(raw, self.location)  # type: ignore[arg-type]

    def save(self, entries: list[CacheEntryEntity]) -> None:
        pipe = self._client.pipeline()
        pipe.set(self._key, dump_entries(entries))
        pipe.set(self._mtime_key, str(time.time_ns()))
        try:
            pipe.execute()
        except redis.RedisError as e:
            raise PersistenceError(f"Failed to write cache snapshot to Redis: {e}") from e

    def last_modified(self) -> int | None:
        try:
            raw = self._client.get(self._mtime_key)
        except redis.RedisError as e:
            logger.warning("Could not read cache mtime from Redis: %s", e)
            return None
        if raw is None:
            return None
        try:
            return int(raw)  # type: ignore[arg-type]
        except ValueError:
            logger.warning("Ignoring corrupt cache mtime %r at %s", raw, self._mtime_key)
            return None

    def health_check(self) -> bool:
        """Check if Redis is accessible."""
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
