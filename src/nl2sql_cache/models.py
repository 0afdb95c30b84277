from dataclasses import dataclass


@dataclass
class PerformanceMetrics:
    """Track performance metrics for cache lookups."""

    total_lookups: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    provider_failures: int = 0
    total_lookup_time_ms: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_lookups == 0:
            return 0.0
        return self.cache_hits / self.total_lookups

    @property
    def avg_lookup_time_ms(self) -> float:
        """Calculate average lookup time."""
        if self.total_lookups == 0:
            return 0.0
        return self.total_lookup_time_ms / self.total_lookups

    def record_hit(self, lookup_time_ms: float) -> None:
        """Record a cache hit."""
        self.total_lookups += 1
        self.cache_hits += 1
        self.total_lookup_time_ms += lookup_time_ms

    def record_miss(self, lookup_time_ms: float) -> None:
        """Record a cache miss."""
        self.total_lookups += 1
        self.cache_misses += 1
        self.total_lookup_time_ms += lookup_time_ms

    def record_provider_failure(self) -> None:
        """Record an embedding call that failed (lookup or insert)."""
        self.provider_failures += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_lookups": self.total_lookups,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "provider_failures": self.provider_failures,
            "hit_rate": self.hit_rate,
            "avg_lookup_time_ms": self.avg_lookup_time_ms,
        }
