import threading
from dataclasses import dataclass, field


@dataclass
class PerformanceMetrics:
    """Track performance metrics for cache lookups.

    Safe to update from several request threads at once.
    """

    total_queries: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    total_lookup_time_ms: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_queries == 0:
            return 0.0
        return self.cache_hits / self.total_queries

    @property
    def avg_lookup_time_ms(self) -> float:
        """Calculate average lookup time."""
        if self.total_queries == 0:
            return 0.0
        return self.total_lookup_time_ms / self.total_queries

    def record_hit(self, lookup_time_ms: float) -> None:
        """Record a cache hit."""
        with self._lock:
            self.total_queries += 1
            self.cache_hits += 1
            self.total_lookup_time_ms += lookup_time_ms

    def record_miss(self, lookup_time_ms: float) -> None:
        """Record a cache miss."""
        with self._lock:
            self.total_queries += 1
            self.cache_misses += 1
            self.total_lookup_time_ms += lookup_time_ms

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        with self._lock:
            return {
                "total_queries": self.total_queries,
                "cache_hits": self.cache_hits,
                "cache_misses": self.cache_misses,
                "hit_rate": self.hit_rate,
                "avg_lookup_time_ms": self.avg_lookup_time_ms,
            }
