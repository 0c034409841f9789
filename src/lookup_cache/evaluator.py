"""
Evaluation utilities for the semantic cache.

This module provides tools for tuning the minimum similarity threshold
against labelled query pairs.
"""

import time
from dataclasses import dataclass

import numpy as np

from lookup_cache.logging import get_logger
from lookup_cache.services import SemanticCacheService
from lookup_cache.utils import content_hash

logger = get_logger(__name__)

METRICS = ("f1_score", "precision", "recall", "hit_rate")


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator else 0.0


@dataclass
class EvalResult:
    """Confusion counts for one threshold.

    A hit on a pair that should match is a true positive; a hit on a pair
    that should not is a false positive. Misses split the same way.
    """

    threshold: float
    true_positives: int = 0
    false_positives: int = 0
    true_negatives: int = 0
    false_negatives: int = 0
    avg_lookup_time_ms: float = 0.0

    @property
    def cache_hits(self) -> int:
        return self.true_positives + self.false_positives

    @property
    def cache_misses(self) -> int:
        return self.true_negatives + self.false_negatives

    @property
    def total_queries(self) -> int:
        return self.cache_hits + self.cache_misses

    @property
    def hit_rate(self) -> float:
        return _ratio(self.cache_hits, self.total_queries)

    @property
    def precision(self) -> float:
        return _ratio(self.true_positives, self.cache_hits)

    @property
    def recall(self) -> float:
        return _ratio(self.true_positives, self.true_positives + self.false_negatives)

    @property
    def f1_score(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if p + r else 0.0

    def record(self, hit: bool, should_match: bool) -> None:
        """Count one lookup outcome."""
        if hit and should_match:
            self.true_positives += 1
        elif hit:
            self.false_positives += 1
        elif should_match:
            self.false_negatives += 1
        else:
            self.true_negatives += 1

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "threshold": self.threshold,
            "total_queries": self.total_queries,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "avg_lookup_time_ms": self.avg_lookup_time_ms,
            **{metric: getattr(self, metric) for metric in METRICS},
        }


@dataclass
class QueryPair:
    """A pair of queries with their expected match relationship."""

    query: str
    cached_query: str
    should_match: bool  # True if semantically similar, False if different


class CacheEvaluator:
    """Evaluator for semantic cache thresholds.

    Each cached query lives under a partition key derived from its own
    content, so a query can only hit the cached query it is paired with, and
    any number of pair lists can be evaluated against one cache.
    """

    KEY_PREFIX = "eval-pair"

    def __init__(self, cache: SemanticCacheService) -> None:
        """
        Initialize the evaluator.

        Args:
            cache: The SemanticCacheService to evaluate. Use a dedicated
                instance; the evaluator pushes items into it.
        """
        self.cache = cache
        self.results: list[EvalResult] = []

    def _key(self, pair: QueryPair) -> str:
        return f"{self.KEY_PREFIX}-{content_hash(pair.cached_query):016x}"

    def _store_cached_queries(self, test_queries: list[QueryPair]) -> None:
        """Push every cached query not stored yet; the store cannot be cleared."""
        for pair in test_queries:
            key = self._key(pair)
            if key in self.cache.store:
                continue
            item = self.cache.fingerprint(key, pair.cached_query)
            item.output = f"Response for: {pair.cached_query}"
            self.cache.push(item)

    def evaluate_threshold(
        self,
        threshold: float,
        test_queries: list[QueryPair],
    ) -> EvalResult:
        """
        Evaluate cache performance at a specific threshold.

        Args:
            threshold: The minimum cosine similarity to test.
            test_queries: List of QueryPair objects to test.

        Returns:
            EvalResult with metrics for this threshold.
        """
        result = EvalResult(threshold=threshold)
        total_lookup_time = 0.0

        self._store_cached_queries(test_queries)

        for pair in test_queries:
            start_time = time.time()
            item = self.cache(self._key(pair), pair.query, min_similarity=threshold)
            total_lookup_time += (time.time() - start_time) * 1000
            result.record(item.is_valid(), pair.should_match)

        if test_queries:
            result.avg_lookup_time_ms = total_lookup_time / len(test_queries)

        self.results.append(result)
        return result

    def sweep_thresholds(
        self,
        test_queries: list[QueryPair],
        min_threshold: float = 0.80,
        max_threshold: float = 0.99,
        steps: int = 10,
    ) -> list[EvalResult]:
        """
        Sweep across multiple threshold values to find optimal.

        Args:
            test_queries: List of QueryPair objects to test.
            min_threshold: Minimum threshold to test.
            max_threshold: Maximum threshold to test.
            steps: Number of threshold steps to test.

        Returns:
            List of EvalResult for each threshold tested.
        """
        self.results = []

        for threshold in np.linspace(min_threshold, max_threshold, steps):
            result = self.evaluate_threshold(float(threshold), test_queries)
            logger.info(
                "Threshold %.3f: hit rate %.2f%%, precision %.2f%%, F1 %.2f%%",
                threshold,
                result.hit_rate * 100,
                result.precision * 100,
                result.f1_score * 100,
            )

        return self.results

    def find_optimal_threshold(
        self,
        metric: str = "f1_score",
    ) -> tuple[float, EvalResult]:
        """
        Find the optimal threshold based on a metric.

        Args:
            metric: Metric to optimize ('f1_score', 'precision', 'recall', 'hit_rate').

        Returns:
            Tuple of (threshold, result) for the optimal threshold.
        """
        if not self.results:
            raise ValueError("No evaluation results available. Run sweep_thresholds first.")

        best_result = max(self.results, key=lambda r: getattr(r, metric))
        return best_result.threshold, best_result

    def format_summary(self) -> str:
        """Render all evaluation results as a table followed by the best thresholds."""
        if not self.results:
            return "No evaluation results available."

        rule = "=" * 64
        lines = [
            rule,
            "Cache Evaluation Summary",
            rule,
            f"{'Threshold':<12} {'Hit Rate':<12} {'Precision':<12} {'Recall':<12} {'F1 Score':<12}",
            "-" * 64,
        ]
        for r in self.results:
            lines.append(
                f"{r.threshold:<12.3f} {r.hit_rate:<12.2%} {r.precision:<12.2%} "
                f"{r.recall:<12.2%} {r.f1_score:<12.2%}"
            )
        lines.append(rule)
        for metric in METRICS:
            threshold, best = self.find_optimal_threshold(metric)
            lines.append(f"Best {metric}: {threshold:.3f} ({getattr(best, metric):.2%})")
        return "\n".join(lines)

    def log_summary(self) -> None:
        """Log the summary table at INFO level."""
        logger.info("\n%s", self.format_summary())
