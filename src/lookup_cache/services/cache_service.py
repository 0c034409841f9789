"""Cache services: the callable entry points of the cache.

A service looks up a partition key, fingerprints the input, lets its
matching strategy pick the best candidate and applies the threshold. It
never writes: on a miss the caller computes the result, sets ``output`` on
the returned item and pushes it.
"""

from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from lookup_cache.config import settings
from lookup_cache.entities import CachedItem, Match
from lookup_cache.logging import get_logger
from lookup_cache.protocols import EmbeddingProvider, MatchStrategy
from lookup_cache.repositories import ItemStore
from lookup_cache.utils import content_hash, normalize

from .matching import ExactMatchStrategy, FuzzyMatchStrategy

logger = get_logger(__name__)


class CacheService(ABC):
    """Shared lookup logic for the hash and semantic caches.

    Subclasses set ``strategy`` and implement ``fingerprint``.

    Example:
        ```python
        cache = HashCacheService.create()

        item = cache("gpt-4o|temperature=0", prompt)
        if not item.is_valid():
            item.output = call_the_api(prompt)
            cache.push(item)
        ```
    """

    strategy: MatchStrategy

    def __init__(
        self,
        store: ItemStore | None = None,
        min_similarity: float | None = None,
        verbose: int | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            store: Item store to read from and push to. Defaults to a new one.
            min_similarity: Default threshold for hits.
            verbose: Default verbosity (0 silent, 1 hit/miss, 2 details).
                Defaults to settings.verbosity.
        """
        self._store = store if store is not None else ItemStore()
        self._threshold = min_similarity
        self._verbose = settings.verbosity if verbose is None else verbose

    @abstractmethod
    def fingerprint(self, key: str, text: str, verbose: int | None = None) -> CachedItem[Any]:
        """Build a miss token for ``text`` under ``key`` without looking anything up."""

    @abstractmethod
    def _query(self, item: CachedItem[Any]) -> Any:
        """The value handed to the strategy for a fingerprinted item."""

    def _log_result(self, match: Match, hit: bool) -> None:
        status = "Match found" if hit else "No cache match found"
        logger.info("%s (max. sim: %.3f)", status, match.score)

    def __call__(
        self,
        key: str,
        text: str,
        verbose: int | None = None,
        min_similarity: float | None = None,
    ) -> CachedItem[Any]:
        """Look up ``text`` among the items stored under ``key``.

        Args:
            key: Partition key, must match exactly
            text: Raw input to fingerprint and compare
            verbose: Verbosity for this call. Only affects logging.
            min_similarity: Threshold for this call. Not validated: values
                above 1 never hit, values below -1 always hit.

        Returns:
            A new CachedItem with the query's fingerprint. On a hit ``output``
            holds the cached result; on a miss it is None.
        """
        verbose = self._verbose if verbose is None else verbose
        threshold = self._threshold if min_similarity is None else min_similarity

        candidates = self._store.get(key)
        if verbose >= 2:
            logger.info("Candidates for %s: %d items", key, len(candidates))

        item = self.fingerprint(key, text, verbose=verbose)
        if not candidates:
            if verbose >= 1:
                logger.info("No cache match found (no candidates)")
            return item

        snapshot = self._store.snapshot_candidates(key)
        match = self.strategy.find_best(snapshot.items, snapshot.positions, self._query(item))
        hit = match.found and match.score >= threshold
        if verbose >= 1:
            self._log_result(match, hit)

        if hit:
            item.output = snapshot.items[match.position].output
        return item

    def push(self, item: CachedItem[Any]) -> int:
        """Store a computed item.

        Args:
            item: An item whose ``output`` has been set

        Returns:
            The position of the item in the store

        Raises:
            InvalidItemError: If ``output`` is still None
        """
        return self._store.append(item)

    def get(self, key: str, default: tuple[int, ...] = ()) -> tuple[int, ...]:
        """Positions stored under ``key``, ``default`` if unknown."""
        return self._store.get(key, default)

    def __getitem__(self, key: str) -> tuple[int, ...]:
        """Positions stored under ``key``; raises KeyError if unknown."""
        return self._store[key]

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"{type(self).__name__} with {len(self)} items"

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        return {
            "total_entries": len(self._store),
            "partitions": self._store.partition_sizes(),
            "min_similarity": self._threshold,
        }

    @property
    def threshold(self) -> float:
        """Get the default similarity threshold."""
        return self._threshold

    @property
    def store(self) -> ItemStore:
        """Get the underlying item store."""
        return self._store


class HashCacheService(CacheService):
    """Cache that only hits when the input hash matches exactly.

    Useful for long inputs that cannot be embedded quickly. The exact
    strategy scores 1.0 on a match, so the default threshold is 1.0.
    """

    def __init__(
        self,
        store: ItemStore | None = None,
        min_similarity: float | None = None,
        verbose: int | None = None,
    ) -> None:
        super().__init__(
            store=store,
            min_similarity=(
                settings.exact_min_similarity if min_similarity is None else min_similarity
            ),
            verbose=verbose,
        )
        self.strategy = ExactMatchStrategy()

    @classmethod
    def create(
        cls,
        store: ItemStore | None = None,
        verbose: int | None = None,
    ) -> "HashCacheService":
        """Factory method to create HashCacheService with sensible defaults."""
        return cls(store=store, verbose=verbose)

    def fingerprint(self, key: str, text: str, verbose: int | None = None) -> CachedItem[Any]:
        return CachedItem(key=key, input_hash=content_hash(text))

    def _query(self, item: CachedItem[Any]) -> int:
        return item.input_hash

    def _log_result(self, match: Match, hit: bool) -> None:
        logger.info("Match found" if hit else "No cache match found")


class SemanticCacheService(CacheService):
    """Cache that hits on the most similar input above a cosine threshold.

    The embedding provider is passed in explicitly; there is no
    process-wide embedder.

    Example:
        ```python
        cache = SemanticCacheService.create(
            embedding_provider=OllamaEmbeddingProvider.create(),
        )

        item = cache("text-embedding-3-small", "How is it going?")
        ```
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        store: ItemStore | None = None,
        min_similarity: float | None = None,
        verbose: int | None = None,
    ) -> None:
        """Initialize the semantic cache.

        Args:
            embedding_provider: Embedding generation service (required).
            store: Item store. Defaults to a new one.
            min_similarity: Minimum cosine similarity for hits. Defaults to settings.
            verbose: Default verbosity. Defaults to settings.
        """
        super().__init__(
            store=store,
            min_similarity=settings.min_similarity if min_similarity is None else min_similarity,
            verbose=verbose,
        )
        self._embeddings = embedding_provider
        self.strategy = FuzzyMatchStrategy()

    @classmethod
    def create(
        cls,
        embedding_provider: EmbeddingProvider,
        store: ItemStore | None = None,
        min_similarity: float | None = None,
        verbose: int | None = None,
    ) -> "SemanticCacheService":
        """Factory method to create SemanticCacheService with sensible defaults.

        Args:
            embedding_provider: Embedding generation service (required).
            store: Item store. If None, a new in-memory store.
            min_similarity: Threshold for hits. If None, uses settings.
            verbose: Default verbosity. If None, uses settings.

        Returns:
            Configured SemanticCacheService instance
        """
        return cls(
            embedding_provider=embedding_provider,
            store=store,
            min_similarity=min_similarity,
            verbose=verbose,
        )

    def embed(self, text: str, verbose: int | None = None) -> np.ndarray:
        """Embed ``text`` with the provider and normalize it.

        Raises:
            EmbeddingUnavailableError: If the provider fails
        """
        verbose = self._verbose if verbose is None else verbose
        result = self._embeddings.embed(text)
        if verbose >= 2:
            logger.info("Embedding computed in %.3fs", result.elapsed)
        return normalize(result.vector)

    def fingerprint(self, key: str, text: str, verbose: int | None = None) -> CachedItem[Any]:
        return CachedItem(
            key=key,
            input_hash=content_hash(text),
            embedding=self.embed(text, verbose=verbose),
        )

    def _query(self, item: CachedItem[Any]) -> np.ndarray:
        return item.embedding

    def get_stats(self) -> dict:
        stats = super().get_stats()
        stats["embedding_model"] = self._embeddings.model_name
        stats["embedding_dimension"] = self._embeddings.dimension
        return stats

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Get the underlying embedding provider (for testing)."""
        return self._embeddings
