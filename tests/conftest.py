"""Shared fixtures: a deterministic embedding provider and cache instances."""

import hashlib
import logging
import math

import numpy as np
import pytest

from lookup_cache.exceptions import EmbeddingUnavailableError
from lookup_cache.logging import PACKAGE_LOGGER
from lookup_cache.protocols import EmbeddingResult
from lookup_cache.services import CacheRouter, HashCacheService, SemanticCacheService

DIMENSION = 64


def unit(index: int) -> np.ndarray:
    vector = np.zeros(DIMENSION, dtype=np.float32)
    vector[index] = 1.0
    return vector


def at_similarity(similarity: float) -> np.ndarray:
    """A unit vector whose dot product with unit(0) is ``similarity``."""
    vector = similarity * unit(0) + math.sqrt(1.0 - similarity**2) * unit(1)
    return vector.astype(np.float32)


class FakeEmbeddingProvider:
    """Embedding provider with fixed vectors for known texts.

    Unknown texts get a seeded random vector, so unrelated texts are
    nearly orthogonal and the same text always embeds the same way.
    """

    def __init__(self, vectors: dict[str, np.ndarray] | None = None) -> None:
        self.vectors = dict(vectors or {})
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return DIMENSION

    @property
    def model_name(self) -> str:
        return "fake-embedder"

    def embed(self, text: str) -> EmbeddingResult:
        self.calls.append(text)
        if text in self.vectors:
            # Scaled on purpose: the cache must normalize
            return EmbeddingResult(vector=3.0 * self.vectors[text], elapsed=0.001)
        seed = int.from_bytes(hashlib.sha256(text.encode()).digest()[:4], "big")
        vector = np.random.default_rng(seed).normal(size=DIMENSION).astype(np.float32)
        return EmbeddingResult(vector=vector, elapsed=0.001)

    def is_available(self) -> bool:
        return True


class BrokenEmbeddingProvider(FakeEmbeddingProvider):
    """Embedding provider that is always down."""

    def embed(self, text: str) -> EmbeddingResult:
        raise EmbeddingUnavailableError("Embedding backend is down")

    def is_available(self) -> bool:
        return False


@pytest.fixture
def lookup_caplog(caplog):
    """caplog wired to the package logger, which does not propagate."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.addHandler(caplog.handler)
    yield caplog
    logger.removeHandler(caplog.handler)


@pytest.fixture
def embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider(
        {
            "How is it going?": unit(0),
            "How is it goin'?": at_similarity(0.944),
            "How are things?": at_similarity(0.90),
        }
    )


@pytest.fixture
def hash_cache() -> HashCacheService:
    return HashCacheService.create(verbose=0)


@pytest.fixture
def semantic_cache(embedder: FakeEmbeddingProvider) -> SemanticCacheService:
    return SemanticCacheService.create(embedding_provider=embedder, verbose=0)


@pytest.fixture
def router(hash_cache: HashCacheService, semantic_cache: SemanticCacheService) -> CacheRouter:
    return CacheRouter(hash_cache=hash_cache, semantic_cache=semantic_cache, char_limit=50)
