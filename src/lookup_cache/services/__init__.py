"""Service layer for business logic.

This layer contains the cache lookup logic and the matching strategies.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler / Middleware -> Service -> Repository
    (HTTP)               -> (Lookup) -> (Store, Embeddings)

Usage:
    ```python
    from lookup_cache.services import HashCacheService, SemanticCacheService

    hash_cache = HashCacheService.create()
    semantic_cache = SemanticCacheService.create(embedding_provider=provider)
    ```
"""

from .cache_service import CacheService, HashCacheService, SemanticCacheService
from .matching import ExactMatchStrategy, FuzzyMatchStrategy
from .router import CacheMode, CacheRouter

__all__ = [
    "CacheMode",
    "CacheRouter",
    "CacheService",
    "HashCacheService",
    "SemanticCacheService",
    "ExactMatchStrategy",
    "FuzzyMatchStrategy",
]
