"""Lookup Cache - exact and semantic caching for expensive computations.

Results are cached per partition key (e.g. model name and settings) and
found again either by an exact input hash or by cosine similarity of
input embeddings.

Layers:
    - protocols: Interface contracts (EmbeddingProvider, MatchStrategy)
    - repositories: Item store and embedding providers
    - services: Cache lookups and matching strategies
    - middleware: httpx transport that caches API calls
    - handlers / api / dto: HTTP service

Usage:
    ```python
    from lookup_cache import HashCacheService

    cache = HashCacheService.create()
    item = cache("gpt-4o", "What is the meaning of life?")
    if not item.is_valid():
        item.output = expensive_call()
        cache.push(item)
    ```
"""

from lookup_cache.config import get_settings, settings
from lookup_cache.entities import CachedItem, Match
from lookup_cache.exceptions import (
    CacheIntegrityError,
    ConfigError,
    EmbeddingUnavailableError,
    InvalidItemError,
    LookupCacheError,
)
from lookup_cache.middleware import CachingTransport
from lookup_cache.protocols import EmbeddingProvider, EmbeddingResult, MatchStrategy
from lookup_cache.repositories import ItemStore, OllamaEmbeddingProvider
from lookup_cache.services import (
    CacheRouter,
    HashCacheService,
    SemanticCacheService,
)

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    # Protocols (interfaces)
    "EmbeddingProvider",
    "EmbeddingResult",
    "MatchStrategy",
    # Services
    "HashCacheService",
    "SemanticCacheService",
    "CacheRouter",
    # Repositories
    "ItemStore",
    "OllamaEmbeddingProvider",
    # Middleware
    "CachingTransport",
    # Entities
    "CachedItem",
    "Match",
    # Errors
    "LookupCacheError",
    "ConfigError",
    "EmbeddingUnavailableError",
    "CacheIntegrityError",
    "InvalidItemError",
]
