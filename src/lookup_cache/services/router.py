"""Pick the hash or the semantic cache for an input."""

from typing import Literal

from lookup_cache.config import settings

from .cache_service import CacheService, HashCacheService, SemanticCacheService

CacheMode = Literal["exact", "semantic", "auto"]


class CacheRouter:
    """Holds one cache of each kind and chooses between them.

    In ``auto`` mode, inputs longer than ``char_limit`` go to the hash cache
    because embedding them is slow; everything else goes to the semantic
    cache.
    """

    def __init__(
        self,
        hash_cache: HashCacheService,
        semantic_cache: SemanticCacheService,
        char_limit: int | None = None,
    ) -> None:
        self.hash_cache = hash_cache
        self.semantic_cache = semantic_cache
        self.char_limit = settings.hash_cache_char_limit if char_limit is None else char_limit

    def resolve(self, text: str, mode: CacheMode = "auto") -> Literal["exact", "semantic"]:
        """Resolve ``auto`` into a concrete mode for ``text``."""
        if mode == "auto":
            return "exact" if len(text) > self.char_limit else "semantic"
        return mode

    def select(self, text: str, mode: CacheMode = "auto") -> CacheService:
        """Return the cache that should handle ``text``."""
        if self.resolve(text, mode) == "exact":
            return self.hash_cache
        return self.semantic_cache
