"""Repository layer for data access.

This layer holds the item store and the embedding providers. Providers
satisfy the EmbeddingProvider protocol structurally, not by inheritance.
"""

from lookup_cache.protocols import EmbeddingProvider

from .item_store import ItemStore, ItemsView, Snapshot
from .ollama_embedding_provider import OllamaEmbeddingProvider

__all__ = [
    "EmbeddingProvider",
    "ItemStore",
    "ItemsView",
    "Snapshot",
    "OllamaEmbeddingProvider",
]
