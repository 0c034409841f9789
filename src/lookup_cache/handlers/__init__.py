"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Lookup) -> (Store, Embeddings)
"""

from .cache_handler import CacheHandler

__all__ = [
    "CacheHandler",
]
