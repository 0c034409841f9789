"""HTTP client middleware backed by the cache."""

from .transport import CachedResponse, CachingTransport, extract_input

__all__ = [
    "CachedResponse",
    "CachingTransport",
    "extract_input",
]
