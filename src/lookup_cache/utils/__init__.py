"""Utility modules for lookup-cache."""

from .hashing import content_hash, normalize

__all__ = [
    "content_hash",
    "normalize",
]
