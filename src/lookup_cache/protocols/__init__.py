"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Ollama -> sentence-transformers, hash -> cosine)
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .embedding_provider import EmbeddingProvider, EmbeddingResult
from .match_strategy import MatchStrategy

__all__ = [
    "EmbeddingProvider",
    "EmbeddingResult",
    "MatchStrategy",
]
