"""Embedding provider protocol.

Defines the interface for any embedding service that can turn text into a
vector. The semantic cache only relies on this protocol, so the model can be
local (sentence-transformers), served (Ollama) or a test double.

Inputs longer than the model's window are the provider's business: split
them into chunks, embed each and average the chunk vectors elementwise. The
cache normalizes whatever comes back.
"""

from typing import NamedTuple, Protocol, runtime_checkable

import numpy as np


class EmbeddingResult(NamedTuple):
    """Output of a single ``embed`` call.

    Attributes:
        vector: The (not necessarily normalized) float32 embedding
        elapsed: Wall time spent embedding, in seconds
    """

    vector: np.ndarray
    elapsed: float


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation services.

    Any type that implements these members satisfies the protocol, no
    explicit inheritance needed.

    Example:
        ```python
        provider: EmbeddingProvider = LocalEmbeddingProvider()
        provider: EmbeddingProvider = OllamaEmbeddingProvider(...)
        ```
    """

    @property
    def dimension(self) -> int:
        """Return the dimension of the embedding vectors."""
        ...

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    def embed(self, text: str) -> EmbeddingResult:
        """Embed a single text, chunking and averaging long inputs.

        Args:
            text: The text to encode

        Returns:
            EmbeddingResult with the vector and the time it took

        Raises:
            EmbeddingUnavailableError: If the model cannot produce an embedding
        """
        ...

    def is_available(self) -> bool:
        """Check if the embedding provider is available."""
        ...
