"""Local sentence-transformers embedding provider.

Runs a sentence-transformers model in-process. No API calls required.
Texts longer than the model's ``max_seq_length`` are split on token
boundaries instead of being truncated, and the chunk vectors are averaged.
"""

import threading
import time

import numpy as np
from sentence_transformers import SentenceTransformer

from lookup_cache.config import settings
from lookup_cache.exceptions import EmbeddingUnavailableError
from lookup_cache.logging import get_logger
from lookup_cache.protocols import EmbeddingResult

logger = get_logger(__name__)


class LocalEmbeddingProvider:
    """Local sentence-transformers implementation of EmbeddingProvider.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, model_name: str | None = None, batch_size: int = 32) -> None:
        """Initialize the local embedding provider.

        Args:
            model_name: Name of the sentence-transformers model.
                       Defaults to settings.embedding_model.
            batch_size: Batch size used when a text is split into chunks.
        """
        self._model_name = model_name or settings.embedding_model
        self._batch_size = batch_size
        self._model: SentenceTransformer | None = None
        self._dimension: int | None = None
        self._load_lock = threading.Lock()

    @classmethod
    def create(cls, model_name: str | None = None) -> "LocalEmbeddingProvider":
        """Factory method to create LocalEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.

        Returns:
            Configured LocalEmbeddingProvider
        """
        return cls(model_name=model_name)

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the embedding model (once, even with concurrent callers)."""
        if self._model is None:
            with self._load_lock:
                if self._model is None:
                    logger.info("Loading embedding model: %s", self._model_name)
                    start_time = time.time()
                    self._model = SentenceTransformer(self._model_name)
                    logger.info("Model loaded in %.2fs", time.time() - start_time)
        return self._model

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        if self._dimension is None:
            # Get dimension by encoding a sample
            sample_embedding = self.model.encode(["test"], show_progress_bar=False)
            self._dimension = len(sample_embedding[0])
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    def _chunk(self, text: str) -> list[str]:
        """Split ``text`` into pieces that fit the model window."""
        tokenizer = self.model.tokenizer
        window = self.model.max_seq_length - 2  # room for [CLS]/[SEP]
        token_ids = tokenizer(text, add_special_tokens=False)["input_ids"]
        if len(token_ids) <= window:
            return [text]
        return [
            tokenizer.decode(token_ids[start : start + window])
            for start in range(0, len(token_ids), window)
        ]

    def embed(self, text: str) -> EmbeddingResult:
        """Generate the embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            EmbeddingResult with the chunk-averaged vector and elapsed seconds

        Raises:
            EmbeddingUnavailableError: If the model cannot be loaded or run
        """
        start_time = time.perf_counter()
        try:
            chunks = self._chunk(text)
            embeddings = self.model.encode(
                chunks,
                batch_size=self._batch_size,
                show_progress_bar=False,
                normalize_embeddings=True,
            )
        except Exception as e:
            raise EmbeddingUnavailableError(
                "Local embedding failed", details={"model": self._model_name}, cause=e
            ) from e

        vector = np.asarray(embeddings, dtype=np.float32).mean(axis=0)
        return EmbeddingResult(vector=vector, elapsed=time.perf_counter() - start_time)

    def is_available(self) -> bool:
        """Check if the embedding provider is available.

        Returns:
            True if the model can be loaded, False otherwise
        """
        try:
            _ = self.model
            return True
        except Exception:
            return False
