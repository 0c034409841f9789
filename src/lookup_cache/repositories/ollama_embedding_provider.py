"""Ollama-based embedding provider.

Uses Ollama's local API to generate embeddings. Ollama serves models locally
without requiring HuggingFace authentication or downloading models manually.

Requirements:
    - Ollama installed: https://ollama.com
    - Model pulled: `ollama pull all-minilm`
    - Ollama running: `ollama serve` (usually runs automatically)

Long texts are cut into character windows, sent as one batch to
``/api/embed`` and averaged.

Models available:
- all-minilm (22M params, 384 dims)
- nomic-embed-text (137M params, 768 dims)
- mxbai-embed-large (335M params, 1024 dims)
- embeddinggemma (308M params, 768 dims, 2K context)
"""

import threading
import time

import httpx
import numpy as np

from lookup_cache.config import settings
from lookup_cache.exceptions import EmbeddingUnavailableError
from lookup_cache.protocols import EmbeddingResult


class OllamaEmbeddingProvider:
    """Ollama-based implementation of EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    The HTTP client is synchronous: the cache is called from worker threads,
    not from an event loop.

    Example:
        ```python
        provider = OllamaEmbeddingProvider.create(
            model_name="nomic-embed-text",
            base_url="http://localhost:11434"
        )

        result = provider.embed("Hello, world!")
        print(len(result.vector))  # 768
        ```
    """

    # Known model dimensions (for common models)
    MODEL_DIMENSIONS = {
        "embeddinggemma": 768,
        "embeddinggemma:300m": 768,
        "nomic-embed-text": 768,
        "mxbai-embed-large": 1024,
        "all-minilm": 384,
        "all-minilm:l6-v2": 384,
    }

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        chunk_chars: int | None = None,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the Ollama embedding provider.

        Args:
            model_name: Name of the Ollama model.
                       Defaults to settings.embedding_model.
            base_url: Ollama API base URL.
                     Defaults to settings.ollama_base_url.
            chunk_chars: Characters per chunk for long inputs.
                        Defaults to settings.embedding_chunk_chars.
            timeout: Request timeout in seconds.
            client: Pre-built HTTP client (mostly for tests).
        """
        self._model_name = model_name or settings.embedding_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._chunk_chars = chunk_chars or settings.embedding_chunk_chars
        self._timeout = timeout
        self._dimension: int | None = None
        self._client = client
        self._client_lock = threading.Lock()

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OllamaEmbeddingProvider":
        """Factory method to create OllamaEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: Ollama API URL. If None, uses settings.

        Returns:
            Configured OllamaEmbeddingProvider
        """
        return cls(model_name=model_name, base_url=base_url)

    @property
    def client(self) -> httpx.Client:
        """Lazy-load the HTTP client."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    self._client = httpx.Client(
                        timeout=self._timeout,
                        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                    )
        return self._client

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension.

        Note:
            For unknown models, returns 768 until the first embedding is computed.
        """
        if self._dimension is None:
            return self.MODEL_DIMENSIONS.get(self._model_name, 768)
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    def _chunk(self, text: str) -> list[str]:
        if len(text) <= self._chunk_chars:
            return [text]
        return [
            text[start : start + self._chunk_chars]
            for start in range(0, len(text), self._chunk_chars)
        ]

    def embed(self, text: str) -> EmbeddingResult:
        """Generate the embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            EmbeddingResult with the chunk-averaged vector and elapsed seconds

        Raises:
            EmbeddingUnavailableError: If the Ollama request fails or the
                response has no embeddings
        """
        url = f"{self._base_url}/api/embed"
        payload = {
            "model": self._model_name,
            "input": self._chunk(text),
        }

        start_time = time.perf_counter()
        try:
            response = self.client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            hint = ""
            if "connection refused" in str(e).lower():
                hint = "Is Ollama running? Try: ollama serve"
            elif "not found" in str(e).lower():
                hint = f"Model not found. Try: ollama pull {self._model_name}"
            details = {"url": url, "hint": hint} if hint else {"url": url}
            raise EmbeddingUnavailableError("Ollama API error", details=details, cause=e) from e

        embeddings = data.get("embeddings")
        if not embeddings:
            raise EmbeddingUnavailableError(
                "Unexpected response format", details={"keys": sorted(data)}
            )

        vector = np.asarray(embeddings, dtype=np.float32).mean(axis=0)
        self._dimension = int(vector.shape[0])
        return EmbeddingResult(vector=vector, elapsed=time.perf_counter() - start_time)

    def is_available(self) -> bool:
        """Check if Ollama is running and the model answers."""
        try:
            _ = self.embed("test")
            return True
        except Exception:
            return False

    def close(self) -> None:
        """Close the HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            self._client.close()
            self._client = None
