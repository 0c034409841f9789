import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from lookup_cache.exceptions import ConfigError

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Matching
    min_similarity: float = float(os.getenv("CACHE_MIN_SIMILARITY", "0.95"))
    exact_min_similarity: float = float(os.getenv("CACHE_EXACT_MIN_SIMILARITY", "1.0"))
    verbosity: int = int(os.getenv("CACHE_VERBOSITY", "0"))

    # Inputs longer than this go to the hash cache (embedding them is slow)
    hash_cache_char_limit: int = int(os.getenv("CACHE_HASH_CHAR_LIMIT", "5000"))
    cache_key_header: str = os.getenv("CACHE_KEY_HEADER", "X-Cache-Key")

    # Embedding
    embedding_backend: str = os.getenv("EMBEDDING_BACKEND", "ollama")
    embedding_model: str = os.getenv(
        "EMBEDDING_MODEL",
        "all-minilm",  # or "nomic-embed-text", or a sentence-transformers model for "local"
    )
    embedding_chunk_chars: int = int(os.getenv("EMBEDDING_CHUNK_CHARS", "1000"))

    # Ollama
    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def is_local_backend(self) -> bool:
        """Check if embeddings are computed in-process with sentence-transformers."""
        return self.embedding_backend.lower() == "local"

    def __post_init__(self) -> None:
        """Validate settings after initialization.

        Similarity thresholds are deliberately left alone: values outside
        [-1, 1] just make every lookup hit or miss.
        """
        if self.embedding_backend.lower() not in ("ollama", "local"):
            raise ConfigError(
                f"EMBEDDING_BACKEND must be 'ollama' or 'local', got {self.embedding_backend!r}"
            )

        if self.embedding_chunk_chars <= 0:
            raise ConfigError("EMBEDDING_CHUNK_CHARS must be positive")

        if self.hash_cache_char_limit < 0:
            raise ConfigError("CACHE_HASH_CHAR_LIMIT must not be negative")

        if self.verbosity not in (0, 1, 2):
            raise ConfigError(f"CACHE_VERBOSITY must be one of [0, 1, 2], got {self.verbosity}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
