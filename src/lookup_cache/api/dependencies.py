"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan (or injected up front)
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from lookup_cache.config import settings
from lookup_cache.handlers import CacheHandler
from lookup_cache.logging import get_logger
from lookup_cache.protocols import EmbeddingProvider
from lookup_cache.repositories import OllamaEmbeddingProvider
from lookup_cache.services import CacheRouter, HashCacheService, SemanticCacheService

logger = get_logger(__name__)


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CacheHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def build_embedding_provider() -> EmbeddingProvider:
    """Create the embedding provider selected by EMBEDDING_BACKEND."""
    if settings.is_local_backend:
        # Imported here so the Ollama setup does not load torch
        from lookup_cache.repositories.local_embedding_provider import LocalEmbeddingProvider

        return LocalEmbeddingProvider.create()
    return OllamaEmbeddingProvider.create()


def build_handler(embedding_provider: EmbeddingProvider | None = None) -> CacheHandler:
    """Wire the caches and the handler with settings defaults."""
    router = CacheRouter(
        hash_cache=HashCacheService.create(),
        semantic_cache=SemanticCacheService.create(
            embedding_provider=embedding_provider or build_embedding_provider(),
        ),
    )
    return CacheHandler(router=router)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Builds the default handler unless one was injected by ``create_app``.
    Caches live in memory only, so they start empty on every boot.

    Args:
        app: The FastAPI application instance

    Yields:
        None
    """
    built_here = getattr(app.state, "cache_handler", None) is None
    if built_here:
        app.state.cache_handler = build_handler()

    handler: CacheHandler = app.state.cache_handler
    logger.info("Cache handler initialized")
    logger.info("Min similarity: %s", handler.router.semantic_cache.threshold)
    logger.info("Hash cache char limit: %d", handler.router.char_limit)

    yield

    if built_here:
        provider = handler.router.semantic_cache.embedding_provider
        close = getattr(provider, "close", None)
        if callable(close):
            close()
        del app.state.cache_handler
    logger.info("Cache handler shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
