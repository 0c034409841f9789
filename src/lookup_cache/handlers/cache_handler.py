"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import time

from fastapi import HTTPException, status

from lookup_cache.dto import (
    CacheCheckResponse,
    CacheStatsResponse,
    CacheStoreResponse,
    CheckCacheRequest,
    HealthCheckResponse,
    StoreCacheRequest,
)
from lookup_cache.exceptions import EmbeddingUnavailableError, InvalidItemError
from lookup_cache.models import PerformanceMetrics
from lookup_cache.services import CacheRouter


class CacheHandler:
    """HTTP handlers for cache operations.

    This handler delegates lookups to the caches held by a CacheRouter
    and handles HTTP-specific concerns like:
    - Converting items to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Methods are synchronous: FastAPI runs them in its worker threads, which
    is the concurrency model the cache is built for.
    """

    def __init__(self, router: CacheRouter) -> None:
        """Initialize the cache handler.

        Args:
            router: Router holding the hash and semantic caches (required).
        """
        self._router = router
        self._metrics = PerformanceMetrics()

    def check_cache(self, request: CheckCacheRequest) -> CacheCheckResponse:
        """Handle POST /cache/check requests.

        Args:
            request: The check cache request DTO

        Returns:
            CacheCheckResponse with hit status and the cached result

        Raises:
            HTTPException: 503 if embeddings are unavailable, 500 otherwise
        """
        mode = self._router.resolve(request.input, request.mode)
        cache = self._router.select(request.input, mode)

        try:
            start_time = time.time()
            item = cache(
                request.key,
                request.input,
                verbose=request.verbose,
                min_similarity=request.threshold,
            )
            lookup_time_ms = (time.time() - start_time) * 1000

        except EmbeddingUnavailableError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Embedding service unavailable: {e}",
            ) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to check cache: {e}",
            ) from e

        if item.is_valid():
            self._metrics.record_hit(lookup_time_ms)
        else:
            self._metrics.record_miss(lookup_time_ms)

        return CacheCheckResponse(
            key=request.key,
            mode=mode,
            is_hit=item.is_valid(),
            result=item.output,
            lookup_time_ms=lookup_time_ms,
        )

    def store_cache(self, request: StoreCacheRequest) -> CacheStoreResponse:
        """Handle POST /cache/store requests.

        The input is fingerprinted exactly like a lookup would, so a later
        check with the same key and input hits.

        Args:
            request: The store cache request DTO

        Returns:
            CacheStoreResponse with the item's position

        Raises:
            HTTPException: 400 for a null result, 503 if embeddings are
                unavailable, 500 otherwise
        """
        mode = self._router.resolve(request.input, request.mode)
        cache = self._router.select(request.input, mode)

        try:
            item = cache.fingerprint(request.key, request.input)
            item.output = request.result
            position = cache.push(item)

        except InvalidItemError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Result must not be null: {e}",
            ) from e
        except EmbeddingUnavailableError as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Embedding service unavailable: {e}",
            ) from e
        except Exception as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to store entry: {e}",
            ) from e

        return CacheStoreResponse(
            success=True,
            mode=mode,
            position=position,
            message="Entry stored successfully",
        )

    def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests."""
        return CacheStatsResponse(
            exact=self._router.hash_cache.get_stats(),
            semantic=self._router.semantic_cache.get_stats(),
            performance=self._metrics.to_dict(),
        )

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        embedding_healthy = self._router.semantic_cache.embedding_provider.is_available()
        return HealthCheckResponse(
            status="healthy" if embedding_healthy else "unhealthy",
            embedding_healthy=embedding_healthy,
        )

    @property
    def router(self) -> CacheRouter:
        """Get the underlying cache router (for testing)."""
        return self._router
