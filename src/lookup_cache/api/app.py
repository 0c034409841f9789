from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lookup_cache.api.dependencies import HandlerDep, lifespan
from lookup_cache.config import settings
from lookup_cache.dto import (
    CacheCheckResponse,
    CacheStatsResponse,
    CacheStoreResponse,
    CheckCacheRequest,
    HealthCheckResponse,
    StoreCacheRequest,
)
from lookup_cache.handlers import CacheHandler


def create_app(handler: CacheHandler | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        handler: Pre-built handler. If None, the lifespan builds one from settings.

    Returns:
        The configured FastAPI app
    """
    app = FastAPI(
        title="Lookup Cache API",
        description="Exact and semantic lookup cache for expensive API calls",
        version="0.1.0",
        lifespan=lifespan,
    )
    if handler is not None:
        app.state.cache_handler = handler

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Lookup Cache API",
            "version": "0.1.0",
            "description": "Exact and semantic lookup cache for expensive API calls",
            "endpoints": {
                "check": "/cache/check",
                "store": "/cache/store",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return handler.health_check()

    @app.post("/cache/check", response_model=CacheCheckResponse)
    def check_cache(request: CheckCacheRequest, handler: HandlerDep) -> CacheCheckResponse:
        """Look up a cached result for a key and input."""
        return handler.check_cache(request)

    @app.post("/cache/store", response_model=CacheStoreResponse)
    def store_cache(request: StoreCacheRequest, handler: HandlerDep) -> CacheStoreResponse:
        """Store a computed result for a key and input."""
        return handler.store_cache(request)

    @app.get("/stats", response_model=CacheStatsResponse)
    def get_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return handler.get_stats()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lookup_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
