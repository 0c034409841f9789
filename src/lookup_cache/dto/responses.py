"""Response DTOs for API endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class CacheCheckResponse(BaseModel):
    """Response DTO for cache check operation."""

    key: str = Field(..., description="The partition key that was queried")
    mode: Literal["exact", "semantic"] = Field(..., description="The cache that answered")
    is_hit: bool = Field(..., description="Whether a cached result was found")
    result: Any = Field(None, description="The cached result on a hit")
    lookup_time_ms: float = Field(..., description="Time taken for the cache lookup in milliseconds")


class CacheStoreResponse(BaseModel):
    """Response DTO for cache store operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    mode: Literal["exact", "semantic"] = Field(..., description="The cache the item went to")
    position: int = Field(..., description="Position of the item in the store", ge=0)
    message: str = Field(..., description="Human-readable status message")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    exact: dict[str, Any] = Field(..., description="Hash cache statistics")
    semantic: dict[str, Any] = Field(..., description="Semantic cache statistics")
    performance: dict[str, float | int] = Field(..., description="Hit/miss counters")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    embedding_healthy: bool = Field(..., description="Whether the embedding service is reachable")
