"""Request DTOs for API endpoints."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class CheckCacheRequest(BaseModel):
    """Request DTO for checking cache.

    The handler will convert this to a lookup on the hash or semantic cache.
    """

    key: str = Field(..., description="Partition key, matched exactly (e.g. model name)")
    input: str = Field(..., description="The raw input to look up")
    mode: Literal["exact", "semantic", "auto"] = Field(
        "auto",
        description="Which cache to use; 'auto' picks by input length",
    )
    threshold: float | None = Field(
        None,
        description="Override the default minimum similarity (not validated)",
    )
    verbose: int | None = Field(None, description="Logging verbosity for this lookup", ge=0, le=2)


class StoreCacheRequest(BaseModel):
    """Request DTO for storing in cache."""

    key: str = Field(..., description="Partition key, matched exactly")
    input: str = Field(..., description="The raw input the result was computed for")
    mode: Literal["exact", "semantic", "auto"] = Field("auto", description="Target cache")
    result: Any = Field(..., description="The computed result to cache (any JSON value but null)")
