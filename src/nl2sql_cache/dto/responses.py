"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GenerateSqlResponse(BaseModel):
    """Response DTO for SQL generation."""

    sql: str = Field(..., description="Validated, formatted SQL")


class ExecutionResultItem(BaseModel):
    """Rows returned by the remote execution API plus display hints."""

    model_config = ConfigDict(populate_by_name=True)

    type: str = Field("table", description="Result kind")
    data: list[dict[str, Any]] = Field(default_factory=list, description="Row records")
    visualization_type: str = Field(
        "table",
        alias="visualizationType",
        description="Suggested rendering: 'table', 'metric' or 'bar'",
    )
    column_order: list[str] = Field(
        default_factory=list,
        alias="columnOrder",
        description="Row keys in SELECT-list order",
    )


class ExecuteSqlResponse(BaseModel):
    """Response DTO for SQL execution."""

    result: ExecutionResultItem


class ValidationResponse(BaseModel):
    """Response DTO for SQL validation."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(..., alias="isValid", description="True iff there are no errors")
    errors: list[str] = Field(default_factory=list, description="Policy or structure violations")
    warnings: list[str] = Field(default_factory=list, description="Advisory notes")


class FormatSqlResponse(BaseModel):
    """Response DTO for SQL casing normalization."""

    sql: str = Field(..., description="SQL with uppercase keywords and lowercase identifiers")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    model_config = ConfigDict(populate_by_name=True)

    entry_count: int = Field(..., alias="entryCount", description="Number of cached entries", ge=0)
    storage_location: str = Field(..., alias="storageLocation", description="Where the snapshot is persisted")
    max_size: int = Field(..., alias="maxSize", description="Eviction capacity", gt=0)
    threshold: float = Field(
        ...,
        description="Minimum cosine similarity for a cache hit",
        gt=0.0,
        le=1.0,
    )


class CacheClearResponse(BaseModel):
    """Response DTO for clearing the cache."""

    message: str = Field(..., description="Human-readable confirmation")


class CacheMetricsResponse(BaseModel):
    """Response DTO for lookup metrics since process start."""

    total_lookups: int = Field(..., ge=0)
    cache_hits: int = Field(..., ge=0)
    cache_misses: int = Field(..., ge=0)
    provider_failures: int = Field(..., ge=0)
    hit_rate: float = Field(..., ge=0.0, le=1.0)
    avg_lookup_time_ms: float = Field(..., ge=0.0)


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache storage is reachable")
    embedding_healthy: bool | None = Field(
        None,
        description="Whether the embedding service is reachable",
    )


class InsightsResponse(BaseModel):
    """Response DTO for result insights."""

    insights: list[str] = Field(..., description="Two short observations about the result")
