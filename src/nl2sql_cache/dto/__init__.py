"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import GenerateSqlRequest, InsightsRequest, SqlRequest
from .responses import (
    CacheClearResponse,
    CacheMetricsResponse,
    CacheStatsResponse,
    ExecuteSqlResponse,
    ExecutionResultItem,
    FormatSqlResponse,
    GenerateSqlResponse,
    HealthCheckResponse,
    InsightsResponse,
    ValidationResponse,
)

__all__ = [
    "GenerateSqlRequest",
    "InsightsRequest",
    "SqlRequest",
    "CacheClearResponse",
    "CacheMetricsResponse",
    "CacheStatsResponse",
    "ExecuteSqlResponse",
    "ExecutionResultItem",
    "FormatSqlResponse",
    "GenerateSqlResponse",
    "HealthCheckResponse",
    "InsightsResponse",
    "ValidationResponse",
]
