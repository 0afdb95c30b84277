"""HTTP handlers for cache management.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging

from fastapi import HTTPException, status

from nl2sql_cache.dto import (
    CacheClearResponse,
    CacheMetricsResponse,
    CacheStatsResponse,
    HealthCheckResponse,
)
from nl2sql_cache.services import SemanticCacheService

logger = logging.getLogger(__name__)


class CacheHandler:
    """HTTP handlers for cache management operations.

    This handler delegates business logic to SemanticCacheService
    and handles HTTP-specific concerns like:
    - Converting service results to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        handler = CacheHandler(cache_service=cache_service)

        @app.get("/cache/stats", response_model=CacheStatsResponse)
        async def cache_stats():
            return await handler.get_stats()
        ```
    """

    def __init__(self, cache_service: SemanticCacheService) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
        """
        self._cache = cache_service

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests.

        Raises:
            HTTPException: If an error occurs while fetching stats
        """
        try:
            stats = self._cache.get_stats()
            return CacheStatsResponse(
                entry_count=stats["entryCount"],
                storage_location=stats["storageLocation"],
                max_size=stats["maxSize"],
                threshold=stats["threshold"],
            )
        except Exception as e:
            logger.exception("Failed to retrieve cache stats")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve cache stats",
            ) from e

    async def clear_cache(self) -> CacheClearResponse:
        """Handle DELETE /cache requests.

        Raises:
            HTTPException: If an error occurs while clearing
        """
        try:
            result = await self._cache.clear_cache()
            return CacheClearResponse(message=result["message"])
        except Exception as e:
            logger.exception("Failed to clear cache")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to clear cache",
            ) from e

    async def get_metrics(self) -> CacheMetricsResponse:
        """Handle GET /cache/metrics requests."""
        return CacheMetricsResponse(**self._cache.metrics.to_dict())

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        report = await self._cache.health_report()
        is_healthy = report["cache_healthy"] and report["embedding_healthy"]

        return HealthCheckResponse(status="healthy" if is_healthy else "unhealthy", **report)
