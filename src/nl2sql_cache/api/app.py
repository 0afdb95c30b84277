from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nl2sql_cache.api.dependencies import CacheHandlerDep, InsightsHandlerDep, SqlHandlerDep, lifespan
from nl2sql_cache.config import settings
from nl2sql_cache.dto import (
    CacheClearResponse,
    CacheMetricsResponse,
    CacheStatsResponse,
    ExecuteSqlResponse,
    FormatSqlResponse,
    GenerateSqlRequest,
    GenerateSqlResponse,
    HealthCheckResponse,
    InsightsRequest,
    InsightsResponse,
    SqlRequest,
    ValidationResponse,
)

API_NAME = "NL2SQL Semantic Cache API"
API_VERSION = "0.1.0"


def create_app() -> FastAPI:
    """Build the FastAPI application.

    Services are wired in ``lifespan``; tests that skip the lifespan can put
    their own handlers on ``app.state`` instead.
    """
    app = FastAPI(
        title=API_NAME,
        description="Natural-language to SQL with a semantic question cache and SQL guardrails",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": API_NAME,
            "version": API_VERSION,
            "endpoints": {
                "generate": "/generate",
                "execute": "/execute",
                "validate": "/sql/validate",
                "format": "/sql/format",
                "insights": "/insights",
                "cache_stats": "/cache/stats",
                "cache_metrics": "/cache/metrics",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: CacheHandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.post("/generate", response_model=GenerateSqlResponse)
    async def generate_sql(request: GenerateSqlRequest, handler: SqlHandlerDep) -> GenerateSqlResponse:
        """Generate SQL for a question, answering from the semantic cache when possible."""
        return await handler.generate_sql(request)

    @app.post("/execute", response_model=ExecuteSqlResponse)
    async def execute_sql(request: SqlRequest, handler: SqlHandlerDep) -> ExecuteSqlResponse:
        """Validate SQL and run it on the remote execution API."""
        return await handler.execute_sql(request)

    @app.post("/sql/validate", response_model=ValidationResponse)
    async def validate_sql(request: SqlRequest, handler: SqlHandlerDep) -> ValidationResponse:
        """Run the guardrails on a SQL statement without executing it."""
        return await handler.validate_sql(request)

    @app.post("/sql/format", response_model=FormatSqlResponse)
    async def format_sql(request: SqlRequest, handler: SqlHandlerDep) -> FormatSqlResponse:
        """Normalize keyword and identifier casing."""
        return await handler.format_sql(request)

    @app.post("/insights", response_model=InsightsResponse)
    async def insights(request: InsightsRequest, handler: InsightsHandlerDep) -> InsightsResponse:
        """Two short observations about an executed query's rows."""
        return await handler.get_insights(request)

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    async def cache_stats(handler: CacheHandlerDep) -> CacheStatsResponse:
        """Get semantic cache statistics."""
        return await handler.get_stats()

    @app.get("/cache/metrics", response_model=CacheMetricsResponse)
    async def cache_metrics(handler: CacheHandlerDep) -> CacheMetricsResponse:
        """Get lookup hit/miss metrics since process start."""
        return await handler.get_metrics()

    @app.delete("/cache", response_model=CacheClearResponse)
    async def clear_cache(handler: CacheHandlerDep) -> CacheClearResponse:
        """Clear all entries from the semantic cache."""
        return await handler.clear_cache()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "nl2sql_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
