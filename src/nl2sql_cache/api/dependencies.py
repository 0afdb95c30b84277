"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from nl2sql_cache.config import configure_logging, settings
from nl2sql_cache.handlers import CacheHandler, InsightsHandler, SqlHandler
from nl2sql_cache.protocols import CacheStorage
from nl2sql_cache.repositories import (
    ExecutionApiClient,
    JsonFileCacheRepository,
    OllamaEmbeddingProvider,
    OllamaSqlGenerator,
    RedisCacheRepository,
)
from nl2sql_cache.services import InsightsService, SemanticCacheService, SqlPipelineService

logger = logging.getLogger(__name__)


def get_cache_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def get_sql_handler(request: Request) -> SqlHandler:
    """Dependency injection for SqlHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "sql_handler", None)
    if handler is None:
        raise RuntimeError("SqlHandler not initialized. Check lifespan setup.")
    return handler


def get_insights_handler(request: Request) -> InsightsHandler:
    """Dependency injection for InsightsHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "insights_handler", None)
    if handler is None:
        raise RuntimeError("InsightsHandler not initialized. Check lifespan setup.")
    return handler


def build_storage() -> CacheStorage:
    """Pick the snapshot backend named by SEMANTIC_CACHE_BACKEND."""
    if settings.uses_redis:
        return RedisCacheRepository.create()
    return JsonFileCacheRepository.create()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repositories (storage, model clients, execution client)
    2. Services (cache, SQL pipeline, insights)
    3. Handlers (HTTP endpoints)

    Cleanup:
        Closes HTTP clients and removes all services from app.state on shutdown
    """
    configure_logging()

    embedding_provider = OllamaEmbeddingProvider.create()
    generator = OllamaSqlGenerator.create()
    executor = ExecutionApiClient.create()
    storage = build_storage()

    cache_service = SemanticCacheService.create(
        storage=storage,
        embedding_provider=embedding_provider,
    )
    pipeline = SqlPipelineService(cache=cache_service, generator=generator, executor=executor)

    app.state.cache_service = cache_service
    app.state.cache_handler = CacheHandler(cache_service=cache_service)
    app.state.sql_handler = SqlHandler(pipeline=pipeline)
    app.state.insights_handler = InsightsHandler(
        insights_service=InsightsService(completer=generator if settings.insights_enabled else None)
    )

    logger.info(
        "Semantic cache ready: %s (threshold %.2f, max size %d)",
        storage.location,
        cache_service.threshold,
        cache_service.max_size,
    )

    yield

    await embedding_provider.close()
    await generator.close()
    await executor.close()

    del app.state.insights_handler
    del app.state.sql_handler
    del app.state.cache_handler
    del app.state.cache_service
    logger.info("NL2SQL service shut down")


# Type aliases for cleaner dependency injection
CacheHandlerDep = Annotated[CacheHandler, Depends(get_cache_handler)]
SqlHandlerDep = Annotated[SqlHandler, Depends(get_sql_handler)]
InsightsHandlerDep = Annotated[InsightsHandler, Depends(get_insights_handler)]
