"""NL2SQL Cache - semantic question→SQL caching with SQL guardrails.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (CacheStorage, EmbeddingProvider, SqlGenerator, TextCompleter)
    - repositories: Storage backends and HTTP clients
    - services: Semantic cache, SQL formatter, guardrails, SQL pipeline, insights
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from nl2sql_cache.repositories import JsonFileCacheRepository, OllamaEmbeddingProvider
    from nl2sql_cache.services import SemanticCacheService

    cache = SemanticCacheService.create(
        storage=JsonFileCacheRepository.create("cache.json"),
        embedding_provider=OllamaEmbeddingProvider.create(),
    )
    ```

For HTTP API:
    ```python
    from nl2sql_cache.api.app import app
    ```
"""

from nl2sql_cache.config import get_redis_client, settings
from nl2sql_cache.entities import CacheEntryEntity, ExecutionResult, InputValidation, ValidationResult
from nl2sql_cache.exceptions import (
    ExecutionError,
    GenerationError,
    InputRejectedError,
    MalformedResponseError,
    Nl2SqlError,
    PersistenceError,
    ProviderError,
    SqlValidationError,
)
from nl2sql_cache.protocols import CacheStorage, EmbeddingProvider, SqlGenerator, TextCompleter
from nl2sql_cache.repositories import (
    ExecutionApiClient,
    JsonFileCacheRepository,
    OllamaEmbeddingProvider,
    OllamaSqlGenerator,
    RedisCacheRepository,
)
from nl2sql_cache.services import (
    InsightsService,
    SemanticCacheService,
    SqlPipelineService,
    format_casing,
    validate_input,
    validate_syntax,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStorage",
    "EmbeddingProvider",
    "SqlGenerator",
    "TextCompleter",
    # Services (business logic)
    "InsightsService",
    "SemanticCacheService",
    "SqlPipelineService",
    "format_casing",
    "validate_input",
    "validate_syntax",
    # Repositories (data access)
    "ExecutionApiClient",
    "JsonFileCacheRepository",
    "OllamaEmbeddingProvider",
    "OllamaSqlGenerator",
    "RedisCacheRepository",
    # Entities (domain models)
    "CacheEntryEntity",
    "ExecutionResult",
    "InputValidation",
    "ValidationResult",
    # Errors
    "Nl2SqlError",
    "ProviderError",
    "PersistenceError",
    "InputRejectedError",
    "SqlValidationError",
    "GenerationError",
    "ExecutionError",
    "MalformedResponseError",
]
