"""Repository layer for data access.

This layer abstracts external dependencies (files, Redis, model and
execution APIs) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (file → Redis, Ollama → hosted API)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from nl2sql_cache.protocols import CacheStorage, EmbeddingProvider, SqlGenerator

from .execution_client import ExecutionApiClient
from .json_file_repository import JsonFileCacheRepository
from .ollama_embedding_provider import OllamaEmbeddingProvider
from .ollama_sql_generator import OllamaSqlGenerator
from .redis_repository import RedisCacheRepository
from .schema_context import build_schema_context, load_schema_context

__all__ = [
    "CacheStorage",
    "EmbeddingProvider",
    "SqlGenerator",
    "ExecutionApiClient",
    "JsonFileCacheRepository",
    "OllamaEmbeddingProvider",
    "OllamaSqlGenerator",
    "RedisCacheRepository",
    "build_schema_context",
    "load_schema_context",
]
