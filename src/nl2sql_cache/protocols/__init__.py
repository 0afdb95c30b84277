"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (local file → Redis, Ollama → hosted API)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from nl2sql_cache.protocols import CacheStorage, EmbeddingProvider

    storage: CacheStorage = JsonFileCacheRepository("cache.json")
    storage: CacheStorage = RedisCacheRepository.create()
    ```
"""

from .cache_storage import CacheStorage
from .embedding_provider import EmbeddingProvider
from .sql_generator import SqlGenerator
from .text_completer import TextCompleter

__all__ = [
    "CacheStorage",
    "EmbeddingProvider",
    "SqlGenerator",
    "TextCompleter",
]
