"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from nl2sql_cache.services import SemanticCacheService

    cache = SemanticCacheService.create(storage=storage, embedding_provider=provider)
    ```
"""

from .cache_service import SemanticCacheService
from .guardrails import validate_input, validate_sql, validate_syntax
from .insights_service import InsightsService, generate_mock_insights
from .sql_formatter import format_casing, strip_markdown_fences
from .sql_pipeline import SqlPipelineService

__all__ = [
    "InsightsService",
    "SemanticCacheService",
    "SqlPipelineService",
    "format_casing",
    "generate_mock_insights",
    "strip_markdown_fences",
    "validate_input",
    "validate_sql",
    "validate_syntax",
]
