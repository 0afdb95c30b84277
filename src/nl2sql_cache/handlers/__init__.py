"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .cache_handler import CacheHandler
from .insights_handler import InsightsHandler
from .sql_handler import SqlHandler

__all__ = [
    "CacheHandler",
    "InsightsHandler",
    "SqlHandler",
]
