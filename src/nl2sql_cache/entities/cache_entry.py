"""Cache entry domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached question-to-SQL mapping.

    Attributes:
        question: The original natural-language question
        embedding: The question's embedding vector, produced once at insertion
        sql: The validated, formatted SQL for the question
        timestamp: Creation time in milliseconds since epoch (eviction order only)
    """

    question: str
    embedding: list[float]
    sql: str
    timestamp: int
