"""JSON snapshot format shared by the storage backends.

A snapshot is a JSON array of ``{question, embedding, sql, timestamp}``
objects, timestamp in milliseconds since epoch.
"""

import json
from typing import Any

from nl2sql_cache.entities import CacheEntryEntity
from nl2sql_cache.exceptions import PersistenceError


def dump_entries(entries: list[CacheEntryEntity]) -> str:
    """Serialize entries to the snapshot format, preserving order."""
    return json.dumps(
        [
            {
                "question": entry.question,
                "embedding": list(entry.embedding),
                "sql": entry.sql,
                "timestamp": entry.timestamp,
            }
            for entry in entries
        ],
        indent=2,
    )


def load_entries(raw: str | bytes, source: str) -> list[CacheEntryEntity]:
    """Parse a snapshot.

    Raises:
        PersistenceError: If ``raw`` is not a JSON array of well-formed entries
    """
    try:
        data: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PersistenceError(f"Cache snapshot at {source} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PersistenceError(f"Cache snapshot at {source} must be a JSON array")

    entries = []
    for index, item in enumerate(data):
        try:
            entries.append(
                CacheEntryEntity(
                    question=str(item["question"]),
                    embedding=[float(value) for value in item["embedding"]],
                    sql=str(item["sql"]),
                    timestamp=int(item["timestamp"]),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Malformed cache entry #{index} in {source}: {e}") from e

    dimensions = {len(entry.embedding) for entry in entries}
    if len(dimensions) > 1 or 0 in dimensions:
        raise PersistenceError(f"Cache snapshot at {source} has empty or inconsistent embedding dimensions {sorted(dimensions)}")

    return entries
