"""Cache storage protocol.

Defines the interface for the durable backing of the semantic cache. The
cache keeps its entries in memory; storage only has to hold one snapshot
(the whole entry list) and report when that snapshot last changed.

Implementations:
- Local JSON file (default)
- Single Redis value
"""

from typing import Protocol, runtime_checkable

from nl2sql_cache.entities import CacheEntryEntity


@runtime_checkable
class CacheStorage(Protocol):
    """Protocol for cache snapshot storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.
    """

    @property
    def location(self) -> str:
        """Return a human-readable description of where the snapshot lives."""
        ...

    def load(self) -> list[CacheEntryEntity]:
        """Read the full snapshot.

        Returns:
            Entries in stored order (empty if nothing has been stored yet)

        Raises:
            PersistenceError: If the snapshot exists but cannot be read or parsed
        """
        ...

    def save(self, entries: list[CacheEntryEntity]) -> None:
        """Overwrite the snapshot with ``entries``.

        Raises:
            PersistenceError: If the snapshot cannot be written
        """
        ...

    def last_modified(self) -> int | None:
        """Return the snapshot's modification time in nanoseconds, or None if absent."""
        ...

    def health_check(self) -> bool:
        """Check if the storage is accessible."""
        ...
