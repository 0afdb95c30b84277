"""Local JSON file implementation of CacheStorage.

This is the default backend: the whole cache lives in one JSON file that is
overwritten on every write. The file's mtime doubles as the staleness signal
other processes sharing the file use to pick up changes.
"""

import logging
import os
import tempfile
from pathlib import Path

from nl2sql_cache.config import settings
from nl2sql_cache.entities import CacheEntryEntity
from nl2sql_cache.exceptions import PersistenceError

from .snapshot import dump_entries, load_entries

logger = logging.getLogger(__name__)


class JsonFileCacheRepository:
    """File-backed snapshot storage.

    This class satisfies the CacheStorage protocol through structural
    typing - no explicit inheritance needed.

    Writes go to a temporary file in the same directory which then replaces
    the target, so readers never observe a half-written snapshot.
    """

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        """Initialize the file repository.

        Args:
            path: Location of the JSON file. Defaults to settings.semantic_cache_path.
        """
        self._path = Path(path or settings.semantic_cache_path)

    @classmethod
    def create(cls, path: str | os.PathLike[str] | None = None) -> "JsonFileCacheRepository":
        """Factory method to create JsonFileCacheRepository with defaults."""
        return cls(path=path)

    @property
    def location(self) -> str:
        return str(self._path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[CacheEntryEntity]:
        if not self._path.exists():
            return []
        try:
            raw = self._path.read_bytes()
        except OSError as e:
            raise PersistenceError(f"Failed to read cache file {self._path}: {e}") from e
        return load_entries(raw, self.location)

    def save(self, entries: list[CacheEntryEntity]) -> None:
        payload = dump_entries(entries)
        directory = self._path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, self._path)
            except BaseException:
                # mkstemp leaves the file behind on failure
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write cache file {self._path}: {e}") from e
        logger.debug("Wrote %d cache entries to %s", len(entries), self._path)

    def last_modified(self) -> int | None:
        try:
            return self._path.stat().st_mtime_ns
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not stat cache file %s: %s", self._path, e)
            return None

    def health_check(self) -> bool:
        """The file backend is healthy when its directory is writable."""
        directory = self._path.parent
        return directory.exists() and os.access(directory, os.W_OK)
