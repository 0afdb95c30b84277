"""Shared fixtures: fake collaborators and file-backed caches."""

import asyncio
import itertools

import pytest

from nl2sql_cache.exceptions import GenerationError, ProviderError
from nl2sql_cache.repositories import JsonFileCacheRepository
from nl2sql_cache.services import SemanticCacheService


class FakeEmbeddingProvider:
    """Returns canned vectors per text; can be switched into a failing mode."""

    def __init__(self, vectors: dict[str, list[float]] | None = None, default: list[float] | None = None):
        self.vectors = dict(vectors or {})
        self.default = default
        self.fail = False
        self.calls: list[str] = []

    @property
    def model_name(self) -> str:
        return "fake-embedder"

    async def encode(self, text: str) -> list[float]:
        self.calls.append(text)
        # Yield to the loop like a real network call would.
        await asyncio.sleep(0)
        if self.fail:
            raise ProviderError("embedding provider unavailable")
        if text in self.vectors:
            return list(self.vectors[text])
        if self.default is not None:
            return list(self.default)
        raise ProviderError(f"no vector for {text!r}")

    async def is_available(self) -> bool:
        return not self.fail


class FakeSqlGenerator:
    def __init__(self, response: str = "SELECT 1 FROM dual"):
        self.response = response
        self.fail = False
        self.questions: list[str] = []

    @property
    def model_name(self) -> str:
        return "fake-generator"

    async def generate(self, question: str) -> str:
        self.questions.append(question)
        if self.fail:
            raise GenerationError("Failed to generate SQL from LLM.")
        return self.response


@pytest.fixture
def cache_path(tmp_path):
    return tmp_path / "cache.json"


@pytest.fixture
def storage(cache_path):
    return JsonFileCacheRepository(cache_path)


@pytest.fixture
def provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def generator():
    return FakeSqlGenerator()


@pytest.fixture
def make_cache(storage, provider):
    """Build a cache over the shared file with a deterministic clock."""

    def _make(threshold: float = 0.9, max_size: int = 1000, clock=None, **overrides):
        return SemanticCacheService(
            storage=overrides.get("storage", storage),
            embedding_provider=overrides.get("embedding_provider", provider),
            similarity_threshold=threshold,
            max_size=max_size,
            clock=clock or itertools.count(1).__next__,
        )

    return _make
