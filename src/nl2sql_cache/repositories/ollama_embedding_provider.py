"""Ollama-based embedding provider.

Embeds questions for the semantic cache through a local Ollama server
(`POST /api/embed`). Every failure surfaces as ProviderError, which the
cache turns into a miss or a skipped insert.

Requirements:
    - Ollama running: `ollama serve`
    - Model pulled: `ollama pull embeddinggemma`

Any Ollama embedding model works (embeddinggemma, nomic-embed-text,
mxbai-embed-large, all-minilm). Entries embedded with a different model or
dimension never match: the similarity of mismatched vectors is 0.
"""

import logging

import httpx

from nl2sql_cache.config import settings
from nl2sql_cache.exceptions import ProviderError

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider:
    """Ollama-based implementation of EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Uses Ollama's local API to generate embeddings. The API endpoint is
    http://localhost:11434/api/embed by default.

    Example:
        ```python
        provider = OllamaEmbeddingProvider.create(
            model_name="embeddinggemma",
            base_url="http://localhost:11434"
        )

        embedding = await provider.encode("show top 10 users")
        print(len(embedding))  # 768
        ```
    """

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama embedding provider.

        Args:
            model_name: Name of the Ollama model.
                       Defaults to settings.embedding_model.
            base_url: Ollama API base URL.
                     Defaults to settings.ollama_base_url.
            timeout: Request timeout in seconds.
            client: Pre-built HTTP client (tests pass one with a mock transport).
        """
        self._model_name = model_name or settings.embedding_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OllamaEmbeddingProvider":
        """Factory method to create OllamaEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: Ollama API URL. If None, uses settings.

        Returns:
            Configured OllamaEmbeddingProvider
        """
        return cls(model_name=model_name, base_url=base_url)

    @property
    def model_name(self) -> str:
        return self._model_name

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            ProviderError: If the Ollama API request fails or the response
                has no embedding in it
        """
        url = f"{self._base_url}/api/embed"
        payload = {
            "model": self._model_name,
            "input": text,
        }

        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            error_msg = f"Ollama API error: {e}"
            if "connection refused" in str(e).lower():
                error_msg += " (is Ollama running? Try: ollama serve)"
            elif isinstance(e, httpx.HTTPStatusError) and e.response.status_code == 404:
                error_msg += f" (model not found? Try: ollama pull {self._model_name})"
            raise ProviderError(error_msg) from e
        except ValueError as e:
            raise ProviderError(f"Ollama returned a non-JSON body: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected response format from Ollama: {type(data).__name__}")

        # Ollama returns {"embeddings": [[...]]} for single input
        if data.get("embeddings"):
            return [float(value) for value in data["embeddings"][0]]

        # Older servers: {"embedding": [...]}
        if data.get("embedding"):
            return [float(value) for value in data["embedding"]]

        raise ProviderError(f"Unexpected response format from Ollama: {list(data)}")

    async def is_available(self) -> bool:
        """Check if Ollama is running and the model answers."""
        try:
            await self.encode("test")
            return True
        except ProviderError as e:
            logger.warning("Embedding provider unavailable: %s", e)
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
