"""Embedding provider protocol.

Defines the interface for any embedding generation service that can
convert text to vector embeddings.

Implementations can include:
- Ollama (local HTTP API, default)
- OpenAI / Gemini embeddings (API)
- Fakes in tests
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation services.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        provider: EmbeddingProvider = OllamaEmbeddingProvider.create()
        vector = await provider.encode("show top 10 users")
        ```
    """

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            ProviderError: If the provider is unavailable or responds badly
        """
        ...

    async def is_available(self) -> bool:
        """Check if the embedding provider is available."""
        ...
