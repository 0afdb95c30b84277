"""Free-form text completion protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextCompleter(Protocol):
    """Protocol for sending an arbitrary prompt to a language model."""

    async def complete(self, prompt: str) -> str:
        """Return the model's completion for ``prompt``.

        Raises:
            GenerationError: If the model call fails
        """
        ...
