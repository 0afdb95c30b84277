"""SQL generator protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SqlGenerator(Protocol):
    """Protocol for language-model SQL generation.

    The returned text is raw model output: it may be wrapped in markdown
    fences and is not yet formatted or validated.
    """

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def generate(self, question: str) -> str:
        """Generate SQL text for a natural-language question.

        Raises:
            GenerationError: If the model call fails
        """
        ...
