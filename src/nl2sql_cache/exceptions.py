"""Domain exceptions.

Cache-layer errors (ProviderError, PersistenceError) are recovered inside
the cache service and never reach HTTP callers. The rest are surfaced by the
handlers as descriptive error responses.
"""


class Nl2SqlError(Exception):
    """Base exception for the NL2SQL service."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ProviderError(Nl2SqlError):
    """Embedding provider call failed."""


class PersistenceError(Nl2SqlError):
    """Cache storage could not be read or written."""


class InputRejectedError(Nl2SqlError):
    """Question rejected by the pre-generation guard."""


class SqlValidationError(Nl2SqlError):
    """Guardrails rejected a SQL statement."""

    def __init__(self, errors: list[str], message: str | None = None) -> None:
        self.errors = list(errors)
        super().__init__(message or f"Generated SQL is invalid: {', '.join(self.errors)}")


class GenerationError(Nl2SqlError):
    """SQL generator call failed."""


class ExecutionError(Nl2SqlError):
    """Remote execution API call failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class MalformedResponseError(ExecutionError):
    """Remote execution API returned something other than a list of rows."""
