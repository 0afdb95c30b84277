"""Ollama-based SQL generator.

Sends the schema context and the user's question to Ollama's
``/api/generate`` endpoint and returns the raw completion text. Fence
stripping, casing and validation happen downstream in the SQL pipeline.
``complete`` exposes the same call for other prompts (result insights).
"""

import logging

import httpx

from nl2sql_cache.config import settings
from nl2sql_cache.exceptions import GenerationError

from .schema_context import build_schema_context, load_schema_context

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
{schema_context}

User Question: {question}

Generate a SQL query to answer the user's question.
Follow the CRITICAL RULES provided above.
If the user asks for specific details, do NOT aggregate.
Format the SQL with newlines and indentation for readability.

LETTER CASING:
- SQL keywords MUST be UPPERCASE: SELECT, FROM, WHERE, JOIN, ON, AND, OR, GROUP BY, ORDER BY, HAVING, LIMIT, FETCH, AS
- Table and column names MUST be lowercase.

- Always include row limiting (FETCH FIRST 25 ROWS ONLY) unless the query already has LIMIT or FETCH.

Return ONLY the SQL query. No markdown, no explanations.
"""


class OllamaSqlGenerator:
    """Ollama-based implementation of SqlGenerator protocol."""

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        schema_context: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            model_name: Ollama model. Defaults to settings.generation_model.
            base_url: Ollama API base URL. Defaults to settings.ollama_base_url.
            schema_context: Rules and schema description prepended to every
                prompt. Defaults to the rules alone.
            timeout: Request timeout in seconds. Defaults to settings.generation_timeout.
            client: Pre-built HTTP client (tests pass one with a mock transport).
        """
        self._model_name = model_name or settings.generation_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._schema_context = build_schema_context() if schema_context is None else schema_context
        self._timeout = timeout or settings.generation_timeout
        self._client = client

    @classmethod
    def create(cls, schema_context: str | None = None) -> "OllamaSqlGenerator":
        """Factory method to create OllamaSqlGenerator with defaults.

        The schema context is read from settings.schema_context_path unless given.
        """
        if schema_context is None:
            schema_context = load_schema_context(settings.schema_context_path)
        return cls(schema_context=schema_context)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @property
    def model_name(self) -> str:
        return self._model_name

    def build_prompt(self, question: str) -> str:
        return PROMPT_TEMPLATE.format(schema_context=self._schema_context, question=question)

    async def generate(self, question: str) -> str:
        return await self.complete(self.build_prompt(question))

    async def complete(self, prompt: str) -> str:
        """Send a raw prompt to the model and return its text.

        Raises:
            GenerationError: On transport errors, error statuses, non-JSON
                bodies or an empty completion
        """
        payload = {
            "model": self._model_name,
            "prompt": prompt,
            "stream": False,
        }
        try:
            response = await self.client.post(f"{self._base_url}/api/generate", json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("LLM call failed: %s", e)
            raise GenerationError("Failed to get a response from the LLM.") from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise GenerationError("LLM returned an empty response.")
        return text

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
