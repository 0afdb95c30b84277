"""Question → SQL → rows orchestration.

Ties the semantic cache, the SQL generator, the formatter, the guardrails
and the execution client together.
"""

import logging

from nl2sql_cache.entities import ExecutionResult
from nl2sql_cache.exceptions import InputRejectedError, SqlValidationError
from nl2sql_cache.protocols import SqlGenerator
from nl2sql_cache.repositories.execution_client import ExecutionApiClient

from .cache_service import SemanticCacheService
from .guardrails import validate_input, validate_sql, validate_syntax
from .sql_formatter import format_casing, strip_markdown_fences

logger = logging.getLogger(__name__)


class SqlPipelineService:
    """Generate and execute SQL for natural-language questions.

    Example:
        ```python
        pipeline = SqlPipelineService(
            cache=cache_service,
            generator=OllamaSqlGenerator.create(schema_context=schema),
            executor=ExecutionApiClient.create(),
        )
        sql = await pipeline.generate_sql("show top 10 users")
        result = await pipeline.execute_sql(sql)
        ```
    """

    def __init__(
        self,
        cache: SemanticCacheService,
        generator: SqlGenerator,
        executor: ExecutionApiClient,
    ) -> None:
        self._cache = cache
        self._generator = generator
        self._executor = executor

    async def generate_sql(self, question: str) -> str:
        """Turn a question into validated SQL, consulting the cache first.

        Business logic:
        1. Reject obviously mutating questions before any model call
        2. Return cached SQL for a semantically equivalent question
        3. Otherwise generate, strip fences, normalize casing, validate
        4. Cache the validated SQL

        Raises:
            InputRejectedError: If the question fails the pre-generation guard
            GenerationError: If the generator fails
            SqlValidationError: If the generated SQL fails the guardrails;
                such SQL is never cached
        """
        guard = validate_input(question)
        if not guard.is_valid:
            raise InputRejectedError(guard.error or "Question rejected")

        cached = await self._cache.find_similar(question)
        if cached is not None:
            return cached

        raw = await self._generator.generate(question)
        sql = format_casing(strip_markdown_fences(raw))

        validation = validate_syntax(sql)
        if not validation.is_valid:
            logger.warning("Generated SQL failed validation: %s", validation.errors)
            raise SqlValidationError(validation.errors)

        if validation.warnings:
            logger.warning("SQL validation warnings: %s", validation.warnings)

        await self._cache.cache_result(question, sql)
        return sql

    async def execute_sql(self, sql: str) -> ExecutionResult:
        """Validate and run SQL on the remote execution API.

        Raises:
            SqlValidationError: If the SQL fails the guardrails
            ExecutionError: If the remote call fails
            MalformedResponseError: If the remote API does not return rows
        """
        guard = validate_sql(sql)
        if not guard.is_valid:
            raise SqlValidationError(
                [guard.error] if guard.error else [], message=guard.error or "SQL query is invalid"
            )
        return await self._executor.execute(sql)

    @property
    def cache(self) -> SemanticCacheService:
        return self._cache
