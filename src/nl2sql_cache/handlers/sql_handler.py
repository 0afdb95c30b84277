"""HTTP handlers for SQL generation, execution and validation."""

import logging

from fastapi import HTTPException, status

from nl2sql_cache.dto import (
    ExecuteSqlResponse,
    ExecutionResultItem,
    FormatSqlResponse,
    GenerateSqlRequest,
    GenerateSqlResponse,
    SqlRequest,
    ValidationResponse,
)
from nl2sql_cache.exceptions import (
    ExecutionError,
    GenerationError,
    InputRejectedError,
    SqlValidationError,
)
from nl2sql_cache.services import SqlPipelineService, format_casing, validate_syntax

logger = logging.getLogger(__name__)


class SqlHandler:
    """HTTP handlers for the SQL pipeline.

    Guardrail and execution failures are surfaced with descriptive
    messages; cache failures never show up here.
    """

    def __init__(self, pipeline: SqlPipelineService) -> None:
        self._pipeline = pipeline

    async def generate_sql(self, request: GenerateSqlRequest) -> GenerateSqlResponse:
        """Handle POST /generate requests.

        Raises:
            HTTPException: 400 for rejected questions, 422 for invalid
                generated SQL, 502 when the generator fails
        """
        try:
            sql = await self._pipeline.generate_sql(request.question)
        except InputRejectedError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
        except SqlValidationError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
        except GenerationError as e:
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e

        return GenerateSqlResponse(sql=sql)

    async def execute_sql(self, request: SqlRequest) -> ExecuteSqlResponse:
        """Handle POST /execute requests.

        Raises:
            HTTPException: 400 for SQL failing the guardrails, 502 when the
                execution API fails or returns malformed data
        """
        try:
            result = await self._pipeline.execute_sql(request.sql)
        except SqlValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
        except ExecutionError as e:
            logger.error("External API error: %s", e.message)
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e

        return ExecuteSqlResponse(
            result=ExecutionResultItem(
                type=result.type,
                data=result.data,
                visualization_type=result.visualization_type,
                column_order=result.column_order,
            )
        )

    async def validate_sql(self, request: SqlRequest) -> ValidationResponse:
        """Handle POST /sql/validate requests."""
        result = validate_syntax(request.sql)
        return ValidationResponse(is_valid=result.is_valid, errors=result.errors, warnings=result.warnings)

    async def format_sql(self, request: SqlRequest) -> FormatSqlResponse:
        """Handle POST /sql/format requests."""
        return FormatSqlResponse(sql=format_casing(request.sql))
