"""Request DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GenerateSqlRequest(BaseModel):
    """Request DTO for generating SQL from a question.

    The handler will convert this to internal calls to the service layer.
    """

    question: str = Field(..., description="The natural-language question", min_length=1)


class SqlRequest(BaseModel):
    """Request DTO for endpoints that take a SQL statement."""

    sql: str = Field(..., description="The SQL statement", min_length=1)


class InsightsRequest(BaseModel):
    """Request DTO for result insights."""

    model_config = ConfigDict(populate_by_name=True)

    sql: str = Field(..., description="The SQL statement that produced the rows", min_length=1)
    result_data: list[dict[str, Any]] = Field(
        ...,
        alias="resultData",
        description="Rows returned by /execute",
    )
