"""Short analyst-style insights about query results.

Insights come from the language model when one is configured. Whenever the
model is disabled, fails, or does not answer with exactly two lines, a
deterministic summary of the rows is returned instead, so the endpoint
always answers.
"""

import json
import logging
from typing import Any

from nl2sql_cache.protocols import TextCompleter

logger = logging.getLogger(__name__)

INSIGHT_COUNT = 2
PREVIEW_ROWS = 5

INSIGHTS_PROMPT = """
You are a data analyst providing actionable business insights.

SQL Query: {sql}

Data Preview (first {preview_rows} rows of {row_count} total):
{data_preview}

Generate exactly 2 actionable insights based on this data. Each insight should:
- Be specific and data-driven
- Provide a clear recommendation or observation
- Be concise (1-2 sentences each)

Return ONLY the 2 insights, one per line, without numbering or bullet points.
"""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def generate_mock_insights(rows: list[dict[str, Any]]) -> list[str]:
    """Deterministic fallback insights based only on the row count and types."""
    row_count = len(rows)
    if row_count == 0:
        return [
            "No data available to generate insights.",
            "Consider adjusting your query parameters to retrieve results.",
        ]

    if any(_is_number(value) for row in rows for value in row.values()):
        return [
            f"The dataset contains {row_count} records with quantifiable metrics that could be analyzed for trends.",
            "Consider segmenting this data by time periods or categories to identify patterns and opportunities.",
        ]

    return [
        f"Your query returned {row_count} records for analysis.",
        "Review the data distribution to identify any outliers or patterns that may require attention.",
    ]


class InsightsService:
    """Generate insights for a SQL statement and its result rows.

    Example:
        ```python
        service = InsightsService(completer=OllamaSqlGenerator.create())
        insights = await service.generate_insights(sql, result.data)
        ```
    """

    def __init__(self, completer: TextCompleter | None = None) -> None:
        """Initialize the service.

        Args:
            completer: Model client. None always uses the fallback insights.
        """
        self._completer = completer

    def build_prompt(self, sql: str, rows: list[dict[str, Any]]) -> str:
        return INSIGHTS_PROMPT.format(
            sql=sql,
            preview_rows=PREVIEW_ROWS,
            row_count=len(rows),
            data_preview=json.dumps(rows[:PREVIEW_ROWS], indent=2, default=str),
        )

    async def generate_insights(self, sql: str, rows: list[dict[str, Any]]) -> list[str]:
        if self._completer is None:
            logger.info("Insights model disabled, using fallback insights")
            return generate_mock_insights(rows)

        try:
            text = await self._completer.complete(self.build_prompt(sql, rows))
        except Exception as e:
            logger.warning("Insight generation failed, using fallback insights: %s", e)
            return generate_mock_insights(rows)

        insights = [line.strip() for line in text.splitlines() if line.strip()][:INSIGHT_COUNT]
        if len(insights) != INSIGHT_COUNT:
            logger.warning("Model returned %d insight(s), using fallback insights", len(insights))
            return generate_mock_insights(rows)
        return insights
