"""HTTP handler for result insights."""

from nl2sql_cache.dto import InsightsRequest, InsightsResponse
from nl2sql_cache.services import InsightsService


class InsightsHandler:
    """Handles POST /insights. Never fails on model errors: the service
    falls back to deterministic insights."""

    def __init__(self, insights_service: InsightsService) -> None:
        self._insights = insights_service

    async def get_insights(self, request: InsightsRequest) -> InsightsResponse:
        insights = await self._insights.generate_insights(request.sql, request.result_data)
        return InsightsResponse(insights=insights)
