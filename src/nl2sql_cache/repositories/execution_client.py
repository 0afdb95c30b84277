"""Client for the remote SQL execution API.

The API takes the SQL statement as the ``tab`` query parameter of a GET
request and answers with a JSON array of row objects.
"""

import logging
import re
from typing import Any

import httpx

from nl2sql_cache.config import settings
from nl2sql_cache.entities import ExecutionResult
from nl2sql_cache.exceptions import ExecutionError, MalformedResponseError

logger = logging.getLogger(__name__)

_SELECT_LIST = re.compile(r"SELECT\s+(.*?)\s+FROM", re.IGNORECASE | re.DOTALL)
_ALIAS = re.compile(r"as\s+(\w+)$", re.IGNORECASE)

_VALUE_KEYS = ("value", "total", "count")
_CATEGORY_KEYS = ("category", "name", "region")


def extract_column_order(sql: str, rows: list[dict[str, Any]]) -> list[str]:
    """Order the row keys the way the SELECT list names them.

    Aliases (``COUNT(*) AS value``) resolve to the alias and qualified names
    (``t.user_id``) to the bare column. Matching against row keys is
    case-insensitive. Falls back to the first row's key order when nothing
    in the SELECT list lines up.
    """
    if not rows:
        return []
    available = list(rows[0].keys())

    match = _SELECT_LIST.search(sql)
    if not match:
        return available

    parsed = []
    for column in match.group(1).split(","):
        column = column.strip()
        alias = _ALIAS.search(column)
        if alias:
            parsed.append(alias.group(1))
        else:
            parsed.append(column.split(".")[-1])

    key_map = {key.lower(): key for key in available}
    ordered = [key_map[col.lower()] for col in parsed if col.lower() in key_map]
    return ordered or available


def determine_visualization_type(rows: list[dict[str, Any]]) -> str:
    """Suggest how the frontend should render ``rows``."""
    if not rows:
        return "table"

    keys = list(rows[0].keys())
    if len(rows) == 1 and len(keys) == 1:
        return "metric"

    has_value = any(key in keys for key in _VALUE_KEYS)
    has_category = any(key in keys for key in _CATEGORY_KEYS)
    if has_value and has_category:
        return "bar"

    return "table"


class ExecutionApiClient:
    """Async HTTP client for the remote execution API."""

    def __init__(
        self,
        base_url: str | None = None,
        path: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the execution client.

        Args:
            base_url: API base URL. Defaults to settings.external_db_url.
            path: Report endpoint path. Defaults to settings.external_db_path.
            timeout: Request timeout in seconds. Defaults to settings.execution_timeout.
            client: Pre-built HTTP client (tests pass one with a mock transport).
        """
        self._base_url = (base_url or settings.external_db_url).rstrip("/")
        self._path = path or settings.external_db_path
        self._timeout = timeout or settings.execution_timeout
        self._client = client

    @classmethod
    def create(cls) -> "ExecutionApiClient":
        """Factory method to create ExecutionApiClient from settings."""
        return cls()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    @property
    def url(self) -> str:
        return f"{self._base_url}{self._path}"

    async def execute(self, sql: str) -> ExecutionResult:
        """Run ``sql`` remotely and return its rows with display hints.

        Raises:
            ExecutionError: If the API is unreachable or answers with an error status
            MalformedResponseError: If the body is not a JSON array
        """
        logger.info("Executing SQL query via external API")
        logger.debug("SQL: %s", sql)

        try:
            response = await self.client.get(self.url, params={"tab": sql})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            raise ExecutionError(_remote_error_message(e.response), status_code=status_code) from e
        except httpx.HTTPError as e:
            logger.error("External API unreachable: %s", e)
            raise ExecutionError("No response from external API. Check if the service is running.") from e

        try:
            rows = response.json()
        except ValueError as e:
            raise MalformedResponseError("Unexpected response format from external API") from e

        if not isinstance(rows, list):
            raise MalformedResponseError("Unexpected response format from external API")

        logger.info("Query executed successfully, returned %d rows", len(rows))
        return ExecutionResult(
            data=rows,
            column_order=extract_column_order(sql, rows),
            visualization_type=determine_visualization_type(rows),
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _remote_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return f"External API error: {response.status_code}"
