"""Remote execution result entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ExecutionResult:
    """Rows returned by the execution API plus display hints.

    Attributes:
        data: Row records as returned by the remote API
        column_order: Row keys in the order the SELECT list names them
        visualization_type: "table", "metric" or "bar"
        type: Result kind, always "table" for row sets
    """

    data: list[dict[str, Any]]
    column_order: list[str] = field(default_factory=list)
    visualization_type: str = "table"
    type: str = "table"
