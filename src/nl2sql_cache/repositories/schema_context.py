"""Schema context for SQL generation prompts.

The context always opens with the CRITICAL RULES the generation prompt refers
to, followed by a description of the database. The description comes from
SCHEMA_CONTEXT_PATH: a ``.json`` schema document is rendered table by table,
any other file is included verbatim.

Schema document format::

    {
      "tables": [
        {
          "tableName": "claim",
          "description": "...",
          "businessDomain": "...",
          "totalRecords": 125000,
          "columns": [
            {"name": "claim_id", "type": "NUMBER", "description": "...",
             "isPrimaryKey": true},
            {"name": "submitter_id", "type": "NUMBER", "isForeignKey": true,
             "referencedTable": "application_user", "referencedColumn": "user_id"},
            {"name": "status", "type": "VARCHAR2", "sampleValues": ["OPEN", "CLOSED"]}
          ]
        }
      ],
      "relationships": [
        {"parent": "application_user", "parentKey": "user_id",
         "child": "claim", "childKey": "submitter_id"}
      ],
      "exampleQueries": [
        {"description": "Count active users",
         "sql": "SELECT COUNT(*) as value FROM application_user WHERE is_active = 1"}
      ]
    }
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SCHEMA_RULES = """
You are a SQL expert. Generate SQL queries based on the following database schema.

CRITICAL RULES:
1. Column names are CASE-SENSITIVE - use EXACT names as shown
2. Table names are CASE-SENSITIVE - use EXACT names as shown
3. Return ONLY the SQL query without markdown formatting
4. For single values, use aliases: SELECT COUNT(*) as value
5. For charts/aggregations, use pattern: SELECT category_column, SUM(value_column) as value FROM table GROUP BY category_column
6. For detailed lists/rows, SELECT specific columns. Do NOT aggregate if the user asks for details (e.g., "show me", "list", "details of").
7. Use JOINs to connect tables along the relationships listed in the schema.

DATABASE SCHEMA:

"""

MAX_OTHER_COLUMNS = 5
MAX_SAMPLE_VALUES = 3

_RULE = "═" * 67
_THIN_RULE = "─" * 69


def _column_line(column: dict[str, Any], label: str | None = None) -> str:
    line = f"  - {column['name']} ({column.get('type', 'UNKNOWN')})"
    if label:
        line += f" - {label}"
    if column.get("isForeignKey") and column.get("referencedTable"):
        line += f" → {column['referencedTable']}.{column.get('referencedColumn', '')}"
    if column.get("description"):
        line += f" - {column['description']}"
    samples = column.get("sampleValues")
    if samples and not label:
        line += f" [e.g., {', '.join(str(value) for value in samples[:MAX_SAMPLE_VALUES])}]"
    return line


def _render_table(table: dict[str, Any]) -> list[str]:
    header = f"Domain: {table.get('businessDomain', '')}"
    if table.get("totalRecords"):
        header += f" | Records: {table['totalRecords']:,}"

    lines = [
        _RULE,
        f"TABLE: {table['tableName']}",
        f"Description: {table.get('description', '')}",
        header,
        _THIN_RULE,
        "Key Columns:",
    ]

    columns = table.get("columns", [])
    primary = [col for col in columns if col.get("isPrimaryKey")]
    foreign = [col for col in columns if col.get("isForeignKey") and not col.get("isPrimaryKey")]
    plain = [col for col in columns if not col.get("isPrimaryKey") and not col.get("isForeignKey")]
    sampled = [col for col in plain if col.get("sampleValues")]
    others = [col for col in plain if not col.get("sampleValues") and col.get("description")]

    lines.extend(_column_line(col, "Primary Key") for col in primary)
    lines.extend(_column_line(col, "Foreign Key") for col in foreign)
    lines.extend(_column_line(col) for col in sampled)
    lines.extend(_column_line(col) for col in others[:MAX_OTHER_COLUMNS])
    if len(others) > MAX_OTHER_COLUMNS:
        lines.append(f"  ... and {len(others) - MAX_OTHER_COLUMNS} more columns")

    lines.append("")
    return lines


def build_schema_context(schema: dict[str, Any] | None = None) -> str:
    """Render the generation rules plus a schema document.

    Args:
        schema: Parsed schema document, or None for the rules alone

    Returns:
        The context text prepended to every generation prompt
    """
    if not schema:
        return SCHEMA_RULES

    lines: list[str] = []
    for table in schema.get("tables", []):
        lines.extend(_render_table(table))

    relationships = schema.get("relationships", [])
    if relationships:
        lines.extend([_RULE, "COMMON RELATIONSHIPS:", _THIN_RULE])
        lines.extend(
            f"{rel['parent']}.{rel['parentKey']} → {rel['child']}.{rel['childKey']}" for rel in relationships
        )
        lines.append("")

    examples = schema.get("exampleQueries", [])
    if examples:
        lines.extend([_RULE, "EXAMPLE QUERIES:", _THIN_RULE])
        for example in examples:
            lines.append(f"{example.get('description', '')}:")
            lines.extend(f"  {sql_line}" for sql_line in example["sql"].splitlines())
            lines.append("")

    return SCHEMA_RULES + "\n".join(lines)


def load_schema_context(path: str | Path | None) -> str:
    """Build the schema context from SCHEMA_CONTEXT_PATH.

    An unreadable or malformed file is logged and the rules are used alone.
    """
    if not path:
        return build_schema_context()

    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read schema context %s: %s", path, e)
        return build_schema_context()

    if path.suffix.lower() != ".json":
        return SCHEMA_RULES + raw

    try:
        schema = json.loads(raw)
        if not isinstance(schema, dict):
            raise TypeError("schema document must be a JSON object")
        context = build_schema_context(schema)
    except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
        logger.warning("Invalid schema document %s, using rules only: %s", path, e)
        return build_schema_context()

    logger.info("Schema context built from %s (%d tables)", path, len(schema.get("tables", [])))
    return context
