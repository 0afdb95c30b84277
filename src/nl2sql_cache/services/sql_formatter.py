"""Casing normalization for generated SQL.

Keywords end up uppercase, identifiers lowercase, literals untouched.
``format_casing`` is idempotent: formatting its output again is a no-op.
"""

import re

SQL_KEYWORDS: tuple[str, ...] = (
    # Multi-word keywords first so the alternation prefers them.
    "GROUP BY",
    "ORDER BY",
    "PARTITION BY",
    "SELECT",
    "FROM",
    "WHERE",
    "JOIN",
    "INNER",
    "LEFT",
    "RIGHT",
    "OUTER",
    "FULL",
    "ON",
    "AND",
    "OR",
    "NOT",
    "IN",
    "LIKE",
    "BETWEEN",
    "IS",
    "NULL",
    "HAVING",
    "DISTINCT",
    "AS",
    "CASE",
    "WHEN",
    "THEN",
    "ELSE",
    "END",
    "UNION",
    "ALL",
    "LIMIT",
    "OFFSET",
    "FETCH",
    "FIRST",
    "NEXT",
    "ROWS",
    "ONLY",
    "WITH",
    "OVER",
)

# Tokens the identifier pass leaves alone. Multi-word keywords are whole
# tokens, so GROUP or BY on their own are still lowercased as identifiers.
_KEYWORD_TOKENS: frozenset[str] = frozenset(SQL_KEYWORDS)

_MULTI_WORD_KEYWORDS = [keyword for keyword in SQL_KEYWORDS if " " in keyword]

_KEYWORD_PATTERN = re.compile(
    r"\b(?:" + "|".join(r"\s+".join(keyword.split()) for keyword in SQL_KEYWORDS) + r")\b",
    re.IGNORECASE,
)

_TOKEN_SPLIT = re.compile(
    r"(\b(?:" + "|".join(re.escape(keyword) for keyword in _MULTI_WORD_KEYWORDS) + r")\b|\s+|[,();])"
)
_NUMERIC = re.compile(r"\d+")
_QUOTES = ("'", '"')

_FENCE_OPEN = re.compile(r"```sql", re.IGNORECASE)


def strip_markdown_fences(text: str) -> str:
    """Remove markdown code fences a model may wrap its SQL in."""
    return _FENCE_OPEN.sub("", text).replace("```", "").strip()


def _uppercase_keyword(match: re.Match[str]) -> str:
    return " ".join(match.group(0).upper().split())


def _normalize_token(token: str) -> str:
    if not token or token.isspace() or token in ",();":
        return token
    if token.upper() in _KEYWORD_TOKENS:
        return token
    if _NUMERIC.fullmatch(token) or token.startswith(_QUOTES):
        return token
    # Plain and dotted (table.column) identifiers alike.
    return token.lower()


def format_casing(sql: str) -> str:
    """Uppercase SQL keywords and lowercase table/column names.

    Two passes:
    1. Every keyword in ``SQL_KEYWORDS`` is uppercased where it appears as a
       whole word, case-insensitively. Multi-word keywords match across any
       run of whitespace and are rewritten with a single space.
    2. The text is split on whitespace and ``, ( ) ;``, with each multi-word
       keyword kept as one token; each remaining token is lowercased unless
       it is a keyword, purely numeric, or starts with a quote. A lone GROUP,
       ORDER, PARTITION or BY is an identifier.

    Args:
        sql: The SQL text to normalize

    Returns:
        The normalized SQL text
    """
    uppercased = _KEYWORD_PATTERN.sub(_uppercase_keyword, sql)
    return "".join(_normalize_token(token) for token in _TOKEN_SPLIT.split(uppercased))
