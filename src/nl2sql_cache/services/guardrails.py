"""
SQL guardrails: rule-based validation of questions and generated SQL.

This is pattern matching, not a parser. It blocks an enumerated set of
dangerous operations and obvious structural errors; it will accept some
malformed SQL and reject some valid-but-unusual SQL. Callers only depend on
``validate_syntax``'s contract, so a grammar-based implementation can
replace the rules below without touching them.
"""

import logging
import re

from nl2sql_cache.config import settings
from nl2sql_cache.entities import InputValidation, ValidationResult

logger = logging.getLogger(__name__)

# =============================================================================
# Policy
# =============================================================================

PROHIBITED_OPERATIONS: tuple[str, ...] = (
    "DROP",
    "DELETE",
    "UPDATE",
    "INSERT",
    "ALTER",
    "CREATE",
    "TRUNCATE",
    "GRANT",
    "REVOKE",
)

FORBIDDEN_INPUT_VERBS: tuple[str, ...] = ("drop", "delete", "truncate", "update", "insert", "alter")

ROW_LIMIT_KEYWORDS: tuple[str, ...] = ("FETCH", "LIMIT", "TOP")

TYPO_CHECKED_KEYWORDS: tuple[str, ...] = (
    "SELECT",
    "FROM",
    "WHERE",
    "JOIN",
    "ON",
    "GROUP BY",
    "ORDER BY",
    "HAVING",
)

INPUT_REJECTED_MESSAGE = "You can only view the information. Editing or making changes is not permitted."

_PROHIBITED_PATTERNS = {op: re.compile(rf"\b{op}\b", re.IGNORECASE) for op in PROHIBITED_OPERATIONS}
_GLUED_KEYWORDS = {keyword: keyword.replace(" ", "") for keyword in TYPO_CHECKED_KEYWORDS}
_GLUED_FORMS = frozenset(_GLUED_KEYWORDS.values())
_FROM_CLAUSE = re.compile(r"\bFROM\b")
_WHITESPACE = re.compile(r"\s+")
_WORD = re.compile(r"\w+")

# =============================================================================
# Pre-generation guard (advisory)
# =============================================================================


def validate_input(text: str, max_length: int | None = None) -> InputValidation:
    """
    Cheap pre-filter run on a question before any model call.

    Rejects questions longer than ``max_length`` and questions that use a
    mutating verb as a standalone word or as their first token. Advisory
    only: generated SQL still goes through ``validate_syntax``.

    Args:
        text: The user's question
        max_length: Length bound. Defaults to settings.max_question_length.

    Returns:
        InputValidation with the rejection reason when invalid
    """
    limit = max_length or settings.max_question_length
    if len(text) > limit:
        return InputValidation(is_valid=False, error="Query too long")

    # The leading token is one of the words, so one membership test covers both.
    words = set(_WORD.findall(text.lower()))
    if words.intersection(FORBIDDEN_INPUT_VERBS):
        return InputValidation(is_valid=False, error=INPUT_REJECTED_MESSAGE)

    return InputValidation(is_valid=True)


# =============================================================================
# Post-generation validation
# =============================================================================


def _is_glued_keyword(word: str, keyword: str, glued: str) -> bool:
    """True if ``word`` is ``keyword`` with its own spaces dropped, or run
    together with another checked keyword (``FROMWHERE``).

    Identifiers that merely contain a keyword, like ``JOINED_AT``, do not count.
    """
    if word == glued:
        return " " in keyword
    if word.startswith(glued) and word[len(glued) :] in _GLUED_FORMS:
        return True
    return word.endswith(glued) and word[: -len(glued)] in _GLUED_FORMS


def validate_syntax(sql: str) -> ValidationResult:
    """
    Validate a SQL statement against the read-only policy.

    Errors (any one makes the statement invalid):
    - empty input (short-circuits the other rules)
    - a prohibited operation keyword anywhere, as a whole word
    - not starting with SELECT
    - no FROM clause
    - unbalanced parentheses
    - odd number of single or double quotes
    - more than one ``;``

    Warnings (never affect validity):
    - no FETCH / LIMIT / TOP row limit
    - keyword letters run together, e.g. ``GROUPBY``

    Args:
        sql: SQL text, already formatted

    Returns:
        ValidationResult
    """
    errors: list[str] = []
    warnings: list[str] = []

    normalized = _WHITESPACE.sub(" ", sql.strip())
    if not normalized:
        errors.append("SQL query is empty")
        return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

    upper = normalized.upper()

    # 1. Prohibited operations (word boundary, so CREATED_BY is fine)
    for operation, pattern in _PROHIBITED_PATTERNS.items():
        if pattern.search(upper):
            errors.append(f"Prohibited operation detected: {operation}. Only SELECT queries are allowed.")

    # 2. Statement shape
    if not upper.startswith("SELECT"):
        errors.append("Query must start with SELECT keyword")

    if not _FROM_CLAUSE.search(upper):
        errors.append("Query must contain a FROM clause")

    # 3. Balanced punctuation
    if normalized.count("(") != normalized.count(")"):
        errors.append("Unbalanced parentheses detected")

    if normalized.count("'") % 2 != 0:
        errors.append("Unclosed single quotes detected")
    if normalized.count('"') % 2 != 0:
        errors.append("Unclosed double quotes detected")

    # 4. Statement stacking
    if normalized.count(";") > 1:
        errors.append("Multiple SQL statements detected. Only single SELECT queries are allowed.")

    # Warnings
    if not any(keyword in upper for keyword in ROW_LIMIT_KEYWORDS):
        warnings.append("No row limit specified. Consider adding FETCH FIRST n ROWS ONLY for large datasets.")

    words = set(_WORD.findall(upper))
    for keyword, glued in _GLUED_KEYWORDS.items():
        if any(_is_glued_keyword(word, keyword, glued) for word in words):
            warnings.append(f"Possible typo in keyword: {keyword}")

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate_sql(sql: str) -> InputValidation:
    """Compact pass/fail form of ``validate_syntax`` with errors joined."""
    result = validate_syntax(sql)
    if result.is_valid:
        return InputValidation(is_valid=True)
    logger.warning("SQL validation failed with %d error(s): %s", len(result.errors), result.errors)
    return InputValidation(is_valid=False, error=", ".join(result.errors))
