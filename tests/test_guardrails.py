"""Tests for SQL guardrails."""

import pytest

from nl2sql_cache.services.guardrails import (
    INPUT_REJECTED_MESSAGE,
    validate_input,
    validate_sql,
    validate_syntax,
)

SAFE_SQL = "SELECT user_id FROM application_user FETCH FIRST 10 ROWS ONLY"


def test_safe_query_is_valid():
    result = validate_syntax(SAFE_SQL)
    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []


def test_delete_is_rejected_and_named():
    result = validate_syntax("DELETE FROM users")
    assert not result.is_valid
    assert any("DELETE" in error for error in result.errors)


@pytest.mark.parametrize(
    "operation", ["DROP", "DELETE", "UPDATE", "INSERT", "ALTER", "CREATE", "TRUNCATE", "GRANT", "REVOKE"]
)
def test_every_prohibited_operation_is_rejected(operation):
    result = validate_syntax(f"SELECT a FROM t WHERE x = 1; {operation.lower()} something")
    assert not result.is_valid
    assert any(f"Prohibited operation detected: {operation}" in error for error in result.errors)


def test_keyword_inside_identifier_is_not_prohibited():
    result = validate_syntax("SELECT created_by FROM users")
    assert result.is_valid
    assert result.errors == []


def test_must_start_with_select():
    result = validate_syntax("WITH x AS (SELECT 1 FROM t) SELECT * FROM x")
    assert not result.is_valid
    assert "Query must start with SELECT keyword" in result.errors


def test_must_have_from_clause():
    result = validate_syntax("SELECT 1")
    assert not result.is_valid
    assert "Query must contain a FROM clause" in result.errors


def test_unbalanced_parentheses():
    result = validate_syntax("SELECT * FROM (SELECT 1")
    assert not result.is_valid
    assert "Unbalanced parentheses detected" in result.errors


def test_multiple_statements():
    result = validate_syntax("SELECT name FROM t; SELECT 1;")
    assert not result.is_valid
    assert any("Multiple SQL statements" in error for error in result.errors)


def test_single_trailing_semicolon_allowed():
    assert validate_syntax("SELECT name FROM t FETCH FIRST 5 ROWS ONLY;").is_valid


def test_unclosed_quotes():
    single = validate_syntax("SELECT a FROM t WHERE b = 'x")
    double = validate_syntax('SELECT "a FROM t')
    assert "Unclosed single quotes detected" in single.errors
    assert "Unclosed double quotes detected" in double.errors


@pytest.mark.parametrize("sql", ["", "   ", "\n\t"])
def test_empty_short_circuits(sql):
    result = validate_syntax(sql)
    assert not result.is_valid
    assert result.errors == ["SQL query is empty"]


def test_missing_row_limit_is_only_a_warning():
    result = validate_syntax("SELECT a FROM t")
    assert result.is_valid
    assert any("No row limit specified" in warning for warning in result.warnings)


@pytest.mark.parametrize("limit", ["LIMIT 5", "FETCH FIRST 5 ROWS ONLY"])
def test_row_limit_clauses_silence_warning(limit):
    result = validate_syntax(f"SELECT a FROM t {limit}")
    assert not any("No row limit" in warning for warning in result.warnings)


def test_glued_keyword_is_a_typo_warning():
    result = validate_syntax("SELECT a FROM t GROUPBY a FETCH FIRST 5 ROWS ONLY")
    assert result.is_valid
    assert "Possible typo in keyword: GROUP BY" in result.warnings


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT joined_at FROM t FETCH FIRST 5 ROWS ONLY",
        "SELECT fromage, wherever, selected FROM t FETCH FIRST 5 ROWS ONLY",
        "SELECT a FROM t JOIN u ON t.id = u.id FETCH FIRST 5 ROWS ONLY",
        "SELECT groupby_col FROM t ORDER BY a FETCH FIRST 5 ROWS ONLY",
    ],
)
def test_identifiers_containing_keywords_are_not_typos(sql):
    assert validate_syntax(sql).warnings == []


def test_keywords_run_together_are_typos():
    result = validate_syntax("SELECT a FROMWHERE t FETCH FIRST 5 ROWS ONLY")
    assert "Possible typo in keyword: FROM" in result.warnings
    assert "Possible typo in keyword: WHERE" in result.warnings


def test_spaced_keyword_is_not_a_typo():
    result = validate_syntax("SELECT a FROM t GROUP BY a ORDER BY a FETCH FIRST 5 ROWS ONLY")
    assert result.warnings == []


def test_validate_sql_joins_errors():
    result = validate_sql("DELETE FROM users")
    assert not result.is_valid
    assert "Prohibited operation detected: DELETE" in result.error
    assert ", " in result.error

    assert validate_sql(SAFE_SQL).is_valid


@pytest.mark.parametrize(
    "question",
    [
        "show top 10 users",
        "which users updated their profile last week?",
        "list deleted_at values for claims",
        "how many inserts happened yesterday",
    ],
)
def test_input_accepts_read_questions(question):
    assert validate_input(question).is_valid


@pytest.mark.parametrize(
    "question",
    [
        "delete all users",
        "Drop the claims table",
        "please update user 5 name to bob",
        "can you truncate claim_item",
        "insert a new user",
    ],
)
def test_input_rejects_mutating_verbs(question):
    result = validate_input(question)
    assert not result.is_valid
    assert result.error == INPUT_REJECTED_MESSAGE


def test_input_rejects_long_text():
    result = validate_input("a" * 501)
    assert not result.is_valid
    assert result.error == "Query too long"
    assert validate_input("a" * 500).is_valid


def test_input_length_bound_is_configurable():
    assert not validate_input("show users", max_length=5).is_valid
