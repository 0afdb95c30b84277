"""Tests for SQL casing normalization."""

import pytest

from nl2sql_cache.services.sql_formatter import format_casing, strip_markdown_fences


def test_keywords_upper_identifiers_lower():
    sql = "select user_id, First_Name from Application_User where user_id = 5 group by x order by y"
    assert format_casing(sql) == (
        "SELECT user_id, first_name FROM application_user WHERE user_id = 5 GROUP BY x ORDER BY y"
    )


def test_multi_word_keyword_matched_across_whitespace():
    assert format_casing("select a from t group\n   by a") == "SELECT a FROM t GROUP BY a"


def test_qualified_references_lowercased():
    assert format_casing("SELECT U.User_Id FROM Users U") == "SELECT u.user_id FROM users u"


def test_string_and_number_literals_unchanged():
    sql = "select name from people where Name = 'John' and age > 42"
    assert format_casing(sql) == "SELECT name FROM people WHERE name = 'John' AND age > 42"


def test_double_quoted_token_unchanged():
    assert format_casing('SELECT "UserId" FROM T') == 'SELECT "UserId" FROM t'


def test_keyword_substrings_in_identifiers_untouched():
    sql = "select created_by, order_id from Orders"
    assert format_casing(sql) == "SELECT created_by, order_id FROM orders"


def test_functions_and_punctuation():
    sql = "select COUNT(*) as Total from T;"
    assert format_casing(sql) == "SELECT count(*) AS total FROM t;"


def test_row_limit_clause():
    sql = "select user_id from application_user fetch first 10 rows only"
    assert format_casing(sql) == "SELECT user_id FROM application_user FETCH FIRST 10 ROWS ONLY"


def test_whitespace_and_newlines_preserved():
    sql = "SELECT a,\n       b\nFROM t\nWHERE a = 1"
    assert format_casing(sql) == sql


def test_multi_word_keywords_stay_upper():
    assert format_casing("SELECT a FROM t ORDER BY a") == "SELECT a FROM t ORDER BY a"
    assert format_casing("select a from t group by a") == "SELECT a FROM t GROUP BY a"


def test_lone_keyword_words_are_identifiers():
    assert format_casing("SELECT Partition, By, Group FROM t") == "SELECT partition, by, group FROM t"
    assert format_casing("SELECT t.Order FROM t ORDER BY t.Order") == "SELECT t.order FROM t ORDER BY t.order"


@pytest.mark.parametrize(
    "sql",
    [
        "select A from B",
        "Select u.Name, COUNT(*) As Cnt From Users u Group  By u.Name Order by Cnt desc",
        "select 'Hello World' as Greeting from dual",
        "SELECT x FROM t WHERE s = 'new and old' OR s IS NULL",
        "select a from t partition\tby b",
        "",
        "   ",
        "'unterminated and odd",
        "select 3.14 as Pi, \"Quoted\" from t;",
    ],
)
def test_idempotent(sql):
    once = format_casing(sql)
    assert format_casing(once) == once


def test_strip_markdown_fences():
    assert strip_markdown_fences("```sql\nSELECT 1 FROM t\n```") == "SELECT 1 FROM t"
    assert strip_markdown_fences("```\nSELECT 1 FROM t\n```\n") == "SELECT 1 FROM t"
    assert strip_markdown_fences("  SELECT 1 FROM t  ") == "SELECT 1 FROM t"
