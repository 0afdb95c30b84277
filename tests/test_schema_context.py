"""Tests for the generation schema context."""

import json

from nl2sql_cache.repositories import OllamaSqlGenerator, build_schema_context, load_schema_context
from nl2sql_cache.repositories.schema_context import SCHEMA_RULES

SCHEMA = {
    "tables": [
        {
            "tableName": "claim",
            "description": "Recognition claims",
            "businessDomain": "Recognition",
            "totalRecords": 125000,
            "columns": [
                {"name": "claim_id", "type": "NUMBER", "isPrimaryKey": True, "description": "Claim key"},
                {
                    "name": "submitter_id",
                    "type": "NUMBER",
                    "isForeignKey": True,
                    "referencedTable": "application_user",
                    "referencedColumn": "user_id",
                },
                {"name": "status", "type": "VARCHAR2", "sampleValues": ["OPEN", "CLOSED", "VOID", "DRAFT"]},
            ]
            + [{"name": f"extra_{i}", "type": "VARCHAR2", "description": f"Extra {i}"} for i in range(7)],
        }
    ],
    "relationships": [
        {"parent": "application_user", "parentKey": "user_id", "child": "claim", "childKey": "submitter_id"}
    ],
    "exampleQueries": [{"description": "Count claims", "sql": "SELECT COUNT(*) as value\nFROM claim"}],
}


def test_rules_always_present():
    assert "CRITICAL RULES:" in build_schema_context()
    assert build_schema_context(SCHEMA).startswith(SCHEMA_RULES)


def test_tables_are_rendered():
    context = build_schema_context(SCHEMA)

    assert "TABLE: claim" in context
    assert "Domain: Recognition | Records: 125,000" in context
    assert "  - claim_id (NUMBER) - Primary Key - Claim key" in context
    assert "  - submitter_id (NUMBER) - Foreign Key → application_user.user_id" in context
    assert "  - status (VARCHAR2) [e.g., OPEN, CLOSED, VOID]" in context
    assert "  - extra_4 (VARCHAR2) - Extra 4" in context
    assert "extra_5" not in context
    assert "  ... and 2 more columns" in context


def test_relationships_and_examples_are_rendered():
    context = build_schema_context(SCHEMA)

    assert "COMMON RELATIONSHIPS:" in context
    assert "application_user.user_id → claim.submitter_id" in context
    assert "Count claims:\n  SELECT COUNT(*) as value\n  FROM claim" in context


def test_load_json_schema(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(SCHEMA), encoding="utf-8")
    assert load_schema_context(path) == build_schema_context(SCHEMA)


def test_load_plain_text_schema(tmp_path):
    path = tmp_path / "schema.txt"
    path.write_text("TABLE: users (id, email)", encoding="utf-8")
    assert load_schema_context(path) == SCHEMA_RULES + "TABLE: users (id, email)"


def test_missing_or_invalid_schema_falls_back_to_rules(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2", encoding="utf-8")
    not_an_object = tmp_path / "list.json"
    not_an_object.write_text("[]", encoding="utf-8")

    assert load_schema_context(None) == SCHEMA_RULES
    assert load_schema_context(tmp_path / "absent.json") == SCHEMA_RULES
    assert load_schema_context(broken) == SCHEMA_RULES
    assert load_schema_context(not_an_object) == SCHEMA_RULES


def test_generator_prompt_includes_rules_by_default():
    prompt = OllamaSqlGenerator(base_url="http://ollama.test").build_prompt("show claims")
    assert "CRITICAL RULES:" in prompt
    assert "User Question: show claims" in prompt
