"""Tests for result insights."""

import pytest

from nl2sql_cache.exceptions import GenerationError
from nl2sql_cache.protocols import TextCompleter
from nl2sql_cache.services import InsightsService, generate_mock_insights

SQL = "SELECT region, SUM(amount) AS value FROM sales GROUP BY region"
ROWS = [{"region": "north", "value": 120}, {"region": "south", "value": 80}]


class FakeCompleter:
    def __init__(self, text: str = "North outsells south.\nInvest in the south region."):
        self.text = text
        self.fail = False
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise GenerationError("Failed to get a response from the LLM.")
        return self.text


def test_fallback_for_empty_result():
    assert generate_mock_insights([]) == [
        "No data available to generate insights.",
        "Consider adjusting your query parameters to retrieve results.",
    ]


def test_fallback_for_numeric_result():
    insights = generate_mock_insights(ROWS)
    assert insights[0] == (
        "The dataset contains 2 records with quantifiable metrics that could be analyzed for trends."
    )
    assert len(insights) == 2


def test_fallback_for_text_result():
    rows = [{"name": "alice", "active": True}, {"name": "bob", "active": False}]
    assert generate_mock_insights(rows) == [
        "Your query returned 2 records for analysis.",
        "Review the data distribution to identify any outliers or patterns that may require attention.",
    ]


@pytest.mark.asyncio
async def test_model_insights_are_returned():
    completer = FakeCompleter("  North outsells south.  \n\n Invest in the south region.\n")
    service = InsightsService(completer=completer)

    insights = await service.generate_insights(SQL, ROWS)

    assert isinstance(completer, TextCompleter)
    assert insights == ["North outsells south.", "Invest in the south region."]
    assert SQL in completer.prompts[0]
    assert "(first 5 rows of 2 total)" in completer.prompts[0]


@pytest.mark.asyncio
async def test_extra_lines_are_cut_to_two():
    service = InsightsService(completer=FakeCompleter("one\ntwo\nthree"))
    assert await service.generate_insights(SQL, ROWS) == ["one", "two"]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["only one insight", "", "\n\n"])
async def test_short_answer_falls_back(text):
    service = InsightsService(completer=FakeCompleter(text))
    assert await service.generate_insights(SQL, ROWS) == generate_mock_insights(ROWS)


@pytest.mark.asyncio
async def test_model_failure_falls_back():
    completer = FakeCompleter()
    completer.fail = True
    service = InsightsService(completer=completer)

    assert await service.generate_insights(SQL, []) == generate_mock_insights([])


@pytest.mark.asyncio
async def test_disabled_model_uses_fallback():
    assert await InsightsService().generate_insights(SQL, ROWS) == generate_mock_insights(ROWS)


def test_prompt_previews_first_five_rows():
    rows = [{"id": i} for i in range(8)]
    prompt = InsightsService().build_prompt("SELECT id FROM t", rows)
    assert '"id": 4' in prompt
    assert '"id": 5' not in prompt
    assert "of 8 total" in prompt
