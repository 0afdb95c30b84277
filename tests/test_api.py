"""
Tests for the NL2SQL API.
"""

import pytest
from fastapi.testclient import TestClient

from nl2sql_cache.api.app import API_NAME, create_app
from nl2sql_cache.entities import ExecutionResult
from nl2sql_cache.handlers import CacheHandler, InsightsHandler, SqlHandler
from nl2sql_cache.services import InsightsService, SqlPipelineService

QUESTION = "show top users"


class FakeExecutor:
    async def execute(self, sql: str) -> ExecutionResult:
        rows = [{"value": 7}]
        return ExecutionResult(data=rows, column_order=["value"], visualization_type="metric")


@pytest.fixture
def cache_service(make_cache, provider):
    provider.vectors[QUESTION] = [1.0, 0.0]
    return make_cache()


@pytest.fixture
def client(cache_service, generator):
    """Create a test client with handlers over fake collaborators."""
    generator.response = "select Id from Users fetch first 10 rows only"
    pipeline = SqlPipelineService(cache=cache_service, generator=generator, executor=FakeExecutor())

    app = create_app()
    app.state.cache_handler = CacheHandler(cache_service=cache_service)
    app.state.sql_handler = SqlHandler(pipeline=pipeline)
    app.state.insights_handler = InsightsHandler(insights_service=InsightsService())
    # No context manager: the lifespan would wire real services.
    return TestClient(app)


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == API_NAME
    assert data["endpoints"]["generate"] == "/generate"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["cache_healthy"] is True


def test_generate_then_stats(client, generator):
    """Generated SQL is cached and a repeat question skips the generator."""
    first = client.post("/generate", json={"question": QUESTION})
    assert first.status_code == 200
    assert first.json() == {"sql": "SELECT id FROM users FETCH FIRST 10 ROWS ONLY"}

    second = client.post("/generate", json={"question": QUESTION})
    assert second.json() == first.json()
    assert generator.questions == [QUESTION]

    stats = client.get("/cache/stats").json()
    assert stats["entryCount"] == 1
    assert stats["maxSize"] == 1000
    assert stats["threshold"] == 0.9
    assert stats["storageLocation"].endswith("cache.json")

    metrics = client.get("/cache/metrics").json()
    assert metrics["cache_hits"] == 1
    assert metrics["cache_misses"] == 1


def test_generate_rejects_mutating_question(client, generator):
    response = client.post("/generate", json={"question": "delete all users"})
    assert response.status_code == 400
    assert "Editing or making changes is not permitted" in response.json()["detail"]
    assert generator.questions == []


def test_generate_reports_invalid_sql(client, generator, cache_service):
    generator.response = "UPDATE users SET name = 'x'"
    response = client.post("/generate", json={"question": QUESTION})
    assert response.status_code == 422
    assert response.json()["detail"].startswith("Generated SQL is invalid:")
    assert cache_service.entries == ()


def test_generate_reports_generator_failure(client, generator):
    generator.fail = True
    response = client.post("/generate", json={"question": QUESTION})
    assert response.status_code == 502


def test_generate_requires_question(client):
    response = client.post("/generate", json={"question": ""})
    assert response.status_code == 422


def test_clear_cache(client):
    client.post("/generate", json={"question": QUESTION})

    response = client.delete("/cache")
    assert response.status_code == 200
    assert response.json() == {"message": "Cache cleared successfully"}
    assert client.get("/cache/stats").json()["entryCount"] == 0


def test_execute(client):
    response = client.post("/execute", json={"sql": "SELECT COUNT(*) AS value FROM users"})
    assert response.status_code == 200
    result = response.json()["result"]
    assert result["type"] == "table"
    assert result["data"] == [{"value": 7}]
    assert result["visualizationType"] == "metric"
    assert result["columnOrder"] == ["value"]


def test_execute_rejects_invalid_sql(client):
    response = client.post("/execute", json={"sql": "DROP TABLE users"})
    assert response.status_code == 400
    assert "Prohibited operation detected: DROP" in response.json()["detail"]


def test_validate(client):
    response = client.post("/sql/validate", json={"sql": "SELECT id FROM users"})
    assert response.status_code == 200
    data = response.json()
    assert data["isValid"] is True
    assert data["errors"] == []
    assert data["warnings"] == [
        "No row limit specified. Consider adding FETCH FIRST n ROWS ONLY for large datasets."
    ]


def test_format(client):
    response = client.post("/sql/format", json={"sql": "select U.Name from Users U where U.Id = 'Ab'"})
    assert response.status_code == 200
    assert response.json() == {"sql": "SELECT u.name FROM users u WHERE u.id = 'Ab'"}


def test_insights(client):
    response = client.post(
        "/insights",
        json={"sql": "SELECT COUNT(*) AS value FROM users", "resultData": [{"value": 7}]},
    )
    assert response.status_code == 200
    assert response.json()["insights"] == [
        "The dataset contains 1 records with quantifiable metrics that could be analyzed for trends.",
        "Consider segmenting this data by time periods or categories to identify patterns and opportunities.",
    ]


def test_insights_requires_result_data(client):
    response = client.post("/insights", json={"sql": "SELECT a FROM t"})
    assert response.status_code == 422


def test_health_reports_embedding_outage(client, provider):
    provider.fail = True
    data = client.get("/health").json()
    assert data == {"status": "unhealthy", "cache_healthy": True, "embedding_healthy": False}
