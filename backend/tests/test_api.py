"""
Backend API Tests
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from unittest.mock import AsyncMock, patch

from learnhub.core.database import get_db
from main import app

from conftest import OTHER_USER_ID, USER_ID

HEADERS = {"X-User-Id": USER_ID}
COMPLETION = "learnhub.services.ai_providers.openai_compatible.completion"


def completion_result(content, model="gpt-4-turbo-preview"):
    return {
        "content": content,
        "model": model,
        "finish_reason": "stop",
        "usage": {"prompt_tokens": 100, "completion_tokens": 20, "total_tokens": 120},
    }


@pytest.fixture
def client(engine):
    """Test client whose requests use the in-memory test database."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def provider_id(client):
    response = client.post(
        "/api/v1/ai-providers",
        json={"provider_type": "openai", "provider_name": "My OpenAI", "api_key": "sk-test"},
        headers=HEADERS,
    )
    assert response.status_code == 201
    return response.json()["id"]


class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"


class TestProviderEndpoints:
    """Provider configuration CRUD."""

    def test_create_never_returns_key(self, client):
        response = client.post(
            "/api/v1/ai-providers",
            json={"provider_type": "openai", "provider_name": "My OpenAI", "api_key": "sk-secret"},
            headers=HEADERS,
        )
        data = response.json()
        assert response.status_code == 201
        assert data["has_api_key"] is True
        assert data["is_default"] is True
        assert "sk-secret" not in response.text
        assert "api_key_encrypted" not in data

    def test_invalid_provider_type(self, client):
        response = client.post(
            "/api/v1/ai-providers",
            json={"provider_type": "gemini", "provider_name": "Gemini"},
            headers=HEADERS,
        )
        assert response.status_code == 422

    def test_list_update_delete(self, client, provider_id):
        listed = client.get("/api/v1/ai-providers", headers=HEADERS).json()
        assert [p["id"] for p in listed] == [provider_id]

        response = client.patch(
            f"/api/v1/ai-providers/{provider_id}", json={"provider_name": "Renamed"}, headers=HEADERS
        )
        assert response.json()["provider_name"] == "Renamed"

        assert client.delete(f"/api/v1/ai-providers/{provider_id}", headers=HEADERS).status_code == 204
        assert client.get(f"/api/v1/ai-providers/{provider_id}", headers=HEADERS).status_code == 404

    def test_other_users_provider_is_hidden(self, client, provider_id):
        response = client.get(f"/api/v1/ai-providers/{provider_id}", headers={"X-User-Id": OTHER_USER_ID})
        assert response.status_code == 404
        assert response.json() == {"detail": f"Provider {provider_id} not found"}

    def test_stored_catalog_and_default_model(self, client, provider_id):
        models = client.get(f"/api/v1/ai-providers/{provider_id}/catalog", headers=HEADERS).json()
        assert models[0]["model_id"] == "gpt-4-turbo-preview"
        assert models[0]["is_default"] is True

        gpt4 = next(m for m in models if m["model_id"] == "gpt-4")
        response = client.put(
            f"/api/v1/ai-providers/{provider_id}/models/{gpt4['id']}/default", headers=HEADERS
        )
        assert response.status_code == 200
        assert response.json()["model_id"] == "gpt-4"

    def test_types_and_predefined_models(self, client):
        assert client.get("/api/v1/ai-providers/types").json() == ["openai", "anthropic", "ollama", "lmstudio"]
        models = client.get("/api/v1/ai-providers/types/anthropic/models").json()
        assert models[0]["model_id"] == "claude-3-opus-20240229"
        assert client.get("/api/v1/ai-providers/types/gemini/models").status_code == 400


class TestChatEndpoints:
    def test_chat(self, client, provider_id):
        with patch(COMPLETION, new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_result("Hello!")
            response = client.post(
                "/api/v1/ai/chat",
                json={"messages": [{"role": "user", "content": "Hi"}]},
                headers=HEADERS,
            )
        assert response.status_code == 200
        data = response.json()
        assert data["content"] == "Hello!"
        assert data["provider_id"] == provider_id
        assert data["usage"]["total_tokens"] == 120

        stats = client.get("/api/v1/ai-providers/usage/stats", headers=HEADERS).json()
        assert stats["total_requests"] == 1
        assert stats["total_tokens"] == 120

    def test_chat_without_provider(self, client):
        response = client.post(
            "/api/v1/ai/chat", json={"messages": [{"role": "user", "content": "Hi"}]}, headers=HEADERS
        )
        assert response.status_code == 400
        assert "No default AI provider configured" in response.json()["detail"]

    def test_invalid_request(self, client, provider_id):
        with patch(COMPLETION, new_callable=AsyncMock) as mock_completion:
            response = client.post("/api/v1/ai/chat", json={"messages": []}, headers=HEADERS)
        assert response.status_code == 400
        assert response.json()["detail"] == "Messages array is required and cannot be empty"
        mock_completion.assert_not_called()

    def test_vendor_failure(self, client, provider_id):
        with patch(COMPLETION, new_callable=AsyncMock) as mock_completion:
            mock_completion.side_effect = RuntimeError("Rate limit reached")
            response = client.post(
                "/api/v1/ai/chat", json={"messages": [{"role": "user", "content": "Hi"}]}, headers=HEADERS
            )
        assert response.status_code == 502
        assert response.json()["detail"] == "OpenAI request failed: Rate limit reached"

    def test_stream(self, client, provider_id):
        async def fake_stream(**kwargs):
            for delta in ["Hel", "lo"]:
                yield delta

        with patch("learnhub.services.ai_providers.openai_compatible.stream_completion", fake_stream):
            response = client.post(
                "/api/v1/ai/chat/stream",
                json={"messages": [{"role": "user", "content": "Hi"}]},
                headers=HEADERS,
            )
        assert response.status_code == 200
        assert response.text == "Hello"
        assert response.headers["content-type"].startswith("text/plain")

    def test_stream_rejects_invalid_request(self, client, provider_id):
        response = client.post("/api/v1/ai/chat/stream", json={"messages": []}, headers=HEADERS)
        assert response.status_code == 400
        assert response.json()["detail"] == "Messages array is required and cannot be empty"

    def test_stream_vendor_failure(self, client, provider_id):
        async def failing_stream(**kwargs):
            raise RuntimeError("Rate limit reached")
            yield  # pragma: no cover

        with patch("learnhub.services.ai_providers.openai_compatible.stream_completion", failing_stream):
            response = client.post(
                "/api/v1/ai/chat/stream",
                json={"messages": [{"role": "user", "content": "Hi"}]},
                headers=HEADERS,
            )
        assert response.status_code == 502
        assert response.json()["detail"] == "OpenAI request failed: Rate limit reached"


class TestGenerationEndpoints:
    def test_generate_hints(self, client, provider_id, exercise):
        exercise_id = exercise.id
        with patch(COMPLETION, new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_result('["First", "Second", "Third"]')
            response = client.post(
                "/api/v1/ai/generate/hints",
                json={"exercise_id": exercise_id, "num_hints": 3},
                headers=HEADERS,
            )
        assert response.status_code == 200
        hints = response.json()
        assert [h["hint_level"] for h in hints] == [1, 2, 3]
        assert hints[-1]["reveals_solution"] is True

    def test_num_hints_is_bounded(self, client, provider_id):
        response = client.post(
            "/api/v1/ai/generate/hints", json={"exercise_id": "x", "num_hints": 9}, headers=HEADERS
        )
        assert response.status_code == 422

    def test_unparsable_output_is_not_echoed(self, client, provider_id, exercise):
        exercise_id = exercise.id
        with patch(COMPLETION, new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_result("I refuse. SECRET-RAW-OUTPUT")
            response = client.post(
                "/api/v1/ai/generate/hints", json={"exercise_id": exercise_id}, headers=HEADERS
            )
        assert response.status_code == 502
        assert response.json() == {"detail": "Could not parse JSON from AI response"}
        assert "SECRET-RAW-OUTPUT" not in response.text

    def test_missing_topic(self, client, provider_id):
        response = client.post(
            "/api/v1/ai/generate/objectives", json={"topic_id": "nope"}, headers=HEADERS
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Topic nope not found"

    def test_generate_quiz(self, client, provider_id, topic):
        topic_id = topic.id
        reply = (
            '[{"question": "Which method appends?", "options": ['
            '{"text": "push", "isCorrect": true}, {"text": "pop", "isCorrect": false}]}]'
        )
        with patch(COMPLETION, new_callable=AsyncMock) as mock_completion:
            mock_completion.return_value = completion_result(reply)
            response = client.post(
                "/api/v1/quizzes/generate",
                json={"topic_id": topic_id, "num_questions": 1, "title": "Arrays check"},
                headers=HEADERS,
            )
        assert response.status_code == 201
        quiz = response.json()
        assert quiz["title"] == "Arrays check"
        assert quiz["questions"][0]["options"][0]["is_correct"] is True
