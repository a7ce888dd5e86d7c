import json

import pytest
from fastapi.testclient import TestClient

from agents.generation.deck_orchestrator import DeckOrchestrator
from agents.generation.exceptions import NetworkError
from api.chat_server import app
from api.requests.api_ai import get_chat_service
from api.requests.api_presentations import get_orchestrator
from api.requests.api_trends import get_trend_cache
from models.requests import TrendItem
from services.chat_completion_service import ChatCompletionService
from services.http_client import HTTPResponse
from services.trend_service import TrendCache
from fakes import QUARTERLY_REPLY, StubChatService, make_config


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _use_orchestrator(chat):
    app.dependency_overrides[get_orchestrator] = lambda: DeckOrchestrator(config=make_config(), chat_service=chat)


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers


def test_ai_proxy_returns_upstream_json(client):
    upstream = {"choices": [{"message": {"role": "assistant", "content": "Hello"}}]}
    chat = StubChatService(response=HTTPResponse(status=200, text=json.dumps(upstream)))
    app.dependency_overrides[get_chat_service] = lambda: chat

    response = client.post("/api/ai", json={"prompt": "Say hello"})

    assert response.status_code == 200
    assert response.json() == upstream
    assert chat.calls[0]['messages'] == [{'role': 'user', 'content': 'Say hello'}]


def test_ai_proxy_passes_upstream_error_status(client):
    chat = StubChatService(response=HTTPResponse(status=429, text="rate limited"))
    app.dependency_overrides[get_chat_service] = lambda: chat

    response = client.post("/api/ai", json={"messages": [{"role": "user", "content": "hi"}]})

    assert response.status_code == 429
    assert response.json() == {"error": "API error: rate limited"}


def test_ai_proxy_without_key_is_a_server_error(client):
    app.dependency_overrides[get_chat_service] = lambda: ChatCompletionService(make_config(api_key=None).ai)

    response = client.post("/api/ai", json={"prompt": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "API key not configured"}


def test_ai_proxy_requires_input(client):
    response = client.post("/api/ai", json={})

    assert response.status_code == 422
    assert response.json()["error"]
    assert "detail" not in response.json()


def test_ai_proxy_unexpected_failure_is_a_server_error(client):
    app.dependency_overrides[get_chat_service] = lambda: StubChatService(error=RuntimeError("boom"))

    response = client.post("/api/ai", json={"prompt": "hi"})

    assert response.status_code == 500
    assert response.json() == {"error": "boom"}


def test_create_presentation(client):
    _use_orchestrator(StubChatService(reply=QUARTERLY_REPLY))

    response = client.post("/api/presentations", json={"prompt": "quarterly sales results"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Presentation ready"
    assert body["deck"]["title"] == "Quarterly Sales Results"
    assert [s["type"] for s in body["deck"]["slides"]][:3] == ["title", "overview", "bullets"]
    assert body["deck"]["slides"][2]["bullets"][0] == "Revenue up 12%"


def test_create_presentation_from_document(client):
    chat = StubChatService(reply=QUARTERLY_REPLY)
    _use_orchestrator(chat)

    response = client.post("/api/presentations", json={
        "prompt": "ignored",
        "document": {"content": "Q3 revenue notes", "type": "text/plain", "name": "notes.txt"},
    })

    assert response.status_code == 200
    assert chat.calls[0]['messages'][1]['content'].endswith("Q3 revenue notes")


@pytest.mark.parametrize("chat,status", [
    (StubChatService(error=NetworkError("Request timed out after 300000ms")), 504),
    (StubChatService(reply="no json here"), 502),
])
def test_create_presentation_maps_errors(client, chat, status):
    _use_orchestrator(chat)

    response = client.post("/api/presentations", json={"prompt": "quarterly sales results"})

    assert response.status_code == status
    body = response.json()
    assert body["error"]
    assert body["status"] == f"Error: {body['error']}"


def test_create_presentation_without_key_reports_status(client):
    app.dependency_overrides[get_orchestrator] = lambda: DeckOrchestrator(
        config=make_config(api_key=None), chat_service=StubChatService(reply=QUARTERLY_REPLY),
    )

    response = client.post("/api/presentations", json={"prompt": "quarterly sales results"})

    assert response.status_code == 500
    assert response.json() == {"error": "API key not configured", "status": "Error: API key not configured"}


def test_create_presentation_requires_prompt_or_document(client):
    response = client.post("/api/presentations", json={"prompt": "  "})

    assert response.status_code == 422
    assert set(response.json()) == {"error"}


def test_export_downloads_json(client):
    _use_orchestrator(StubChatService(reply=QUARTERLY_REPLY))
    deck = client.post("/api/presentations", json={"prompt": "quarterly sales results"}).json()["deck"]

    response = client.post("/api/presentations/export", json=deck)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.headers["content-disposition"] == 'attachment; filename="quarterly-sales-results-presentation.json"'
    assert response.json() == deck


def test_trends(client):
    async def generator():
        return TrendItem(category="Science", title="New exoplanet found", color="blue")

    app.dependency_overrides[get_trend_cache] = lambda: TrendCache(generator=generator, min_trends=2)

    response = client.get("/api/trends")

    assert response.status_code == 200
    assert len(response.json()["trends"]) == 2
    assert response.json()["trends"][0]["title"] == "New exoplanet found"
