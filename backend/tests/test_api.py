"""
Integration tests for the session HTTP API.
The application is built with a fake completion gateway.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeGateway
from sales_practice.config import Settings
from sales_practice.core.exceptions import (
    ServiceUnavailableError,
    TransportError,
    UpstreamError,
)
from sales_practice.main import create_app


@pytest.fixture
def test_settings():
    return Settings(log_file_enabled=False, log_console_enabled=False, log_api_requests=True)


@pytest.fixture
def gateway():
    return FakeGateway(replies=["What problems does it solve for me?", "Overall Performance: 7/10"])


@pytest.fixture
def client(test_settings, gateway):
    app = create_app(test_settings, gateway=gateway)
    with TestClient(app) as test_client:
        yield test_client


def _start(client, **overrides):
    body = {"product": "CRM Software", "customerProfile": "skeptical small-business owner"}
    body.update(overrides)
    response = client.post("/api/session/start", json=body)
    assert response.status_code == 200
    return response.json()["sessionId"]


class TestSystemEndpoints:
    """Tests for health and fallback routes."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "OK"

    def test_unknown_endpoint(self, client):
        response = client.get("/api/unknown")
        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "Endpoint not found"
        assert "POST /api/chat" in data["availableEndpoints"]

    def test_malformed_body(self, client):
        response = client.post(
            "/api/session/start",
            content="not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestStartSession:
    """Tests for POST /api/session/start."""

    def test_start(self, client):
        response = client.post("/api/session/start", json={
            "product": "CRM Software",
            "customerProfile": "skeptical small-business owner",
            "scenario": "Cold call",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["sessionId"]
        assert data["context"]["product"] == "CRM Software"
        assert data["context"]["customerProfile"] == "skeptical small-business owner"
        assert data["context"]["scenario"] == "Cold call"
        assert data["context"]["messageCount"] == 0
        assert data["context"]["lastActivity"] is None

    @pytest.mark.parametrize("body", [
        {"customerProfile": "owner"},
        {"product": "CRM"},
        {"product": "", "customerProfile": "owner"},
    ])
    def test_missing_fields(self, client, body):
        response = client.post("/api/session/start", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "Product and customer profile are required"


class TestChat:
    """Tests for POST /api/chat."""

    def test_chat(self, client):
        session_id = _start(client)
        response = client.post("/api/chat", json={
            "sessionId": session_id,
            "userMessage": "Hi, interested in our CRM?",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["reply"] == "What problems does it solve for me?"
        assert data["sessionInfo"]["messageCount"] == 1
        assert data["sessionInfo"]["sessionDuration"] >= 0

    def test_missing_fields(self, client):
        response = client.post("/api/chat", json={"sessionId": "abc"})
        assert response.status_code == 400

    def test_unknown_session(self, client):
        response = client.post("/api/chat", json={"sessionId": "missing", "userMessage": "hi"})
        assert response.status_code == 404
        assert "Session not found" in response.json()["error"]

    def test_model_server_down(self, client, gateway):
        session_id = _start(client)
        gateway.error = ServiceUnavailableError(gateway.endpoint)

        response = client.post("/api/chat", json={"sessionId": session_id, "userMessage": "hello?"})

        assert response.status_code == 503
        assert "LM Studio server is not running" in response.json()["error"]
        history = client.get(f"/api/session/{session_id}/history").json()["history"]
        assert [(h["role"], h["content"]) for h in history] == [("user", "hello?")]

    def test_upstream_error(self, client, gateway):
        session_id = _start(client)
        gateway.error = UpstreamError(400, "context length exceeded")

        response = client.post("/api/chat", json={"sessionId": session_id, "userMessage": "hello?"})

        assert response.status_code == 502
        data = response.json()
        assert data["upstreamStatus"] == 400
        assert "context length exceeded" in data["error"]

    def test_transport_error(self, client, gateway):
        session_id = _start(client)
        gateway.error = TransportError("timed out")

        response = client.post("/api/chat", json={"sessionId": session_id, "userMessage": "hello?"})

        assert response.status_code == 502
        assert "Failed to communicate with LLM" in response.json()["error"]


class TestContextAndAnalysis:
    """Tests for update-context and analyze."""

    def test_update_scenario_only(self, client):
        session_id = _start(client, scenario="Cold call")
        response = client.post("/api/session/update-context", json={
            "sessionId": session_id,
            "scenario": "Renewal meeting",
        })
        assert response.status_code == 200
        context = response.json()["context"]
        assert context["scenario"] == "Renewal meeting"
        assert context["product"] == "CRM Software"
        assert context["customerProfile"] == "skeptical small-business owner"

    def test_update_unknown_session(self, client):
        response = client.post("/api/session/update-context", json={
            "sessionId": "missing", "product": "X"
        })
        assert response.status_code == 404

    def test_analyze(self, client):
        session_id = _start(client)
        client.post("/api/chat", json={"sessionId": session_id, "userMessage": "Hi, interested in our CRM?"})

        response = client.post("/api/session/analyze", json={"sessionId": session_id})

        assert response.status_code == 200
        data = response.json()
        assert data["analysis"] == "Overall Performance: 7/10"
        assert data["sessionStats"]["messageCount"] == 1
        assert data["sessionStats"]["context"]["product"] == "CRM Software"
        assert data["sessionStats"]["duration"] >= 0

    def test_analyze_unknown_session(self, client):
        response = client.post("/api/session/analyze", json={"sessionId": "missing"})
        assert response.status_code == 404


class TestHistoryAndLifecycle:
    """Tests for history, deletion and listing."""

    def test_history(self, client):
        session_id = _start(client)
        client.post("/api/chat", json={"sessionId": session_id, "userMessage": "Hi, interested in our CRM?"})

        response = client.get(f"/api/session/{session_id}/history")

        assert response.status_code == 200
        data = response.json()
        assert [h["role"] for h in data["history"]] == ["user", "assistant"]
        assert [h["id"] for h in data["history"]] == [0, 1]
        assert all("timestamp" in h and "readAt" in h for h in data["history"])
        assert data["context"]["messageCount"] == 1

    def test_history_unknown_session(self, client):
        assert client.get("/api/session/missing/history").status_code == 404

    def test_delete_twice(self, client):
        session_id = _start(client)

        first = client.delete(f"/api/session/{session_id}")
        second = client.delete(f"/api/session/{session_id}")

        assert first.status_code == 200
        assert first.json()["message"] == "Session deleted successfully"
        assert second.status_code == 404
        assert client.get(f"/api/session/{session_id}/history").status_code == 404

    def test_list_sessions(self, client):
        session_id = _start(client)
        client.post("/api/chat", json={"sessionId": session_id, "userMessage": "hello"})

        first = client.get("/api/sessions").json()
        second = client.get("/api/sessions").json()

        assert first == second
        [entry] = first["activeSessions"]
        assert entry["sessionId"] == session_id
        assert entry["turnCount"] == 2
        assert entry["context"]["product"] == "CRM Software"

    def test_apps_do_not_share_sessions(self, test_settings, client):
        _start(client)
        other = create_app(test_settings, gateway=FakeGateway())
        with TestClient(other) as other_client:
            assert other_client.get("/api/sessions").json() == {"activeSessions": []}
