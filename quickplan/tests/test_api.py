"""
Tests for the quick-plan REST endpoints.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from quickplan.orchestrator.planning_api import PlanningDependencies, configure_dependencies, router
from quickplan.orchestrator.schemas import QuestionConfig
from quickplan.pipeline.mock_data import MockDiscoveryService
from quickplan.tests.factories import FakeChat, answer_for


BASE = "/api/quick-plan"


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Client over a bare app with offline collaborators; debug logs go to tmp_path."""
    monkeypatch.chdir(tmp_path)
    configure_dependencies(
        PlanningDependencies(services=MockDiscoveryService(), suggestions=None, chat=FakeChat())
    )
    app = FastAPI()
    app.include_router(router)
    yield TestClient(app)
    configure_dependencies(PlanningDependencies())


def _start(client, destination=None):
    body = {"destination": destination} if destination else {}
    response = client.post(f"{BASE}/start", json=body)
    assert response.status_code == 200
    return response.json()


def _answer(client, payload, answer):
    return client.post(
        f"{BASE}/respond",
        json={"session_id": payload["session_id"], "question_id": payload["question"]["id"], "answer": answer},
    )


def _answer_current(client, payload):
    question = QuestionConfig.model_validate(payload["question"])
    response = _answer(client, payload, answer_for(question))
    assert response.status_code == 200, response.text
    return response.json()


# ============================================================================
# TestStart
# ============================================================================


class TestStart:
    """Tests for POST /start."""

    def test_start_without_destination(self, client):
        """A bare start greets the user and asks for the destination."""
        payload = _start(client)

        assert payload["status"] == "question"
        assert payload["phase"] == "gathering"
        assert payload["question"]["field"] == "destination"
        assert payload["messages"][0]["role"] == "assistant"
        assert payload["messages"][0]["mood"] == "excited"

    def test_start_with_destination(self, client):
        """A destination in the request is answered up front."""
        payload = _start(client, destination="Bali")

        assert payload["question"]["field"] == "dates"

    def test_start_with_empty_destination_rejected(self, client):
        """A destination that is only markup is rejected."""
        response = client.post(f"{BASE}/start", json={"destination": "<b></b>"})

        assert response.status_code == 422
        assert "destination" in response.json()["detail"]


# ============================================================================
# TestRespond
# ============================================================================


class TestRespond:
    """Tests for POST /respond and navigation endpoints."""

    def test_unknown_session(self, client):
        """Answers for unknown sessions are 404s."""
        response = client.post(f"{BASE}/respond", json={"session_id": "nope", "answer": "Bali"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Session nope not found"

    def test_invalid_answer_is_422(self, client):
        """A rejected answer reports the reason and changes nothing."""
        payload = _start(client, destination="Bali")

        response = _answer(client, payload, "next weekend")

        assert response.status_code == 422
        assert response.json()["detail"].startswith("dates:")
        status = client.get(f"{BASE}/session/{payload['session_id']}").json()
        assert status["question_history"] == ["destination"]

    def test_stale_question_id_is_422(self, client):
        """Answers must target the current question."""
        payload = _start(client)
        payload["question"]["id"] = "q-destination-0"

        response = _answer(client, payload, "Bali")

        assert response.status_code == 422

    def test_go_back(self, client):
        """Going back re-asks the previous question."""
        payload = _start(client, destination="Bali")

        response = client.post(f"{BASE}/go-back", json={"session_id": payload["session_id"]})

        assert response.status_code == 200
        assert response.json()["question"]["field"] == "destination"

    def test_free_text_question(self, client):
        """Free-text questions are answered by the chat model."""
        payload = _start(client)

        response = client.post(
            f"{BASE}/free-text", json={"session_id": payload["session_id"], "text": "What's a good month?"}
        )

        assert response.status_code == 200
        assert response.json()["type"] == "question"
        assert response.json()["response"] == "Sounds great!"

    def test_full_session_to_completion(self, client):
        """Answering every question ends with a completed session."""
        payload = _start(client)
        for _ in range(40):
            if payload["question"]["field"] == "satisfaction":
                break
            payload = _answer_current(client, payload)

        assert payload["phase"] == "reviewing"
        response = _answer(client, payload, True)

        assert response.status_code == 200
        assert response.json()["status"] == "complete"
        assert response.json()["phase"] == "satisfied"


# ============================================================================
# TestSessionManagement
# ============================================================================


class TestSessionManagement:
    """Tests for export, import, status and deletion."""

    def test_export_delete_import(self, client):
        """A deleted session can be restored from its export."""
        payload = _start(client, destination="Bali")
        session_id = payload["session_id"]

        snapshot = client.get(f"{BASE}/export/{session_id}").json()
        assert client.delete(f"{BASE}/session/{session_id}").json() == {"message": f"Session {session_id} deleted"}
        assert client.get(f"{BASE}/session/{session_id}").json()["exists"] is False

        imported = client.post(f"{BASE}/import", json=snapshot)
        resumed = client.get(f"{BASE}/next-question/{session_id}")

        assert imported.status_code == 200
        assert imported.json()["exists"] is True
        assert imported.json()["question_history"] == ["destination"]
        assert resumed.json()["question"]["field"] == "dates"

    def test_delete_unknown_session(self, client):
        """Deleting an unknown session is a 404."""
        assert client.delete(f"{BASE}/session/missing").status_code == 404

    def test_export_unknown_session(self, client):
        """Exporting an unknown session is a 404."""
        assert client.get(f"{BASE}/export/missing").status_code == 404

    def test_health(self, client):
        """Health check reports the service name."""
        response = client.get(f"{BASE}/health")

        assert response.json() == {"status": "healthy", "service": "quick-plan-orchestrator"}
