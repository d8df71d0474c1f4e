"""
Tests for the quiz session HTTP endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from app.api.quiz_session import get_quiz_session_service
from app.main import app


@pytest.fixture
def client(service):
    app.dependency_overrides[get_quiz_session_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def start(client, user_name="Ada", test_id="T1"):
    response = client.post(
        "/api/quiz/start-session",
        json={"userName": user_name, "testId": test_id},
    )
    assert response.status_code == 201
    return response.json()["data"]["sessionId"]


class TestListTests:

    def test_lists_catalog(self, client):
        response = client.get("/api/quiz/tests")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [t["testId"] for t in body["data"]] == ["T1", "T0"]
        assert body["data"][0]["totalQuestions"] == 2

    def test_unexpected_error_is_internal_error(self, client, service, monkeypatch):
        async def boom():
            raise RuntimeError("socket closed")

        monkeypatch.setattr(service, "list_tests", boom)

        response = client.get("/api/quiz/tests")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "INTERNAL_ERROR"
        assert body["errors"] == ["socket closed"]


class TestStartSession:

    def test_created(self, client, session_store):
        response = client.post("/api/quiz/start-session", json={"userName": "Ada", "testId": "T1"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Session successfully created."
        assert body["errors"] is None
        data = body["data"]
        assert data["testId"] == "T1"
        assert data["userName"] == "Ada"
        assert data["sessionId"] in session_store.docs

    def test_blank_user_name(self, client, session_store):
        response = client.post("/api/quiz/start-session", json={"userName": "  ", "testId": "T1"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"
        assert body["message"] == "Validation failed."
        assert any("User name is required." in e for e in body["errors"])
        assert session_store.docs == {}

    def test_missing_field(self, client):
        response = client.post("/api/quiz/start-session", json={"userName": "Ada"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_test(self, client):
        response = client.post("/api/quiz/start-session", json={"userName": "Ada", "testId": "T404"})

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_test_without_questions(self, client, session_store):
        response = client.post("/api/quiz/start-session", json={"userName": "Ada", "testId": "T0"})

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == "NOT_FOUND"
        assert "No questions found" in body["message"]
        assert session_store.docs == {}


class TestQuizFlow:

    def test_full_quiz(self, client):
        session_id = start(client)

        response = client.get(f"/api/quiz/session/{session_id}/next-question")
        assert response.status_code == 200
        assert "isCorrect" not in response.text
        assert "is_correct" not in response.text
        data = response.json()["data"]
        assert data["isQuizComplete"] is False
        assert data["question"]["id"] == "Q1"
        assert data["question"]["sequenceNumber"] == 1
        assert data["question"]["totalQuestions"] == 2

        response = client.post(
            f"/api/quiz/session/{session_id}/answer",
            json={"questionId": "Q1", "selectedOptionId": "optA"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data == {
            "questionId": "Q1",
            "isCorrect": True,
            "nextQuestionId": "Q2",
            "isQuizComplete": False,
        }

        response = client.post(
            f"/api/quiz/session/{session_id}/answer",
            json={"questionId": "Q2", "selectedOptionId": "optD"},
        )
        data = response.json()["data"]
        assert data["isCorrect"] is True
        assert data["nextQuestionId"] is None
        assert data["isQuizComplete"] is True

        response = client.get(f"/api/quiz/session/{session_id}/next-question")
        body = response.json()
        assert body["message"] == "Quiz finished. Proceed to final results."
        assert body["data"]["isQuizComplete"] is True
        assert body["data"]["question"] is None

        response = client.get(f"/api/quiz/session/{session_id}/result")
        assert response.status_code == 200
        result = response.json()["data"]
        assert result["sessionId"] == session_id
        assert result["score"] == 2
        assert result["totalAnswers"] == 2
        assert result["endTime"] is not None

    def test_specific_question(self, client):
        session_id = start(client)

        response = client.get(f"/api/quiz/session/{session_id}/question/Q2")

        assert response.status_code == 200
        question = response.json()["data"]["question"]
        assert question["id"] == "Q2"
        assert [o["id"] for o in question["options"]] == ["optC", "optD"]

    def test_duplicate_answer(self, client):
        session_id = start(client)
        payload = {"questionId": "Q1", "selectedOptionId": "optB"}
        client.post(f"/api/quiz/session/{session_id}/answer", json=payload)

        response = client.post(f"/api/quiz/session/{session_id}/answer", json=payload)

        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "ALREADY_ANSWERED"
        assert body["data"] is None

    def test_answer_after_result(self, client):
        session_id = start(client)
        client.get(f"/api/quiz/session/{session_id}/result")

        response = client.post(
            f"/api/quiz/session/{session_id}/answer",
            json={"questionId": "Q1", "selectedOptionId": "optA"},
        )

        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_STATE"

    def test_question_outside_test(self, client):
        session_id = start(client)

        response = client.post(
            f"/api/quiz/session/{session_id}/answer",
            json={"questionId": "Q404", "selectedOptionId": "optA"},
        )

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_blank_selected_option(self, client):
        session_id = start(client)

        response = client.post(
            f"/api/quiz/session/{session_id}/answer",
            json={"questionId": "Q1", "selectedOptionId": ""},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("path", ["next-question", "result", "question/Q1"])
    def test_unknown_session(self, client, path):
        response = client.get(f"/api/quiz/session/missing/{path}")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "NOT_FOUND"


def test_process_time_header(client):
    response = client.get("/api/quiz/tests")
    assert "X-Process-Time-Ms" in response.headers


def test_health_without_database(client):
    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["components"]["mongodb"]["status"] == "unhealthy"


def test_requests_without_database_connection():
    # No service override and no lifespan, so no MongoDB client exists
    response = TestClient(app).get("/api/quiz/tests")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "INTERNAL_ERROR"
    assert body["message"] == "Database not connected"
    assert body["data"] is None
