import pytest

from ember.constants import MESSAGES, OFFLINE_ACTIVITIES, OFFLINE_SUMMARY
from ember.services.focus.engine import FocusSessionEngine
from ember.services.focus.errors import (
    GenerationFailedError,
    StorageError,
    UnconfiguredError,
)
from ember.services.focus.store import InMemorySessionStore
from tests.fakes import FakeGenerator


def answer_all(client, base_url, headers, category="Health"):
    answers = ["I feel tired", "no time", "2 hours"]
    response = None
    for index, answer in enumerate(answers):
        response = client.post(
            f"{base_url}/focus/{category}/answer",
            json={"answer": answer, "questionIndex": index},
            headers=headers,
        )
        assert response.status_code == 200
    return response


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health(client, base_url):
    response = client.get(f"{base_url}/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["status"] == "ok"
    assert body["error"] is None


def test_start_focus_session_returns_first_question(client, base_url, session_headers):
    response = client.post(f"{base_url}/focus/Health", headers=session_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert "Health" in data["question"]
    assert data["session_id"] == session_headers["X-Session-Id"]


def test_missing_session_header_is_rejected(client, base_url):
    response = client.post(f"{base_url}/focus/Health")

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": MESSAGES["session_id_required"]}


def test_blank_session_header_is_rejected(client, base_url):
    response = client.get(f"{base_url}/focus/active", headers={"X-Session-Id": "   "})

    assert response.status_code == 400


def test_answers_walk_through_questions(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/focus/Health/answer",
        json={"answer": "I feel tired", "questionIndex": 0},
        headers=session_headers,
    )

    data = response.json()["data"]
    assert data["is_complete"] is False
    assert data["response"] == MESSAGES["answer_received"]
    assert data["next_question"]
    assert data["activities"] is None


def test_last_answer_returns_activities(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = answer_all(client, base_url, session_headers)

    data = response.json()["data"]
    assert data["is_complete"] is True
    assert data["response"] == MESSAGES["questions_complete"]
    assert data["activities"] == OFFLINE_ACTIVITIES["Health"][:5]


def test_snake_case_field_names_are_accepted(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/focus/Health/answer",
        json={"answer": "tired", "question_index": 0},
        headers=session_headers,
    )

    assert response.status_code == 200


def test_answer_for_unknown_session_is_404(client, base_url, session_headers):
    response = client.post(
        f"{base_url}/focus/Health/answer",
        json={"answer": "tired", "questionIndex": 0},
        headers=session_headers,
    )

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_answer_out_of_range_is_400(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/focus/Health/answer",
        json={"answer": "tired", "questionIndex": 7},
        headers=session_headers,
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_empty_answer_is_422(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/focus/Health/answer",
        json={"answer": "", "questionIndex": 0},
        headers=session_headers,
    )

    assert response.status_code == 422
    assert response.json()["success"] is False


def test_select_activities_completes_session(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)
    answer_all(client, base_url, session_headers)

    response = client.post(
        f"{base_url}/focus/Health/activities",
        json={"selectedActivities": ["Walk 10,000 steps a day"]},
        headers=session_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["summary"] == OFFLINE_SUMMARY
    assert data["calendar_integration"] is True

    active = client.get(f"{base_url}/focus/active", headers=session_headers)
    assert active.json()["data"]["focus_sessions"] == []


def test_active_sessions_are_listed(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)
    client.post(f"{base_url}/focus/Work", headers=session_headers)

    response = client.get(f"{base_url}/focus/active", headers=session_headers)

    sessions = response.json()["data"]["focus_sessions"]
    assert sorted(s["category"] for s in sessions) == ["Health", "Work"]
    assert all(s["status"] == "active" for s in sessions)


def test_check_in_question(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Work", headers=session_headers)

    response = client.get(
        f"{base_url}/focus/Work/check-in-question", headers=session_headers
    )

    assert response.status_code == 200
    assert "Work" in response.json()["data"]["question"]


def test_check_in_question_unknown_session_is_404(client, base_url, session_headers):
    response = client.get(
        f"{base_url}/focus/Work/check-in-question", headers=session_headers
    )

    assert response.status_code == 404


def test_weekly_check_in_keeps_working(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)
    client.post(
        f"{base_url}/focus/Health/activities",
        json={"selectedActivities": ["walk"]},
        headers=session_headers,
    )

    response = client.post(
        f"{base_url}/check-in",
        json={
            "category": "Health",
            "completedActivities": True,
            "newRating": 8,
            "continueWorking": True,
            "notes": "felt great",
        },
        headers=session_headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["next_steps"] == MESSAGES["continue_working"]
    assert data["summary"] == OFFLINE_SUMMARY

    active = client.get(f"{base_url}/focus/active", headers=session_headers)
    assert [s["category"] for s in active.json()["data"]["focus_sessions"]] == ["Health"]


def test_weekly_check_in_with_session_id_in_body(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/check-in",
        json={
            "sessionId": session_headers["X-Session-Id"],
            "category": "Health",
            "completedActivities": False,
            "newRating": 3,
            "continueWorking": False,
        },
    )

    assert response.status_code == 200
    assert response.json()["data"]["next_steps"] == MESSAGES["stop_working"]


def test_weekly_check_in_without_session_is_400(client, base_url):
    response = client.post(
        f"{base_url}/check-in",
        json={
            "category": "Health",
            "completedActivities": False,
            "newRating": 3,
            "continueWorking": False,
        },
    )

    assert response.status_code == 400


def test_weekly_check_in_rating_out_of_range_is_422(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/check-in",
        json={
            "category": "Health",
            "completedActivities": True,
            "newRating": 11,
            "continueWorking": True,
        },
        headers=session_headers,
    )

    assert response.status_code == 422
    assert "newRating" in response.json()["error"]


def test_session_summary(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)
    client.post(f"{base_url}/focus/Work", headers=session_headers)

    response = client.get(f"{base_url}/session-summary", headers=session_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["session_key"] == session_headers["X-Session-Id"]
    assert len(data["focus_sessions"]) == 2
    assert {e["category"]: e["value"] for e in data["wheel"]} == {"Health": 5, "Work": 5}


def test_session_summary_absent_is_404(client, base_url, session_headers):
    response = client.get(f"{base_url}/session-summary", headers=session_headers)

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": MESSAGES["no_summary"]}


def test_sessions_are_isolated_by_key(client, base_url, session_headers):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.get(
        f"{base_url}/focus/active", headers={"X-Session-Id": "someone-else"}
    )

    assert response.json()["data"]["focus_sessions"] == []


class BrokenStore(InMemorySessionStore):
    """Store whose reads fail the way an unreachable database does"""

    async def get(self, session_key, category):
        raise StorageError("Error loading focus session")

    async def list_by_session(self, session_key):
        raise StorageError("Error listing focus sessions")


def use_engine(client, store=None, generator=None):
    client.app.state.engine = FocusSessionEngine(
        store if store is not None else InMemorySessionStore(ttl_seconds=3600, max_records=100),
        generator if generator is not None else FakeGenerator(),
    )


def test_last_answer_generation_failure_is_502(client, base_url, session_headers):
    use_engine(client, generator=FakeGenerator(error=GenerationFailedError("upstream down")))
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/focus/Health/answer",
        json={"answer": "2 hours", "questionIndex": 2},
        headers=session_headers,
    )

    assert response.status_code == 502
    assert response.json() == {"success": False, "error": "upstream down"}


def test_summary_generation_failure_is_502(client, base_url, session_headers):
    use_engine(client, generator=FakeGenerator(error=RuntimeError("boom")))
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/focus/Health/activities",
        json={"selectedActivities": ["walk"]},
        headers=session_headers,
    )

    assert response.status_code == 502
    assert response.json() == {
        "success": False,
        "error": "Session summary generation failed",
    }


def test_unconfigured_generator_is_503(client, base_url, session_headers):
    use_engine(client, generator=FakeGenerator(error=UnconfiguredError("no key")))
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.get(
        f"{base_url}/focus/Health/check-in-question", headers=session_headers
    )

    assert response.status_code == 503
    assert response.json() == {"success": False, "error": "no key"}


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/focus/active"),
        ("get", "/session-summary"),
        ("post", "/focus/Health"),
    ],
)
def test_storage_failure_is_500(client, base_url, session_headers, method, path):
    use_engine(client, store=BrokenStore(ttl_seconds=3600, max_records=100))

    response = getattr(client, method)(f"{base_url}{path}", headers=session_headers)

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("Error")


@pytest.mark.parametrize("text", ["99999999999999999999 hours", "9" * 5000 + " hours"])
def test_oversized_time_answer_is_400(client, base_url, session_headers, text):
    client.post(f"{base_url}/focus/Health", headers=session_headers)

    response = client.post(
        f"{base_url}/focus/Health/answer",
        json={"answer": text, "questionIndex": 2},
        headers=session_headers,
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "84 hours" in response.json()["error"]
