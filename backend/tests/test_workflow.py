from __future__ import annotations

from fastapi.testclient import TestClient


def test_healthz(client: TestClient):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_day_listing_and_view(client: TestClient):
    days = client.get("/days").json()
    assert days == ["today", "mon", "tue", "sun"]

    resp = client.get("/days/today")
    assert resp.status_code == 200
    data = resp.json()
    assert data["progress"] == {
        "completed_count": 2,
        "total_count": 3,
        "percentage": 67,
        "total_minutes": 60,
        "total_time_label": "1h",
    }
    assert data["focus_session"] is None
    assert data["notice"] is None


def test_unknown_day_returns_not_found_with_view(client: TestClient):
    resp = client.get("/days/wed")
    assert resp.status_code == 404
    data = resp.json()
    assert data["tasks"] == []
    assert data["notice"]["kind"] == "not_found"


def test_task_mutation_flow(client: TestClient):
    resp = client.put("/days/today/tasks/grammar/completed", json={"completed": True})
    assert resp.status_code == 200
    assert resp.json()["progress"]["percentage"] == 100

    resp = client.put("/days/today/tasks/grammar/duration", json={"minutes": 50})
    assert resp.status_code == 200
    assert resp.json()["progress"]["total_time_label"] == "1h 20min"

    resp = client.put("/days/today/tasks/grammar/notes", json={"notes": "Dativ wiederholen"})
    assert resp.status_code == 200

    resp = client.put("/days/today/tasks/video/video", json={"field": "title", "value": "Easy German 512"})
    assert resp.status_code == 200
    tasks = {task["id"]: task for task in resp.json()["tasks"]}
    assert tasks["grammar"]["notes"] == "Dativ wiederholen"
    assert tasks["video"]["video_data"]["title"] == "Easy German 512"


def test_negative_duration_is_bad_request_and_keeps_value(client: TestClient):
    resp = client.put("/days/today/tasks/vocab/duration", json={"minutes": -5})
    assert resp.status_code == 400
    data = resp.json()
    assert data["notice"]["kind"] == "invalid_argument"
    tasks = {task["id"]: task for task in data["tasks"]}
    assert tasks["vocab"]["duration_minutes"] == 20


def test_unknown_task_is_not_found(client: TestClient):
    resp = client.put("/days/today/tasks/ghost/completed", json={"completed": True})
    assert resp.status_code == 404
    assert resp.json()["progress"]["completed_count"] == 2


def test_focus_session_start_switch_stop(client: TestClient):
    resp = client.post("/days/mon/tasks/t1/focus")
    assert resp.status_code == 200
    session = resp.json()["focus_session"]
    assert session["day"] == "mon"
    assert session["task_id"] == "t1"
    assert session["started_at"].endswith("+00:00")

    resp = client.post("/days/tue/tasks/t9/focus")
    assert resp.status_code == 200
    current = client.get("/focus").json()
    assert (current["day"], current["task_id"]) == ("tue", "t9")

    resp = client.delete("/focus", params={"day": "mon"})
    assert resp.status_code == 200
    assert resp.json()["focus_session"] is None
    assert client.get("/focus").json() is None

    resp = client.delete("/focus")
    assert resp.status_code == 200
    assert resp.json()["day"] == "today"


def test_focus_on_unknown_task_is_not_found(client: TestClient):
    resp = client.post("/days/mon/tasks/nope/focus")
    assert resp.status_code == 404
    assert client.get("/focus").json() is None


def test_week_progress(client: TestClient):
    client.put("/days/mon/tasks/t1/completed", json={"completed": True})
    resp = client.get("/progress/week")
    assert resp.status_code == 200
    data = resp.json()
    assert data["completed_count"] == 3
    assert data["total_count"] == 6
    assert data["percentage"] == 50


def test_preferences_toggle_dark_mode(client: TestClient):
    resp = client.put("/preferences", json={"dark_mode": True})
    assert resp.status_code == 200
    assert resp.json() == {"dark_mode": True}
    assert client.get("/days/today").json()["dark_mode"] is True


def test_reflection_flow(client: TestClient):
    resp = client.get("/reflections/2024-05-06")
    assert resp.status_code == 200
    assert resp.json() == {"date": "2024-05-06", "key": "reflection_2024-05-06", "text": ""}

    resp = client.put("/reflections/2024-05-06", json={"text": "Heute: Konjunktiv II"})
    assert resp.status_code == 200
    assert client.get("/reflections/2024-05-06").json()["text"] == "Heute: Konjunktiv II"


def test_vocabulary_flow(client: TestClient):
    resp = client.post(
        "/vocabulary/2024-05-06",
        json={"term": "sich gewöhnen an", "translation": "to get used to", "tag": "B1"},
    )
    assert resp.status_code == 201
    entries = client.get("/vocabulary/2024-05-06").json()
    assert entries[0]["term"] == "sich gewöhnen an"
    assert entries[0]["tag"] == "B1"


def test_invalid_request_body_is_rejected(client: TestClient):
    resp = client.put("/days/today/tasks/vocab/duration", json={"minutes": "viele"})
    assert resp.status_code == 422


def test_stop_focus_for_unknown_day_leaves_session_running(client: TestClient):
    client.post("/days/mon/tasks/t1/focus")
    resp = client.delete("/focus", params={"day": "wed"})
    assert resp.status_code == 404
    assert resp.json()["focus_session"]["task_id"] == "t1"
    assert client.get("/focus").json()["task_id"] == "t1"
