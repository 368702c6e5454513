"""HTTP API tests through the Flask test client."""

from datetime import timedelta

from tests.helpers import EVENT_START


def register(client, name, email=None):
    payload = {"name": name}
    if email:
        payload["email"] = email
    response = client.post("/api/djs", json=payload)
    assert response.status_code == 201
    return response.get_json()


def test_register_and_fetch_dj(client):
    dj = register(client, "Peggy Gou", "peggy@example.com")

    response = client.get(f"/api/djs/{dj['id']}")
    assert response.status_code == 200
    assert response.get_json()["name"] == "Peggy Gou"

    listing = client.get("/api/djs").get_json()
    assert listing["count"] == 1


def test_register_validation_error(client):
    response = client.post("/api/djs", json={"name": ""})
    assert response.status_code == 400
    assert response.get_json()["type"] == "ValidationError"

    response = client.post("/api/djs", json={})
    assert response.status_code == 400


def test_unknown_dj_is_404(client):
    assert client.get("/api/djs/missing").status_code == 404
    assert client.delete("/api/djs/missing").status_code == 404
    response = client.patch("/api/djs/missing", json={"name": "X"})
    assert response.status_code == 404
    assert response.get_json()["type"] == "CandidateNotFoundError"


def test_patch_and_active_filter(client):
    a = register(client, "A")
    register(client, "B")

    response = client.patch(f"/api/djs/{a['id']}", json={"is_active": False})
    assert response.status_code == 200
    assert response.get_json()["is_active"] is False

    active = client.get("/api/djs?active=1").get_json()
    assert [dj["name"] for dj in active["djs"]] == ["B"]


def test_delete_dj(client):
    dj = register(client, "A")
    assert client.delete(f"/api/djs/{dj['id']}").status_code == 204
    assert client.get(f"/api/djs/{dj['id']}").status_code == 404


def test_draw_and_queue_flow(client):
    a = register(client, "A")

    first = client.post("/api/lottery/draw")
    response = client.post("/api/lottery/draw")
    assert first.status_code == 201
    assert response.status_code == 200
    assert response.get_json()["draw"] is None

    register(client, "B")
    client.post("/api/lottery/draw")

    queue = client.get("/api/lottery/queue").get_json()
    assert queue["length"] == 2
    assert queue["queue"][0]["id"] == a["id"]

    moved = client.post(f"/api/lottery/queue/{a['id']}/move", json={"position": 2}).get_json()
    assert moved["queue"][1]["id"] == a["id"]

    next_dj = client.get("/api/lottery/next").get_json()["next_dj"]
    assert next_dj["name"] == "B"

    assert client.delete(f"/api/lottery/queue/{a['id']}").get_json() == {"removed": True}
    assert client.get("/api/lottery/queue").get_json()["length"] == 1


def test_move_errors(client):
    a = register(client, "A")
    response = client.post(f"/api/lottery/queue/{a['id']}/move", json={"position": 1})
    assert response.status_code == 409
    assert response.get_json()["type"] == "NotQueuedError"

    client.post("/api/lottery/draw")
    response = client.post(f"/api/lottery/queue/{a['id']}/move", json={"position": 5})
    assert response.status_code == 400

    response = client.post(f"/api/lottery/queue/{a['id']}/move", json={"position": "first"})
    assert response.status_code == 400


def test_statistics_history_and_reset(client):
    register(client, "A")
    register(client, "B")
    client.post("/api/lottery/draw")
    client.post("/api/lottery/draw")

    stats = client.get("/api/lottery/statistics").get_json()
    assert stats["total_draws"] == 2
    assert stats["fairness_score"] == 1.0

    history = client.get("/api/lottery/draws?limit=1").get_json()
    assert history["count"] == 1
    assert len(history["draws"][0]["participants"]) in {1, 2}

    assert client.post("/api/lottery/reset").get_json() == {"cleared": 2}
    assert client.get("/api/lottery/queue").get_json()["length"] == 0


def test_event_lifecycle(client):
    dj = register(client, "Opener")

    response = client.post(
        "/api/event/start",
        json={"slot_duration_minutes": 40, "started_at": "2025-06-14T19:00:00Z"},
    )
    assert response.status_code == 201
    data = response.get_json()
    assert data["state"] == "waiting_for_first_performer"
    assert data["initial_draw"]["winner"]["id"] == dj["id"]
    assert data["started_at"] == (EVENT_START - timedelta(hours=1)).isoformat()

    assert client.post("/api/event/start", json={}).status_code == 409

    session = client.post("/api/sessions/start", json={"dj_id": dj["id"]})
    assert session.status_code == 201
    assert session.get_json()["dj_name"] == "Opener"

    current = client.get("/api/event/current").get_json()["event"]
    assert current["state"] == "slot_in_progress"
    assert current["current_dj_name"] == "Opener"
    assert current["next_draw_at"] == (EVENT_START + timedelta(minutes=20)).isoformat()

    timetable = client.get("/api/event/timetable").get_json()["timetable"]
    assert timetable["entries"][0]["status"] == "in_progress"

    ended = client.post("/api/event/end")
    assert ended.status_code == 200
    assert ended.get_json()["state"] == "ended"
    assert client.post("/api/event/end").status_code == 409
    assert client.get("/api/event/current").get_json() == {"event": None}


def test_event_start_validation(client):
    assert client.post("/api/event/start", json={"slot_duration_minutes": 0}).status_code == 400
    assert client.post("/api/event/start", json={"slot_duration_minutes": "60"}).status_code == 400
    assert client.post("/api/event/start", json={"started_at": "yesterday"}).status_code == 400


def test_sessions_endpoints(client):
    dj = register(client, "A")

    started = client.post("/api/sessions/start", json={"dj_id": dj["id"], "session_type": "b2b"})
    assert started.status_code == 201
    session = started.get_json()
    assert session["session_type"] == "b2b"

    assert client.post("/api/sessions/start", json={"dj_id": dj["id"]}).status_code == 409
    assert client.post("/api/sessions/start", json={"dj_id": "missing"}).status_code == 404
    assert client.post("/api/sessions/start", json={}).status_code == 400
    assert (
        client.post("/api/sessions/start", json={"dj_id": dj["id"], "session_type": "marathon"}).status_code
        == 400
    )

    ended = client.post(f"/api/sessions/{session['id']}/end")
    assert ended.status_code == 200
    assert ended.get_json()["duration_minutes"] == 0
    assert client.post(f"/api/sessions/{session['id']}/end").status_code == 409

    assert client.get(f"/api/sessions/{session['id']}").get_json()["id"] == session["id"]
    assert client.get("/api/sessions/missing").status_code == 404
    assert client.get("/api/sessions").get_json()["count"] == 1
    assert client.get("/api/sessions/stats").get_json()["total_sessions"] == 1


def test_pool_summary(client):
    register(client, "A")
    register(client, "B")
    client.post("/api/lottery/draw")

    pool = client.get("/api/djs/pool").get_json()
    assert pool["total_count"] == 2
    assert pool["current_dj"] is None
    assert pool["next_dj"] is not None


def test_health_and_metrics(client):
    health = client.get("/health")
    assert health.status_code == 200
    data = health.get_json()
    assert data["status"] == "ok"
    assert data["event_state"] == "no_active_event"

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert b"lottery_draws_total" in metrics.data


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.get_json()["type"] == "Not Found"


def test_patch_rejects_oversized_weight(client):
    dj = register(client, "A")
    response = client.patch(f"/api/djs/{dj['id']}", json={"weight": 1.7e308})
    assert response.status_code == 400
    assert response.get_json()["type"] == "ValidationError"
    assert client.get(f"/api/djs/{dj['id']}").get_json()["weight"] == 1.0
