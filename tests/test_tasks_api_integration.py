"""Integration tests for the tasks and sync HTTP API."""
import time

API = "/api/v1"


def _wait_for(predicate, timeout=3.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return False


def test_create_and_fetch_task(client):
    response = client.post(f"{API}/tasks", json={"title": "Call plumber", "description": "Kitchen sink"})

    assert response.status_code == 201
    created = response.json()
    assert created["title"] == "Call plumber"
    assert created["is_completed"] is False
    assert created["synced_with_network"] is False

    fetched = client.get(f"{API}/tasks/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created

    listing = client.get(f"{API}/tasks")
    assert listing.status_code == 200
    assert [t["id"] for t in listing.json()] == [created["id"]]


def test_blank_title_is_rejected(client):
    response = client.post(f"{API}/tasks", json={"title": "   ", "description": "desc"})

    assert response.status_code == 422
    assert response.json()["detail"] == "Title must not be blank"
    assert client.get(f"{API}/tasks").json() == []


def test_missing_task_returns_404(client):
    assert client.get(f"{API}/tasks/9999").status_code == 404
    assert client.post(f"{API}/tasks/9999/toggle").status_code == 404
    assert client.put(f"{API}/tasks/9999", json={"title": "x"}).status_code == 404


def test_update_toggle_and_delete(client):
    task = client.post(f"{API}/tasks", json={"title": "Draft"}).json()

    updated = client.put(f"{API}/tasks/{task['id']}", json={"title": "Final", "description": "v2"})
    assert updated.status_code == 200
    assert updated.json()["title"] == "Final"
    assert updated.json()["created_at"] == task["created_at"]

    toggled = client.post(f"{API}/tasks/{task['id']}/toggle")
    assert toggled.json()["is_completed"] is True
    toggled = client.post(f"{API}/tasks/{task['id']}/toggle")
    assert toggled.json()["is_completed"] is False

    assert client.delete(f"{API}/tasks/{task['id']}").status_code == 204
    assert client.delete(f"{API}/tasks/{task['id']}").status_code == 204
    assert client.get(f"{API}/tasks/{task['id']}").status_code == 404


def test_sync_runs_in_background(client):
    # Local ids are assigned from 1, so the remote snapshot (ids 1-3) collides with some of them
    local_ids = {client.post(f"{API}/tasks", json={"title": f"Local {i}"}).json()["id"] for i in range(4)}
    local_only = {task_id for task_id in local_ids if task_id > 3}
    assert local_only
    expected_ids = local_only | {1, 2, 3}

    response = client.post(f"{API}/sync")

    assert response.status_code == 202
    assert response.json()["status"] in ("SYNCING", "SUCCESS")
    assert _wait_for(
        lambda: {t["id"] for t in client.get(f"{API}/tasks").json() if t["synced_with_network"]} == {1, 2, 3}
    )

    tasks = {t["id"]: t for t in client.get(f"{API}/tasks").json()}
    assert set(tasks) == expected_ids
    for task_id in local_only:
        assert tasks[task_id]["synced_with_network"] is False
    # same id: the remote record replaces the local one
    assert tasks[1]["title"] == "Update LinkedIn Profile"
    assert tasks[1]["is_completed"] is True
    assert tasks[2]["title"] == "Apply for Android Developer Role"
    assert tasks[2]["synced_with_network"] is True

    assert _wait_for(lambda: client.get(f"{API}/sync/state").json()["status"] == "IDLE")


def test_task_list_state_endpoint(client):
    assert _wait_for(lambda: client.get(f"{API}/tasks/state").json()["status"] == "EMPTY")

    client.post(f"{API}/tasks", json={"title": "Visible"})

    assert _wait_for(lambda: client.get(f"{API}/tasks/state").json()["status"] == "SUCCESS")
    state = client.get(f"{API}/tasks/state").json()
    assert [t["title"] for t in state["tasks"]] == ["Visible"]


def test_task_list_websocket_streams_changes(client):
    with client.websocket_connect(f"{API}/tasks/ws") as websocket:
        first = websocket.receive_json()
        assert first["status"] in ("LOADING", "EMPTY")

        client.post(f"{API}/tasks", json={"title": "Streamed"})

        for _ in range(5):
            message = websocket.receive_json()
            if message["status"] == "SUCCESS":
                break
        assert message["status"] == "SUCCESS"
        assert message["tasks"][0]["title"] == "Streamed"

    # the handler has returned and released its subscription
    assert client.app.state.services.board.task_list.subscriber_count == 0


def test_sync_state_websocket_streams_transitions(client):
    with client.websocket_connect(f"{API}/sync/ws") as websocket:
        assert websocket.receive_json() == {"status": "IDLE", "message": None}

        client.post(f"{API}/sync")

        statuses = [websocket.receive_json()["status"] for _ in range(3)]
        assert statuses == ["SYNCING", "SUCCESS", "IDLE"]

    assert client.app.state.services.synchronizer.state.subscriber_count == 0


def test_health_and_metrics(client):
    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["checks"]["database"] == "ok"

    client.post(f"{API}/sync")
    assert _wait_for(lambda: client.get(f"{API}/sync/state").json()["status"] == "IDLE")

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "taskboard_sync_cycles_total" in metrics.text
    assert "http_requests_total" in metrics.text
