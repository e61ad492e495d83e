from __future__ import annotations

from datetime import datetime

from sqlalchemy import text
from starlette.testclient import TestClient

from checkin.main import create_app
from tests.conftest import make_settings


def _logs(client):
    r = client.get("/api/logs")
    assert r.status_code == 200, r.text
    return r.json()


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_employees_roster(client):
    r = client.get("/api/employees")
    assert r.status_code == 200
    data = r.json()
    assert [e["id"] for e in data] == [1, 2, 3, 4]
    assert data[0] == {"id": 1, "name": "Somchai Jaidee", "department": "IT", "role": "Developer"}


def test_status_starts_empty(client):
    data = client.get("/api/status").json()
    assert len(data) == 4
    assert all(row["current_status"] is None and row["last_event"] is None for row in data)


def test_check_in_is_recorded_and_pushed(client):
    with client.websocket_connect("/ws") as ws:
        r = client.post("/api/check", json={"employeeId": 1, "type": "IN"})
        assert r.status_code == 200, r.text
        body = r.json()
        assert body["success"] is True
        assert body["log"]["type"] == "IN"
        assert body["log"]["employee_name"] == "Somchai Jaidee"
        assert body["log"]["department"] == "IT"

        pushed = ws.receive_json()
        assert pushed == {"type": "NEW_LOG", "data": body["log"]}

    status = {row["id"]: row for row in client.get("/api/status").json()}
    assert status[1]["current_status"] == "IN"
    assert status[1]["last_event"] == body["log"]["timestamp"]
    assert status[2]["current_status"] is None


def test_root_websocket_path_also_receives_events(client):
    with client.websocket_connect("/") as ws:
        client.post("/api/check", json={"employeeId": 4, "type": "OUT"})
        assert ws.receive_json()["data"]["employee_name"] == "Anong Sookjai"


def test_every_subscriber_gets_the_event(client):
    with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
        client.post("/api/check", json={"employeeId": 2, "type": "IN"})
        assert first.receive_json() == second.receive_json()


def test_missing_type_is_a_client_error_without_write(client):
    before = len(_logs(client))
    r = client.post("/api/check", json={"employeeId": 1})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing employeeId or type"}
    assert len(_logs(client)) == before


def test_invalid_type_and_body_are_client_errors(client):
    assert client.post("/api/check", json={"employeeId": 1, "type": "LUNCH"}).status_code == 400
    assert client.post("/api/check", json=[1, "IN"]).status_code == 400
    r = client.post("/api/check", content=b"not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert "error" in r.json()
    r = client.post("/api/check", content=b'{"employeeId": 1, "type": "\xff"}', headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"error": "Request body must be JSON"}
    r = client.post("/api/check", json={"employeeId": "\u00b2", "type": "IN"})
    assert r.status_code == 400
    assert r.json() == {"error": "employeeId must be an integer"}
    assert _logs(client) == []


def test_unknown_employee_is_not_found(client):
    r = client.post("/api/check", json={"employeeId": 9999, "type": "IN"})
    assert r.status_code == 404
    assert r.json() == {"error": "Employee 9999 does not exist"}
    assert _logs(client) == []


def test_huge_employee_id_is_not_found(client):
    r = client.post("/api/check", json={"employeeId": 10**20, "type": "IN"})
    assert r.status_code == 404
    assert r.json() == {"error": "Employee 100000000000000000000 does not exist"}
    assert _logs(client) == []


def test_client_frames_are_ignored(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_bytes(b"ping")
        ws.send_text("hello")
        r = client.post("/api/check", json={"employeeId": 2, "type": "OUT"})
        assert r.status_code == 200
        assert ws.receive_json() == {"type": "NEW_LOG", "data": r.json()["log"]}


def test_logs_are_capped_ordered_and_stable(client):
    for i in range(55):
        r = client.post("/api/check", json={"employeeId": 1 + i % 4, "type": "IN" if i % 2 == 0 else "OUT"})
        assert r.status_code == 200

    first = _logs(client)
    second = _logs(client)
    assert len(first) == 50
    assert first == second
    keys = [(datetime.fromisoformat(log["timestamp"].replace("Z", "+00:00")), log["id"]) for log in first]
    assert keys == sorted(keys, reverse=True)
    assert first[0]["id"] == 55


def test_reconnect_gets_no_backlog_and_refetch_is_current(client):
    with client.websocket_connect("/ws") as ws:
        client.post("/api/check", json={"employeeId": 3, "type": "IN"})
        assert ws.receive_json()["data"]["employee_id"] == 3

    missed = client.post("/api/check", json={"employeeId": 3, "type": "OUT"}).json()["log"]

    with client.websocket_connect("/ws") as ws:
        status = {row["id"]: row for row in client.get("/api/status").json()}
        assert status[3]["current_status"] == "OUT"
        assert _logs(client)[0] == missed

        fresh = client.post("/api/check", json={"employeeId": 1, "type": "IN"}).json()["log"]
        assert ws.receive_json()["data"] == fresh


def test_storage_failure_is_a_server_error(app, client):
    with app.state.engine.begin() as conn:
        conn.execute(text("DROP TABLE logs"))

    r = client.post("/api/check", json={"employeeId": 1, "type": "IN"})
    assert r.status_code == 500
    assert "error" in r.json()
    assert client.get("/api/employees").status_code == 200


def test_restart_does_not_reseed(tmp_path):
    settings = make_settings(tmp_path / "restart.db")
    with TestClient(create_app(settings)) as c:
        c.post("/api/check", json={"employeeId": 1, "type": "IN"})
    with TestClient(create_app(settings)) as c:
        assert len(c.get("/api/employees").json()) == 4
        assert c.get("/api/status").json()[0]["current_status"] == "IN"


def test_seeding_can_be_disabled(tmp_path):
    settings = make_settings(tmp_path / "empty.db", seed_sample_employees=False)
    with TestClient(create_app(settings)) as c:
        assert c.get("/api/employees").json() == []
        assert c.get("/api/status").json() == []
