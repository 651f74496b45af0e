from __future__ import annotations

from fastapi.testclient import TestClient

from builders import NOW
from focus_tracker.config import AppConfig
from focus_tracker.main import build_parser
from focus_tracker.web.app import create_app

PINNED = {"now": NOW.isoformat()}

SNAPSHOT = {
    "tasks": [
        {
            "id": f"t{i}",
            "title": "task",
            "priority": "high",
            "status": "completed",
            "createdAt": "2024-06-12T07:00:00Z",
            "completedAt": f"2024-06-{12 - i:02d}T09:00:00Z",
        }
        for i in range(6)
    ],
    "focusSessions": [{"id": 1, "duration": 25, "date": "2024-06-12", "timestamp": "2024-06-12T14:00:00Z"}],
}


def test_insights_endpoint_runs_the_engine() -> None:
    client = TestClient(create_app(AppConfig()))

    response = client.post("/api/insights", params=PINNED, json=SNAPSHOT)

    assert response.status_code == 200
    body = response.json()
    assert body[0]["title"] == "Morning Productivity Peak"
    assert body[0]["type"] == "success"
    assert body[0]["rule"] == "working_time_pattern"
    assert {"type", "icon", "title", "message"} <= set(body[0])


def test_insights_endpoint_with_empty_snapshot() -> None:
    client = TestClient(create_app(AppConfig()))

    response = client.post("/api/insights", params=PINNED, json={})

    assert response.status_code == 200
    assert response.json() == []


def test_malformed_records_are_rejected() -> None:
    client = TestClient(create_app(AppConfig()))
    bad = {"focusSessions": [{"id": 1, "duration": -5, "date": "2024-06-12"}]}

    assert client.post("/api/insights", json=bad).status_code == 422
    assert client.post("/api/insights", json={"tasks": [{"id": 1, "status": "archived"}]}).status_code == 422


def test_stats_endpoint() -> None:
    client = TestClient(create_app(AppConfig()))

    response = client.post("/api/stats", params=PINNED, json=SNAPSHOT)

    assert response.status_code == 200
    body = response.json()
    assert body["today"] == "2024-06-12"
    assert body["overview"]["completed_tasks"] == 6
    assert body["overview"]["today_focus_minutes"] == 25
    assert len(body["daily"]) == 7


def test_docs_disabled_and_security_headers() -> None:
    client = TestClient(create_app(AppConfig()))

    assert client.get("/docs").status_code == 404
    assert client.get("/openapi.json").status_code == 404

    response = client.get("/api/health")
    assert response.json() == {"status": "ok"}
    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["referrer-policy"] == "no-referrer"
    assert "content-security-policy" in response.headers


def test_docs_enabled_in_dev() -> None:
    client = TestClient(create_app(AppConfig(dev_enable_docs=True)))

    assert client.get("/docs").status_code == 200


def test_serve_command_has_no_host_override_by_default() -> None:
    parser = build_parser()
    args = parser.parse_args(["serve"])
    assert args.host is None
    assert args.port is None
