"""
Unit tests for the priority API endpoints.
Uses FastAPI's TestClient with the engine dependencies overridden.
"""

import json
import pytest
from datetime import timedelta

from fastapi.testclient import TestClient

from backend.dependencies import get_config, get_cors_origins, get_priority_config, get_priority_engine
from backend.main import app
from casper.core.config import CONFIG_DIR_ENV
from casper.priority import PriorityConfig, PriorityEngine


@pytest.fixture
def priority_config():
    return PriorityConfig(max_items=3)


@pytest.fixture
def client(priority_config):
    app.dependency_overrides[get_priority_config] = lambda: priority_config
    app.dependency_overrides[get_priority_engine] = lambda: PriorityEngine(priority_config)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestRootEndpoints:
    """Tests for / and /health."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["endpoints"]["priority"] == "/priority/items"

    def test_health(self, client, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
        get_config.cache_clear()
        get_priority_config.cache_clear()
        try:
            response = client.get("/health")
        finally:
            get_config.cache_clear()
            get_priority_config.cache_clear()

        assert response.json() == {"status": "healthy", "max_items": 8}


class TestPriorityItems:
    """Tests for POST /priority/items."""

    def test_ranked_list(self, client, now):
        body = {
            "now": now.isoformat(),
            "snapshot": {
                "tasks": [
                    {"id": "t1", "content": "Overdue memo", "priority": "high",
                     "scheduled_for": (now - timedelta(days=3)).isoformat()},
                    {"id": "t2", "content": "Done", "completed": True},
                ],
                "calendarEvents": [
                    {"id": "e1", "title": "Founder call",
                     "start_time": (now + timedelta(minutes=20)).isoformat()},
                ],
            },
        }
        response = client.post("/priority/items", json=body)
        assert response.status_code == 200

        data = response.json()
        ids = [item["id"] for item in data["items"]]
        assert ids == ["calendar_event-e1", "task-t1"]
        assert data["total_count"] == 2
        assert data["filter_stats"]["excluded"] == 1
        assert data["source_distribution"] == {"calendar_event": 1, "task": 1}

        task = data["items"][1]
        assert task["signals"][0] == "3 days overdue"
        assert task["reasoning"].startswith("3 days overdue.")
        assert 0 <= task["priority_score"] <= 1
        assert task["is_overdue"] is True

    def test_max_items_from_config(self, client, now):
        body = {
            "now": now.isoformat(),
            "snapshot": {"tasks": [{"id": str(i), "content": f"Task {i}"} for i in range(10)]},
        }
        data = client.post("/priority/items", json=body).json()
        assert len(data["items"]) == 3
        assert data["total_count"] == 10

    def test_dismissed_and_source_filters(self, client, now):
        body = {
            "now": now.isoformat(),
            "dismissed_ids": ["task-t1"],
            "exclude_sources": ["inbox"],
            "snapshot": {
                "tasks": [{"id": "t1", "content": "a"}, {"id": "t2", "content": "b"}],
                "inbox_items": [{"id": "m1", "subject": "c"}],
            },
        }
        data = client.post("/priority/items", json=body).json()
        assert [item["id"] for item in data["items"]] == ["task-t2"]
        assert data["filter_stats"]["dismissed"] == 1

    def test_available_minutes(self, client, now):
        body = {
            "now": now.isoformat(),
            "available_minutes": 15,
            "snapshot": {"tasks": [
                {"id": "deep", "content": "Deep", "effort_minutes": 180},
                {"id": "quick", "content": "Quick", "effort_minutes": 10},
            ]},
        }
        data = client.post("/priority/items", json=body).json()
        assert data["items"][0]["id"] == "task-quick"
        assert data["items"][0]["breakdown"]["available_minutes"] == 15

    def test_unknown_source_is_rejected(self, client):
        response = client.post("/priority/items", json={"include_sources": ["spreadsheet"]})
        assert response.status_code == 422

    def test_invalid_body(self, client):
        response = client.post("/priority/items", json={"snapshot": {"tasks": "nope"}})
        assert response.status_code == 422

    def test_negative_budget_is_rejected(self, client):
        response = client.post("/priority/items", json={"available_minutes": -5})
        assert response.status_code == 422

    def test_empty_body(self, client):
        data = client.post("/priority/items", json={}).json()
        assert data["items"] == []
        assert data["total_count"] == 0

    def test_non_string_title_is_rendered_as_text(self, client, now):
        body = {"now": now.isoformat(), "snapshot": {"tasks": [{"id": "t1", "content": 42}]}}
        response = client.post("/priority/items", json=body)
        assert response.status_code == 200
        assert response.json()["items"][0]["title"] == "42"

    def test_engine_failure_returns_500(self, client):
        class BrokenEngine:
            def build_priority_list(self, *args, **kwargs):
                raise RuntimeError("boom")

        app.dependency_overrides[get_priority_engine] = lambda: BrokenEngine()
        response = client.post("/priority/items", json={})
        assert response.status_code == 500
        assert "Failed to build priority list: boom" in response.json()["detail"]


class TestPriorityConfigEndpoint:
    """Tests for GET /priority/config."""

    def test_active_config(self, client):
        data = client.get("/priority/config").json()
        assert data["max_items"] == 3
        assert data["weights"]["urgency"] == 0.30
        assert data["company_stale_days"] == 14


class TestCorsOrigins:
    """Tests for the CORS origins read from settings.json."""

    @pytest.fixture
    def config_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
        get_config.cache_clear()
        yield tmp_path
        get_config.cache_clear()

    def test_defaults(self, config_dir):
        assert "http://localhost:5173" in get_cors_origins()

    def test_custom_origins(self, config_dir):
        (config_dir / "settings.json").write_text(json.dumps({"cors_origins": ["https://casper.example"]}))
        assert get_cors_origins() == ["https://casper.example"]

    def test_invalid_origins(self, config_dir):
        (config_dir / "settings.json").write_text(json.dumps({"cors_origins": "https://casper.example"}))
        with pytest.raises(ValueError):
            get_cors_origins()

    def test_preflight_from_dev_server(self, client):
        response = client.options("/priority/items", headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        })
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
