"""End-to-end API tests."""

from __future__ import annotations

import asyncio
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from launcher_search.engine.search import ActionSearchEngine
from launcher_search.server.app import create_app
from launcher_search.storage.memory_store import InMemoryHistoryStorage

CATALOG = {
    "actions": [
        {"id": "calc", "name": "Calculator", "keywords": "数学,math"},
        {"id": "vscode", "name": "Visual Studio Code", "keywords": ["editor", "ide"]},
        {"id": "settings", "name": "Settings", "priority": 1},
        {"id": "settings.theme", "name": "Change Theme", "parent_id": "settings"},
        {"id": "settings.theme.dark", "name": "Dark Mode", "parent_id": "settings.theme"},
    ]
}


@pytest.fixture
def storage() -> InMemoryHistoryStorage:
    return InMemoryHistoryStorage()


@pytest.fixture
def client(storage: InMemoryHistoryStorage) -> Generator[TestClient, None, None]:
    """Create test client with lifespan context and a registered catalog."""
    app = create_app(ActionSearchEngine(storage))
    with TestClient(app) as c:
        response = c.post("/actions", json=CATALOG)
        assert response.status_code == 200
        yield c


class TestHealthEndpoints:
    """Tests for the health endpoint."""

    def test_health_check(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["actions"] == 5
        assert data["history_records"] == 0
        assert "version" in data

    def test_default_app_uses_config(self) -> None:
        """Without an engine the app builds one from the unified config."""
        with TestClient(create_app()) as c:
            response = c.get("/health")

        assert response.status_code == 200
        assert response.json()["actions"] == 0


class TestActionEndpoints:
    """Tests for catalog management."""

    def test_register_reports_total(self, client: TestClient) -> None:
        response = client.post(
            "/actions",
            json={"actions": [{"id": "notes", "name": "Notes"}]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["registered"] == ["notes"]
        assert data["total"] == 6

    def test_unknown_parent_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/actions",
            json={"actions": [{"id": "orphan", "name": "Orphan", "parent_id": "missing"}]},
        )

        assert response.status_code == 422
        assert client.get("/actions/orphan").status_code == 404

    def test_get_action(self, client: TestClient) -> None:
        response = client.get("/actions/settings")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Settings"
        assert data["children"] == ["settings.theme"]
        assert data["priority"] == 1

    def test_get_nonexistent_action(self, client: TestClient) -> None:
        assert client.get("/actions/nope").status_code == 404

    def test_ancestors(self, client: TestClient) -> None:
        response = client.get("/actions/settings.theme.dark/ancestors")

        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == ["settings", "settings.theme"]

    def test_unregister_removes_subtree(self, client: TestClient) -> None:
        response = client.request("DELETE", "/actions", json={"ids": ["settings.theme", "nope"]})

        assert response.status_code == 200
        data = response.json()
        assert sorted(data["removed"]) == ["settings.theme", "settings.theme.dark"]
        assert data["total"] == 3
        assert client.get("/actions/settings").json()["children"] == []


class TestSearchEndpoints:
    """Tests for search and usage recording."""

    def test_search(self, client: TestClient) -> None:
        response = client.post("/search", json={"query": "calc"})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "calc"
        assert data["results"][0]["id"] == "calc"
        assert data["results"][0]["base_score"] > 0

    def test_search_excludes_weak_matches(self, client: TestClient) -> None:
        response = client.post("/search", json={"query": "jisuanqi"})

        assert response.status_code == 200
        assert "calc" not in [r["id"] for r in response.json()["results"]]

    def test_search_scoped_and_limited(self, client: TestClient) -> None:
        response = client.post("/search", json={"query": "", "root_id": "settings"})
        assert [r["id"] for r in response.json()["results"]] == ["settings.theme"]

        response = client.post("/search", json={"query": "e", "limit": 1})
        assert len(response.json()["results"]) == 1

    def test_invalid_limit(self, client: TestClient) -> None:
        response = client.post("/search", json={"query": "calc", "limit": 0})
        assert response.status_code == 422

    def test_usage_boosts_score(self, client: TestClient) -> None:
        before = client.post("/search", json={"query": "calc"}).json()["results"][0]

        response = client.post("/usage", json={"action_id": "calc", "query": "calc"})
        assert response.status_code == 200
        data = response.json()
        assert data["usage_count"] == 1
        assert "calc" in data["query_affinity"]

        after = client.post("/search", json={"query": "calc"}).json()["results"][0]
        assert after["id"] == "calc"
        assert after["score"] > before["score"]


class TestHistoryEndpoints:
    """Tests for usage history endpoints."""

    def test_history_roundtrip(self, client: TestClient) -> None:
        assert client.get("/history/calc").status_code == 404

        client.post("/usage", json={"action_id": "calc", "query": "math"})
        response = client.get("/history/calc")

        assert response.status_code == 200
        data = response.json()
        assert data["action_id"] == "calc"
        assert data["usage_count"] == 1
        assert len(data["recent_usage"]) == 1

    def test_clear_history(self, client: TestClient) -> None:
        client.post("/usage", json={"action_id": "calc"})

        response = client.delete("/history")

        assert response.status_code == 200
        assert response.json() == {"status": "cleared"}
        assert client.get("/history/calc").status_code == 404
        assert client.get("/health").json()["history_records"] == 0

    def test_history_saved_on_shutdown(self, storage: InMemoryHistoryStorage) -> None:
        with TestClient(create_app(ActionSearchEngine(storage))) as c:
            c.post("/actions", json=CATALOG)
            c.post("/usage", json={"action_id": "calc", "query": "calc"})

        blob = asyncio.run(storage.load())
        assert blob is not None
        assert blob["actions"]["calc"]["usage_count"] == 1
