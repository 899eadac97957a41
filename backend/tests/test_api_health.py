"""Tests for health check endpoint."""

from fastapi.testclient import TestClient

from fintrack import main


def test_health_check(client):
    """Health endpoint should return ok status."""
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "app_name" in data


def test_root(client):
    """Root endpoint should report the app as running."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_startup_creates_tables(monkeypatch):
    """Entering the app's lifespan initializes the database once."""
    calls = []
    monkeypatch.setattr(main, "init_db", lambda: calls.append(True))
    with TestClient(main.app):
        assert calls == [True]
