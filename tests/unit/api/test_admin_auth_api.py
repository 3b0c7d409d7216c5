"""Tests for the admin key gate (require_admin)."""

import pytest

from tests.unit.api.conftest import ADMIN_KEY, ETH_A, SOL_1

ADMIN_ENDPOINTS = [
    ("GET", "/api/admin/subscribers"),
    ("DELETE", "/api/admin/subscribers/a@x.com"),
    ("GET", "/api/admin/migrations"),
    ("PATCH", "/api/admin/migrations/some-id"),
    ("GET", "/api/admin/analytics"),
    ("GET", "/api/admin/waitlist"),
]


@pytest.mark.parametrize("method, path", ADMIN_ENDPOINTS)
class TestAdminGate:
    """Every admin endpoint rejects requests without the right key."""

    def test_missing_key(self, client, method, path):
        resp = client.request(method, path, json={} if method == "PATCH" else None)

        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "Unauthorized"}

    def test_wrong_header_key(self, client, method, path):
        resp = client.request(
            method, path,
            headers={"X-Admin-Key": ADMIN_KEY + "x"},
            json={} if method == "PATCH" else None,
        )
        assert resp.status_code == 401

    def test_wrong_query_key(self, client, method, path):
        resp = client.request(
            method, path,
            params={"key": "guess"},
            json={} if method == "PATCH" else None,
        )
        assert resp.status_code == 401


class TestAcceptedKeys:
    def test_header_key(self, client):
        resp = client.get("/api/admin/subscribers", headers={"X-Admin-Key": ADMIN_KEY})
        assert resp.status_code == 200

    def test_query_key(self, client):
        resp = client.get("/api/admin/subscribers", params={"key": ADMIN_KEY})
        assert resp.status_code == 200

    def test_key_match_is_exact(self, client):
        resp = client.get("/api/admin/subscribers", headers={"X-Admin-Key": ADMIN_KEY.upper()})
        assert resp.status_code == 401


class TestNoMutationWhenUnauthorized:
    def test_delete_without_key_keeps_subscriber(self, client):
        client.post("/api/subscribe", json={"email": "a@x.com"})

        client.delete("/api/admin/subscribers/a@x.com")

        resp = client.get("/api/admin/subscribers", params={"key": ADMIN_KEY})
        assert resp.json()["count"] == 1

    def test_patch_without_key_keeps_status(self, client):
        client.post("/api/migrate", json={"ethAddress": ETH_A, "solAddress": SOL_1})
        reg_id = client.get("/api/admin/migrations", params={"key": ADMIN_KEY}).json()["registrations"][0]["id"]

        resp = client.patch(f"/api/admin/migrations/{reg_id}", json={"status": "airdropped"})

        assert resp.status_code == 401
        listing = client.get("/api/admin/migrations", params={"key": ADMIN_KEY}).json()
        assert listing["pending"] == 1
        assert listing["airdropped"] == 0


class TestEmptyConfiguredKey:
    def test_empty_key_rejects_everything(self, tmp_path):
        from fastapi.testclient import TestClient

        from config.settings import AdminConfig, LoggingConfig, Settings, StorageConfig
        from tempt_api.api.app import create_app

        settings = Settings(
            storage=StorageConfig(data_dir=tmp_path),
            admin=AdminConfig(key=""),
            logging=LoggingConfig(file=None),
        )
        with TestClient(create_app(settings)) as client:
            resp = client.get("/api/admin/subscribers", params={"key": ""})

        assert resp.status_code == 401
