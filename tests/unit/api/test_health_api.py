"""Tests for GET /api/health and the shared error envelope."""

from fastapi.testclient import TestClient

from tests.unit.api.conftest import ETH_A, SOL_1


class TestHealth:
    def test_empty_counts(self, client):
        resp = client.get("/api/health")

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert (body["subscribers"], body["migrations"], body["pageviews"], body["waitlist"]) == (0, 0, 0, 0)
        assert body["ts"].endswith("Z")

    def test_counts_follow_writes(self, client):
        client.post("/api/subscribe", json={"email": "a@x.com"})
        client.post("/api/migrate", json={"ethAddress": ETH_A, "solAddress": SOL_1})
        client.post("/api/waitlist", json={"email": "a@x.com"})
        client.post("/api/pageview", json={"page": "/"}, headers={"User-Agent": "Mozilla/5.0"})

        body = client.get("/api/health").json()

        assert (body["subscribers"], body["migrations"], body["pageviews"], body["waitlist"]) == (1, 1, 1, 1)

    def test_startup_creates_collection_files(self, client, settings):
        names = sorted(p.name for p in settings.storage.data_dir.glob("*.json"))
        assert names == ["analytics.json", "migrations.json", "subscribers.json", "waitlist.json"]

    def test_corrupt_file_counts_as_empty(self, client, settings):
        (settings.storage.data_dir / "subscribers.json").write_text("{broken")

        body = client.get("/api/health").json()

        assert body["subscribers"] == 0


class TestErrorEnvelope:
    def test_unknown_route(self, client):
        resp = client.get("/api/nothing-here")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "message": "Not found"}

    def test_wrong_method(self, client):
        resp = client.put("/api/subscribe", json={"email": "a@x.com"})

        assert resp.status_code == 405
        assert resp.json() == {"success": False, "message": "Not found"}

    def test_unhandled_error_is_generic_500(self, app, monkeypatch):
        async def explode(*args, **kwargs):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(app.state.subscribers, "subscribe", explode)

        with TestClient(app, raise_server_exceptions=False) as client:
            resp = client.post("/api/subscribe", json={"email": "a@x.com"})

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "message": "Server error. Please try again."}

    def test_fail_fast_storage_error(self, tmp_path):
        from config.settings import AdminConfig, LoggingConfig, Settings, StorageConfig
        from tempt_api.api.app import create_app

        settings = Settings(
            storage=StorageConfig(data_dir=tmp_path, fail_fast=True),
            admin=AdminConfig(key="k"),
            logging=LoggingConfig(file=None),
        )
        (tmp_path / "waitlist.json").write_text("[1, 2")

        with TestClient(create_app(settings), raise_server_exceptions=False) as client:
            resp = client.get("/api/waitlist/stats")

        assert resp.status_code == 500
        assert resp.json() == {"success": False, "message": "Server error. Please try again."}
