"""Shared fixtures for API endpoint tests.

Provides:
- Settings pointing at a per-test temporary data directory
- FastAPI TestClient built from the real application factory
- Admin header helper
"""

import pytest
from fastapi.testclient import TestClient

from config.settings import AdminConfig, LoggingConfig, Settings, StorageConfig
from tempt_api.api.app import create_app

ADMIN_KEY = "test-admin-key"
ADMIN_HEADERS = {"X-Admin-Key": ADMIN_KEY}

ETH_A = "0x" + "ab" * 20
SOL_1 = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
SOL_2 = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        storage=StorageConfig(data_dir=tmp_path / "data"),
        admin=AdminConfig(key=ADMIN_KEY),
        logging=LoggingConfig(file=None),
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    """TestClient running the app lifespan (creates the collection files)."""
    with TestClient(app) as test_client:
        yield test_client
