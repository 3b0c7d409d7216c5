"""Shared fixtures for service tests.

Each test gets its own data directory and freshly built services.
"""

import pytest

from config.settings import AnalyticsConfig, WaitlistConfig
from tempt_api.data.store import RecordStore
from tempt_api.services.analytics import AnalyticsAggregator
from tempt_api.services.migrations import MigrationRegistry
from tempt_api.services.subscribers import SubscriberService
from tempt_api.services.waitlist import WaitlistService

ETH_A = "0x" + "ab" * 20
ETH_B = "0x" + "12" * 20
SOL_1 = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
SOL_2 = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


@pytest.fixture
def store(tmp_path):
    return RecordStore(data_dir=tmp_path / "data")


@pytest.fixture
def subscribers(store):
    return SubscriberService(store)


@pytest.fixture
def migrations(store):
    return MigrationRegistry(store)


@pytest.fixture
def waitlist(store):
    return WaitlistService(store, WaitlistConfig())


@pytest.fixture
def analytics(store):
    return AnalyticsAggregator(store, AnalyticsConfig())
