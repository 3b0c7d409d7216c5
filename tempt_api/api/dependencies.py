"""FastAPI dependencies resolving app-scoped settings, store and services.

Everything is built once by ``create_app`` and parked on ``app.state``;
these helpers hand it to the routers:

- get_app_settings()        — the ``Settings`` the app was built with
- get_store()               — the shared ``RecordStore``
- get_subscriber_service()  — ``SubscriberService``
- get_migration_registry()  — ``MigrationRegistry``
- get_waitlist_service()    — ``WaitlistService``
- get_analytics()           — ``AnalyticsAggregator``
- get_origin()              — caller's address for audit fields
"""

from fastapi import Request

from config.settings import Settings
from tempt_api.data.store import RecordStore
from tempt_api.services.analytics import AnalyticsAggregator
from tempt_api.services.migrations import MigrationRegistry
from tempt_api.services.subscribers import SubscriberService
from tempt_api.services.waitlist import WaitlistService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def get_subscriber_service(request: Request) -> SubscriberService:
    return request.app.state.subscribers


def get_migration_registry(request: Request) -> MigrationRegistry:
    return request.app.state.migrations


def get_waitlist_service(request: Request) -> WaitlistService:
    return request.app.state.waitlist


def get_analytics(request: Request) -> AnalyticsAggregator:
    return request.app.state.analytics


def get_origin(request: Request) -> str:
    """First ``X-Forwarded-For`` hop, else the socket peer, else 'unknown'."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"
