"""FastAPI application factory for the TEMPT API.

``create_app`` wires settings, the record store and the four services onto
``app.state`` and renders every failure as ``{"success": false, "message": ...}``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import Settings, get_settings
from tempt_api.api import analytics, health, migrations, subscribers, waitlist
from tempt_api.data.store import RecordStore
from tempt_api.services.analytics import AnalyticsAggregator
from tempt_api.services.errors import ServiceError
from tempt_api.services.migrations import MigrationRegistry
from tempt_api.services.subscribers import SubscriberService
from tempt_api.services.waitlist import WaitlistService

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error. Please try again."


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


async def _service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    else:
        logger.info(
            "%s %s rejected: %s", request.method, request.url.path, exc.message,
            extra={"status_code": exc.status_code},
        )
    return _failure(exc.status_code, exc.message)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    location = errors[0].get("loc", ()) if errors else ()
    field = next((str(part) for part in reversed(location) if isinstance(part, str)), None)
    if field is None or field == "body":
        return _failure(400, "Invalid request body.")
    return _failure(400, f"Invalid {field}.")


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Not found" if exc.status_code in (404, 405) else str(exc.detail)
    return _failure(exc.status_code, message)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _failure(500, SERVER_ERROR_MESSAGE)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the API.

    Args:
        settings: Configuration to use; defaults to ``get_settings()``

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    store = RecordStore.from_config(settings.storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        created = store.ensure_collections()
        logger.info(
            "TEMPT API ready",
            extra={"data_dir": str(store.data_dir), "created_files": len(created)},
        )
        yield

    app = FastAPI(title="TEMPT Token API", version="1.0.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.store = store
    app.state.subscribers = SubscriberService(store)
    app.state.migrations = MigrationRegistry(store)
    app.state.waitlist = WaitlistService(store, settings.waitlist)
    app.state.analytics = AnalyticsAggregator(store, settings.analytics)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", settings.admin.header_name],
    )

    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)

    for module in (subscribers, migrations, analytics, waitlist):
        app.include_router(module.router)
        app.include_router(module.admin_router)
    app.include_router(health.router)

    return app
