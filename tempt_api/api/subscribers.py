"""FastAPI routers for email subscribers.

Provides:
- POST   /api/subscribe                    — public, idempotent by email
- GET    /api/admin/subscribers            — admin, full list
- DELETE /api/admin/subscribers/{email}    — admin, remove one subscriber
"""

import logging

from fastapi import APIRouter, Depends

from tempt_api.api.admin_auth import require_admin
from tempt_api.api.dependencies import get_origin, get_subscriber_service
from tempt_api.api.schemas import MessageResponse, SubscribeRequest, SubscriberListResponse
from tempt_api.services.subscribers import SubscriberService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/subscribe", tags=["subscribers"])
admin_router = APIRouter(
    prefix="/api/admin/subscribers",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.post("", response_model=MessageResponse, response_model_exclude_none=True)
async def subscribe(
    request: SubscribeRequest,
    origin: str = Depends(get_origin),
    service: SubscriberService = Depends(get_subscriber_service),
):
    """Subscribe an email to launch announcements.

    Public endpoint — no authentication required.
    Idempotent: re-submitting the same email returns duplicate=True.
    """
    result = await service.subscribe(
        request.email,
        name=request.name,
        source=request.source,
        origin=origin,
    )
    if result.duplicate:
        return MessageResponse(message="Already subscribed!", duplicate=True)
    return MessageResponse(message="You're on the list! We'll notify you at launch.")


@admin_router.get("", response_model=SubscriberListResponse)
async def list_subscribers(service: SubscriberService = Depends(get_subscriber_service)):
    subscribers = await service.list_subscribers()
    return SubscriberListResponse(
        count=len(subscribers),
        subscribers=[s.to_dict() for s in subscribers],
    )


@admin_router.delete("/{email}", response_model=MessageResponse, response_model_exclude_none=True)
async def remove_subscriber(
    email: str,
    service: SubscriberService = Depends(get_subscriber_service),
):
    removed = await service.remove_subscriber(email)
    return MessageResponse(message=f"Removed {removed.email}")
