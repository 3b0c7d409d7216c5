"""FastAPI routers for the referral waitlist.

Provides:
- POST /api/waitlist            — public, join (idempotent by email)
- GET  /api/waitlist/position   — public, rank and referral standing for an email
- GET  /api/waitlist/stats      — public, member count and top referrers
- GET  /api/admin/waitlist      — admin, full dump with total referrals
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tempt_api.api.admin_auth import require_admin
from tempt_api.api.dependencies import get_origin, get_waitlist_service
from tempt_api.api.schemas import (
    JoinWaitlistRequest,
    JoinWaitlistResponse,
    ReferrerEntryResponse,
    WaitlistListResponse,
    WaitlistPositionResponse,
    WaitlistStatsResponse,
)
from tempt_api.services.waitlist import WaitlistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/waitlist", tags=["waitlist"])
admin_router = APIRouter(
    prefix="/api/admin/waitlist",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.post("", response_model=JoinWaitlistResponse, response_model_exclude_none=True)
async def join_waitlist(
    request: JoinWaitlistRequest,
    origin: str = Depends(get_origin),
    service: WaitlistService = Depends(get_waitlist_service),
):
    """Join the waitlist, optionally crediting a referrer.

    Public endpoint — no authentication required.
    Idempotent: re-submitting the same email returns the existing standing
    with duplicate=True.
    """
    result = await service.join(request.email, name=request.name, ref=request.ref, origin=origin)

    if result.duplicate:
        return JoinWaitlistResponse(
            message="Already on the waitlist!",
            duplicate=True,
            position=result.position,
            ref_code=result.member.ref_code,
            referrals=result.member.referrals,
        )

    return JoinWaitlistResponse(
        message=f"You're #{result.position} on the waitlist!",
        position=result.position,
        ref_code=result.member.ref_code,
        referrals=result.member.referrals,
        total=result.total,
    )


@router.get("/position", response_model=WaitlistPositionResponse)
async def waitlist_position(
    email: Optional[str] = Query(default=None),
    service: WaitlistService = Depends(get_waitlist_service),
):
    info = await service.position(email)
    return WaitlistPositionResponse(
        position=info.position,
        total=info.total,
        ref_code=info.member.ref_code,
        referrals=info.member.referrals,
    )


@router.get("/stats", response_model=WaitlistStatsResponse)
async def waitlist_stats(service: WaitlistService = Depends(get_waitlist_service)):
    stats = await service.stats()
    return WaitlistStatsResponse(
        total=stats.total,
        top_referrers=[
            ReferrerEntryResponse(name=e.name, referrals=e.referrals) for e in stats.top_referrers
        ],
    )


@admin_router.get("", response_model=WaitlistListResponse)
async def list_waitlist(service: WaitlistService = Depends(get_waitlist_service)):
    dump = await service.admin_list()
    return WaitlistListResponse(
        count=dump.count,
        total_referrals=dump.total_referrals,
        members=[m.to_dict() for m in dump.members],
    )
