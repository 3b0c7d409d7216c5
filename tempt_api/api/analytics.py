"""FastAPI routers for pageview analytics.

Provides:
- POST /api/pageview           — public, record one view (bots get 204, nothing stored)
- GET  /api/admin/analytics    — admin, aggregate over the last ``days`` days
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request, Response, status
from pydantic import ValidationError

from tempt_api.api.admin_auth import require_admin
from tempt_api.api.dependencies import get_analytics
from tempt_api.api.schemas import PageviewRequest
from tempt_api.services.analytics import AnalyticsAggregator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pageview", tags=["analytics"])
admin_router = APIRouter(
    prefix="/api/admin/analytics",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


async def _read_pageview(request: Request) -> PageviewRequest:
    """Parse the beacon body leniently.

    Beacons arrive as JSON or text/plain, sometimes with no body at all;
    anything unparseable is treated as an empty payload.
    """
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else {}
    except (UnicodeDecodeError, ValueError):
        payload = {}
    if not isinstance(payload, dict):
        payload = {}
    try:
        return PageviewRequest.model_validate(payload)
    except ValidationError:
        logger.debug("Ignoring malformed pageview fields: %s", payload)
        return PageviewRequest()


@router.post("")
async def record_pageview(
    pageview: PageviewRequest = Depends(_read_pageview),
    user_agent: Optional[str] = Header(default=None),
    analytics: AnalyticsAggregator = Depends(get_analytics),
):
    event = await analytics.record(pageview.page, pageview.referrer, user_agent)
    if event is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return {"success": True}


@admin_router.get("")
async def analytics_report(
    days: Optional[int] = Query(default=None, ge=1),
    analytics: AnalyticsAggregator = Depends(get_analytics),
):
    report = await analytics.aggregate(days)
    return {"success": True, **report.to_dict()}
