"""Health probe reporting collection sizes."""

from fastapi import APIRouter, Depends

from tempt_api.api.dependencies import get_store
from tempt_api.api.schemas import HealthResponse
from tempt_api.data.store import ANALYTICS, MIGRATIONS, SUBSCRIBERS, WAITLIST, RecordStore
from tempt_api.domain import utc_now_iso

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health(store: RecordStore = Depends(get_store)):
    return HealthResponse(
        subscribers=await store.count(SUBSCRIBERS),
        migrations=await store.count(MIGRATIONS),
        pageviews=await store.count(ANALYTICS),
        waitlist=await store.count(WAITLIST),
        ts=utc_now_iso(),
    )
