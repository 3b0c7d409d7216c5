"""Request and response bodies shared by the routers.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Balance = Union[str, int, float]


class ApiModel(BaseModel):
    """Base model serializing to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(ApiModel):
    success: bool = True
    message: str
    duplicate: Optional[bool] = None


# ---------------------------------------------------------------------------
# Subscribers
# ---------------------------------------------------------------------------

class SubscribeRequest(ApiModel):
    email: Optional[str] = None
    name: Optional[str] = None
    source: Optional[str] = None


class SubscriberListResponse(ApiModel):
    success: bool = True
    count: int
    subscribers: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Migrations
# ---------------------------------------------------------------------------

class MigrateRequest(ApiModel):
    eth_address: Optional[str] = None
    sol_address: Optional[str] = None
    email: Optional[str] = None
    balance: Optional[Balance] = None


class MigrationPatchRequest(ApiModel):
    status: Optional[str] = None
    verified_balance: Optional[Balance] = None
    tx_hash: Optional[str] = None


class MigrationListResponse(ApiModel):
    success: bool = True
    count: int
    pending: int
    verified: int
    airdropped: int
    registrations: list[dict[str, Any]]


class MigrationPatchResponse(ApiModel):
    success: bool = True
    registration: dict[str, Any]


# ---------------------------------------------------------------------------
# Waitlist
# ---------------------------------------------------------------------------

class JoinWaitlistRequest(ApiModel):
    email: Optional[str] = None
    name: Optional[str] = None
    ref: Optional[str] = None


class JoinWaitlistResponse(ApiModel):
    success: bool = True
    message: str
    duplicate: Optional[bool] = None
    position: int
    ref_code: str
    referrals: int
    total: Optional[int] = None


class WaitlistPositionResponse(ApiModel):
    success: bool = True
    position: int
    total: int
    ref_code: str
    referrals: int


class ReferrerEntryResponse(ApiModel):
    name: str
    referrals: int


class WaitlistStatsResponse(ApiModel):
    success: bool = True
    total: int
    top_referrers: list[ReferrerEntryResponse]


class WaitlistListResponse(ApiModel):
    success: bool = True
    count: int
    total_referrals: int
    members: list[dict[str, Any]]


# ---------------------------------------------------------------------------
# Analytics / health
# ---------------------------------------------------------------------------

class PageviewRequest(ApiModel):
    page: Optional[str] = None
    referrer: Optional[str] = None


class HealthResponse(ApiModel):
    status: str = "ok"
    subscribers: int
    migrations: int
    pageviews: int
    waitlist: int
    ts: str
