"""FastAPI routers for the ETH -> Solana migration registry.

Provides:
- POST  /api/migrate                    — public, idempotent by ETH address
- GET   /api/admin/migrations           — admin, registrations with status counts
- PATCH /api/admin/migrations/{id}      — admin, set status / verified balance / tx hash
"""

import logging

from fastapi import APIRouter, Depends

from tempt_api.api.admin_auth import require_admin
from tempt_api.api.dependencies import get_migration_registry, get_origin
from tempt_api.api.schemas import (
    MessageResponse,
    MigrateRequest,
    MigrationListResponse,
    MigrationPatchRequest,
    MigrationPatchResponse,
)
from tempt_api.services.migrations import MigrationRegistry, RegisterOutcome

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/migrate", tags=["migrations"])
admin_router = APIRouter(
    prefix="/api/admin/migrations",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)

_MESSAGES = {
    RegisterOutcome.CREATED: "Registration recorded! You'll receive your TMPT on Solana at launch.",
    RegisterOutcome.UPDATED: "Your Solana address has been updated.",
    RegisterOutcome.UNCHANGED: "Already registered — you're in the airdrop!",
}


@router.post("", response_model=MessageResponse, response_model_exclude_none=True)
async def register_migration(
    request: MigrateRequest,
    origin: str = Depends(get_origin),
    registry: MigrationRegistry = Depends(get_migration_registry),
):
    """Register an ETH address for the Solana airdrop.

    Re-registering with a different Solana address updates it in place.
    """
    result = await registry.register(
        request.eth_address,
        request.sol_address,
        email=request.email,
        balance=request.balance,
        origin=origin,
    )
    return MessageResponse(
        message=_MESSAGES[result.outcome],
        duplicate=True if result.duplicate else None,
    )


@admin_router.get("", response_model=MigrationListResponse)
async def list_migrations(registry: MigrationRegistry = Depends(get_migration_registry)):
    summary = await registry.list_registrations()
    return MigrationListResponse(
        count=summary.count,
        pending=summary.status_counts["pending"],
        verified=summary.status_counts["verified"],
        airdropped=summary.status_counts["airdropped"],
        registrations=[r.to_dict() for r in summary.registrations],
    )


@admin_router.patch("/{registration_id}", response_model=MigrationPatchResponse)
async def patch_migration(
    registration_id: str,
    request: MigrationPatchRequest,
    registry: MigrationRegistry = Depends(get_migration_registry),
):
    registration = await registry.patch(registration_id, request.model_dump(exclude_unset=True))
    return MigrationPatchResponse(registration=registration.to_dict())
