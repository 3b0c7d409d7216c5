"""ETH -> Solana migration registry, deduplicated by ETH address.

A registration starts ``pending``. Its Solana address can be changed by
re-registering the same ETH address; status, verified balance and
transaction hash are set by admins.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from tempt_api.data.store import MIGRATIONS, RecordStore
from tempt_api.domain import Balance, MigrationRegistration, MigrationStatus, utc_now_iso
from tempt_api.services.errors import NotFound, ValidationError
from tempt_api.services.validators import optional_email, require_eth_address, require_sol_address

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = frozenset({"status", "verified_balance", "tx_hash"})


class RegisterOutcome(str, Enum):
    """What a register call did to the collection."""

    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


@dataclass
class RegisterResult:
    registration: MigrationRegistration
    outcome: RegisterOutcome

    @property
    def duplicate(self) -> bool:
        return self.outcome is not RegisterOutcome.CREATED


@dataclass
class RegistrationSummary:
    """Full registry dump with per-status counts."""

    registrations: list[MigrationRegistration]
    status_counts: dict[str, int] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.registrations)


def parse_status(raw: Any) -> str:
    """Return the canonical status value, rejecting anything outside the lifecycle."""
    try:
        return MigrationStatus(str(raw).strip().lower()).value
    except ValueError:
        allowed = ", ".join(s.value for s in MigrationStatus)
        raise ValidationError("status", f"Invalid status. Expected one of: {allowed}.") from None


class MigrationRegistry:
    """Registry of ETH holders waiting for their Solana airdrop."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def register(
        self,
        eth_address: Optional[str],
        sol_address: Optional[str],
        email: Optional[str] = None,
        balance: Optional[Balance] = None,
        origin: str = "unknown",
    ) -> RegisterResult:
        """Register or update a migration.

        The ETH address is checked before the Solana address.

        Raises:
            ValidationError: If either address, or a supplied email, is malformed
        """
        eth_address = require_eth_address(eth_address)
        sol_address = require_sol_address(sol_address)
        email = optional_email(email)
        balance_text = str(balance).strip() if balance not in (None, "") else None
        key = eth_address.lower()

        async with self._store.locked(MIGRATIONS):
            records = await self._store.load(MIGRATIONS)
            for record in records:
                if (record.get("ethAddress") or "").lower() != key:
                    continue
                if record.get("solAddress") == sol_address:
                    return RegisterResult(
                        MigrationRegistration.from_dict(record), RegisterOutcome.UNCHANGED
                    )
                record["solAddress"] = sol_address
                record["updatedAt"] = utc_now_iso()
                await self._store.replace(MIGRATIONS, records)
                logger.info("Migration Solana address updated: eth=%s sol=%s", key, sol_address)
                return RegisterResult(MigrationRegistration.from_dict(record), RegisterOutcome.UPDATED)

            registration = MigrationRegistration(
                eth_address=key,
                sol_address=sol_address,
                email=email,
                self_reported_balance=balance_text,
                ip=origin,
            )
            records.append(registration.to_dict())
            await self._store.replace(MIGRATIONS, records)

        logger.info("Migration registered: eth=%s sol=%s", key, sol_address)
        return RegisterResult(registration, RegisterOutcome.CREATED)

    async def list_registrations(self) -> RegistrationSummary:
        registrations = [
            MigrationRegistration.from_dict(r) for r in await self._store.load(MIGRATIONS)
        ]
        counts = {status.value: 0 for status in MigrationStatus}
        for registration in registrations:
            if registration.status in counts:
                counts[registration.status] += 1
        return RegistrationSummary(registrations, counts)

    async def patch(self, registration_id: str, updates: dict[str, Any]) -> MigrationRegistration:
        """Apply admin changes to one registration.

        Only keys present in *updates* are applied. Empty ``status`` or
        ``tx_hash`` values are ignored; ``verified_balance`` may be set to None.

        Raises:
            ValidationError: If the status is not a lifecycle value
            NotFound: If no registration has *registration_id*
        """
        unknown = set(updates) - PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(sorted(unknown)[0], "Unsupported field.")
        status = parse_status(updates["status"]) if updates.get("status") else None

        async with self._store.locked(MIGRATIONS):
            records = await self._store.load(MIGRATIONS)
            record = next((r for r in records if r.get("id") == registration_id), None)
            if record is None:
                raise NotFound("Not found")

            if status is not None:
                record["status"] = status
            if "verified_balance" in updates:
                record["verifiedBalance"] = updates["verified_balance"]
            if updates.get("tx_hash"):
                record["txHash"] = updates["tx_hash"]
            record["updatedAt"] = utc_now_iso()
            await self._store.replace(MIGRATIONS, records)

        logger.info(
            "Migration patched",
            extra={"registration_id": registration_id, "fields": sorted(updates)},
        )
        return MigrationRegistration.from_dict(record)
