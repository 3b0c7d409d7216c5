"""Domain records for the TEMPT API.

Defines the typed records held in each collection:
- Subscriber: email signup for launch announcements
- MigrationRegistration: ETH holder's request to receive tokens on Solana
- WaitlistMember: ranked waitlist entry with referral bookkeeping
- PageviewEvent: anonymous, classified page view

Records are persisted and returned in camelCase so that existing data files
and the static site keep working; ``from_dict`` tolerates missing optional keys.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

Balance = Union[str, int, float]


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_record_id() -> str:
    """Opaque 16-hex-character record id."""
    return secrets.token_hex(8)


def as_count(value: Any) -> int:
    """Non-negative integer from a stored counter; unreadable values count as 0."""
    if value is None or value == "":
        return 0
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        logger.warning("Unreadable counter value %r, treating as 0", value)
        return 0


class MigrationStatus(str, Enum):
    """Lifecycle of a migration registration."""

    PENDING = "pending"
    VERIFIED = "verified"
    AIRDROPPED = "airdropped"


@dataclass
class Subscriber:
    """An email subscribed to launch announcements.

    Attributes:
        email: Trimmed, lower-cased address (dedup key)
        source: Where the signup form lives (e.g. 'website')
        name: Optional display name
        ip: Origin address of the request
        id: Opaque record id
        subscribed_at: Creation timestamp
    """

    email: str
    source: str = "website"
    name: Optional[str] = None
    ip: str = "unknown"
    id: str = field(default_factory=new_record_id)
    subscribed_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "source": self.source,
            "subscribedAt": self.subscribed_at,
            "ip": self.ip,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Subscriber":
        return cls(
            id=data.get("id") or "",
            email=data.get("email", ""),
            name=data.get("name"),
            source=data.get("source") or "website",
            subscribed_at=data.get("subscribedAt") or "",
            ip=data.get("ip") or "unknown",
        )


@dataclass
class MigrationRegistration:
    """An ETH address registered to receive the Solana airdrop.

    ``status`` stays a plain string on the record so that files edited
    offline still load; writes through the registry are restricted to
    ``MigrationStatus`` values.
    """

    eth_address: str
    sol_address: str
    email: Optional[str] = None
    self_reported_balance: Optional[str] = None
    status: str = MigrationStatus.PENDING.value
    verified_balance: Optional[Balance] = None
    tx_hash: Optional[str] = None
    ip: str = "unknown"
    id: str = field(default_factory=new_record_id)
    registered_at: str = field(default_factory=utc_now_iso)
    updated_at: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "ethAddress": self.eth_address,
            "solAddress": self.sol_address,
            "email": self.email,
            "selfReportedBalance": self.self_reported_balance,
            "status": self.status,
            "registeredAt": self.registered_at,
            "ip": self.ip,
        }
        if self.verified_balance is not None:
            data["verifiedBalance"] = self.verified_balance
        if self.tx_hash is not None:
            data["txHash"] = self.tx_hash
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MigrationRegistration":
        return cls(
            id=data.get("id") or "",
            eth_address=(data.get("ethAddress") or "").lower(),
            sol_address=data.get("solAddress") or "",
            email=data.get("email"),
            self_reported_balance=data.get("selfReportedBalance"),
            status=data.get("status") or MigrationStatus.PENDING.value,
            verified_balance=data.get("verifiedBalance"),
            tx_hash=data.get("txHash"),
            registered_at=data.get("registeredAt") or "",
            updated_at=data.get("updatedAt"),
            ip=data.get("ip") or "unknown",
        )


@dataclass
class WaitlistMember:
    """A waitlist signup.

    The member's rank is its 1-based index in the collection and is never
    stored on the record.
    """

    email: str
    ref_code: str
    name: Optional[str] = None
    referred_by: Optional[str] = None
    referrals: int = 0
    ip: str = "unknown"
    id: str = field(default_factory=new_record_id)
    joined_at: str = field(default_factory=utc_now_iso)
    updated_at: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Name for public listings, falling back to the email's local part."""
        return self.name or self.email.split("@")[0]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "refCode": self.ref_code,
            "referredBy": self.referred_by,
            "referrals": self.referrals,
            "joinedAt": self.joined_at,
            "ip": self.ip,
        }
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WaitlistMember":
        return cls(
            id=data.get("id") or "",
            email=data.get("email", ""),
            name=data.get("name"),
            ref_code=data.get("refCode") or "",
            referred_by=data.get("referredBy"),
            referrals=as_count(data.get("referrals")),
            joined_at=data.get("joinedAt") or "",
            updated_at=data.get("updatedAt"),
            ip=data.get("ip") or "unknown",
        )


@dataclass
class PageviewEvent:
    """One classified, cookie-free page view."""

    page: str
    ref: str
    device: str
    ts: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {"ts": self.ts, "page": self.page, "ref": self.ref, "device": self.device}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PageviewEvent":
        return cls(
            ts=data.get("ts") or "",
            page=data.get("page") or "/",
            ref=data.get("ref") or "direct",
            device=data.get("device") or "desktop",
        )
