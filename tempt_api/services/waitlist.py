"""Referral-driven waitlist.

Queue rank is the member's 1-based position in the collection, so the
collection is append-only and never re-sorted on disk. Each member gets a
unique referral code at creation; a later signup citing that code credits
the owner once.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from tempt_api.data.store import WAITLIST, RecordStore
from tempt_api.domain import WaitlistMember, as_count, utc_now_iso
from tempt_api.services.errors import InternalError, NotFound
from tempt_api.services.validators import require_email

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100


@dataclass
class JoinResult:
    member: WaitlistMember
    position: int
    total: int
    duplicate: bool = False


@dataclass
class PositionInfo:
    member: WaitlistMember
    position: int
    total: int


@dataclass
class ReferrerEntry:
    name: str
    referrals: int


@dataclass
class WaitlistStats:
    total: int
    top_referrers: list[ReferrerEntry]


@dataclass
class WaitlistDump:
    members: list[WaitlistMember]
    total_referrals: int

    @property
    def count(self) -> int:
        return len(self.members)


class WaitlistService:
    """Waitlist ledger with referral crediting.

    Args:
        store: Record store owning the waitlist collection
        config: ``WaitlistConfig`` (code size, retry cap, leaderboard size)
    """

    def __init__(self, store: RecordStore, config):
        self._store = store
        self._config = config

    def normalize_ref_code(self, raw: Optional[str]) -> Optional[str]:
        """Trim, cap and upper-case a referring code; blank means none."""
        return (raw or "").strip()[: self._config.ref_code_max_length].upper() or None

    def generate_code(self, taken: set[str]) -> str:
        """Return a referral code not in *taken*.

        Raises:
            InternalError: If every attempt collided
        """
        for _ in range(self._config.code_attempts):
            code = secrets.token_hex(self._config.code_bytes).upper()
            if code not in taken:
                return code
            logger.warning("Referral code collision on %s, regenerating", code)
        raise InternalError("Could not allocate a referral code. Please try again.")

    async def join(
        self,
        email: Optional[str],
        name: Optional[str] = None,
        ref: Optional[str] = None,
        origin: str = "unknown",
    ) -> JoinResult:
        """Add *email* to the waitlist, crediting the owner of *ref* if any.

        Joining again is a successful no-op that reports the current standing;
        the referring code from the first join is kept.

        Raises:
            ValidationError: If the email is malformed
            InternalError: If no unique referral code could be generated
        """
        email = require_email(email)
        name = (name or "").strip()[:NAME_MAX_LENGTH] or None
        ref_code = self.normalize_ref_code(ref)

        async with self._store.locked(WAITLIST):
            records = await self._store.load(WAITLIST)
            for index, record in enumerate(records):
                if record.get("email") == email:
                    logger.info("Waitlist re-submission for email=%s", email)
                    return JoinResult(
                        WaitlistMember.from_dict(record),
                        position=index + 1,
                        total=len(records),
                        duplicate=True,
                    )

            code = self.generate_code({r.get("refCode") for r in records})

            if ref_code:
                referrer = next((r for r in records if r.get("refCode") == ref_code), None)
                if referrer is not None:
                    referrer["referrals"] = as_count(referrer.get("referrals")) + 1
                    referrer["updatedAt"] = utc_now_iso()
                    logger.info(
                        "Referral credited",
                        extra={"referrer": referrer.get("email"), "ref_code": ref_code},
                    )

            member = WaitlistMember(
                email=email,
                name=name,
                ref_code=code,
                referred_by=ref_code,
                ip=origin,
            )
            records.append(member.to_dict())
            await self._store.replace(WAITLIST, records)

        position = len(records)
        logger.info("Waitlist join: email=%s position=%d ref=%s", email, position, ref_code or "none")
        return JoinResult(member, position=position, total=position)

    async def position(self, email: Optional[str]) -> PositionInfo:
        """Current rank and referral standing for *email*.

        Raises:
            ValidationError: If the email is malformed
            NotFound: If the email is not on the waitlist
        """
        email = require_email(email, field="email")
        records = await self._store.load(WAITLIST)
        for index, record in enumerate(records):
            if record.get("email") == email:
                return PositionInfo(
                    WaitlistMember.from_dict(record), position=index + 1, total=len(records)
                )
        raise NotFound("Not found on waitlist.")

    async def stats(self) -> WaitlistStats:
        """Member count and the referral leaderboard.

        Ties keep signup order; members without credits are not listed.
        """
        members = [WaitlistMember.from_dict(r) for r in await self._store.load(WAITLIST)]
        ranked = sorted(
            (m for m in members if m.referrals > 0),
            key=lambda m: m.referrals,
            reverse=True,
        )
        top = [
            ReferrerEntry(name=m.display_name, referrals=m.referrals)
            for m in ranked[: self._config.top_referrers]
        ]
        return WaitlistStats(total=len(members), top_referrers=top)

    async def admin_list(self) -> WaitlistDump:
        members = [WaitlistMember.from_dict(r) for r in await self._store.load(WAITLIST)]
        return WaitlistDump(members, total_referrals=sum(m.referrals for m in members))
