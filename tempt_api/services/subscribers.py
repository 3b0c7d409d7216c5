"""Email subscriber ledger, deduplicated by normalized email."""

import logging
from dataclasses import dataclass
from typing import Optional

from tempt_api.data.store import SUBSCRIBERS, RecordStore
from tempt_api.domain import Subscriber
from tempt_api.services.errors import NotFound
from tempt_api.services.validators import normalize_email, require_email

logger = logging.getLogger(__name__)

SOURCE_MAX_LENGTH = 50
NAME_MAX_LENGTH = 100


@dataclass
class SubscribeResult:
    """Outcome of a subscribe call; ``duplicate`` means nothing was written."""

    subscriber: Subscriber
    duplicate: bool = False


class SubscriberService:
    """Signup ledger for launch announcements."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def subscribe(
        self,
        email: Optional[str],
        name: Optional[str] = None,
        source: Optional[str] = None,
        origin: str = "unknown",
    ) -> SubscribeResult:
        """Add *email* to the list. Re-subscribing is a successful no-op.

        Raises:
            ValidationError: If the email is malformed
        """
        email = require_email(email)
        source = (source or "").strip()[:SOURCE_MAX_LENGTH] or "website"
        name = (name or "").strip()[:NAME_MAX_LENGTH] or None

        async with self._store.locked(SUBSCRIBERS):
            records = await self._store.load(SUBSCRIBERS)
            for record in records:
                if record.get("email") == email:
                    logger.info("Subscribe re-submission for email=%s", email)
                    return SubscribeResult(Subscriber.from_dict(record), duplicate=True)

            subscriber = Subscriber(email=email, name=name, source=source, ip=origin)
            records.append(subscriber.to_dict())
            await self._store.replace(SUBSCRIBERS, records)

        logger.info("New subscriber: email=%s source=%s", email, source)
        return SubscribeResult(subscriber)

    async def list_subscribers(self) -> list[Subscriber]:
        """All subscribers in signup order (unlocked read)."""
        return [Subscriber.from_dict(r) for r in await self._store.load(SUBSCRIBERS)]

    async def remove_subscriber(self, email: Optional[str]) -> Subscriber:
        """Delete the subscriber with *email*.

        Raises:
            NotFound: If no subscriber has that email
        """
        email = normalize_email(email)
        async with self._store.locked(SUBSCRIBERS):
            records = await self._store.load(SUBSCRIBERS)
            kept = [r for r in records if r.get("email") != email]
            if len(kept) == len(records):
                raise NotFound("Subscriber not found")
            removed = next(r for r in records if r.get("email") == email)
            await self._store.replace(SUBSCRIBERS, kept)

        logger.info("Removed subscriber email=%s", email)
        return Subscriber.from_dict(removed)
