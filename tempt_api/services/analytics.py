"""Cookie-free pageview analytics.

Events are classified on the way in (bot filter, device class, referrer
source) and kept in a bounded window: once the ceiling is reached the oldest
events are dropped before the new one is appended.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

import pandas as pd

from tempt_api.data.store import ANALYTICS, RecordStore
from tempt_api.domain import PageviewEvent

logger = logging.getLogger(__name__)

BOT_PATTERN = re.compile(r"bot|crawler|spider|crawl|fetch|scraper|headless|lighthouse", re.IGNORECASE)
MOBILE_PATTERN = re.compile(r"mobile|android|iphone|ipad", re.IGNORECASE)

# Evaluated in order; first match wins. ``t.co`` must be the host, not a
# substring of domains such as reddit.com.
REFERRER_RULES: tuple[tuple[str, re.Pattern], ...] = (
    ("twitter", re.compile(r"twitter\.com|(?:^|//|\.)t\.co(?:[/:?#]|$)", re.IGNORECASE)),
    ("telegram", re.compile(r"t\.me|telegram", re.IGNORECASE)),
    ("google", re.compile(r"google\.", re.IGNORECASE)),
    ("discord", re.compile(r"discord", re.IGNORECASE)),
    ("reddit", re.compile(r"reddit", re.IGNORECASE)),
)
REFERRER_CLASSES = ("direct",) + tuple(label for label, _ in REFERRER_RULES) + ("other",)


def is_bot(user_agent: Optional[str]) -> bool:
    return bool(user_agent) and BOT_PATTERN.search(user_agent) is not None


def classify_device(user_agent: Optional[str]) -> str:
    if user_agent and MOBILE_PATTERN.search(user_agent):
        return "mobile"
    return "desktop"


def classify_referrer(referrer: Optional[str]) -> str:
    """Map a referrer URL onto one of ``REFERRER_CLASSES``."""
    if not referrer:
        return "direct"
    for label, pattern in REFERRER_RULES:
        if pattern.search(referrer):
            return label
    return "other"


@dataclass
class AnalyticsReport:
    """Aggregate over a trailing window of pageviews."""

    window_days: int
    total: int
    all_time: int
    top_pages: list[dict[str, Any]] = field(default_factory=list)
    sources: dict[str, int] = field(default_factory=dict)
    devices: dict[str, int] = field(default_factory=dict)
    daily_trend: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": f"last {self.window_days} days",
            "total": self.total,
            "allTime": self.all_time,
            "topPages": self.top_pages,
            "sources": self.sources,
            "devices": self.devices,
            "dailyTrend": self.daily_trend,
        }


def _counts_in_first_seen_order(series: pd.Series) -> pd.Series:
    return series.groupby(series, sort=False).size()


def summarize_events(
    events: list[PageviewEvent],
    window_days: int,
    now: datetime,
    top_pages: int = 20,
) -> AnalyticsReport:
    """Aggregate *events* falling within *window_days* before *now*.

    Events with unparseable timestamps count toward ``all_time`` only.
    """
    frame = pd.DataFrame.from_records(
        [e.to_dict() for e in events], columns=["ts", "page", "ref", "device"]
    )
    frame["ts"] = pd.to_datetime(frame["ts"], utc=True, errors="coerce", format="ISO8601")
    since = pd.Timestamp(now) - pd.Timedelta(days=window_days)
    recent = frame[frame["ts"] >= since]

    pages = (
        _counts_in_first_seen_order(recent["page"])
        .sort_values(ascending=False, kind="stable")
        .head(top_pages)
    )
    days = recent["ts"].dt.strftime("%Y-%m-%d")
    trend = days.groupby(days).size().sort_index()

    return AnalyticsReport(
        window_days=window_days,
        total=len(recent),
        all_time=len(frame),
        top_pages=[{"page": page, "count": int(count)} for page, count in pages.items()],
        sources={k: int(v) for k, v in _counts_in_first_seen_order(recent["ref"]).items()},
        devices={k: int(v) for k, v in _counts_in_first_seen_order(recent["device"]).items()},
        daily_trend=[{"date": day, "count": int(count)} for day, count in trend.items()],
    )


class AnalyticsAggregator:
    """Records pageviews and summarizes them for admins.

    Args:
        store: Record store owning the analytics collection
        config: ``AnalyticsConfig`` (retention and truncation limits)
    """

    def __init__(self, store: RecordStore, config):
        self._store = store
        self._config = config

    async def record(
        self,
        page: Optional[str],
        referrer: Optional[str],
        user_agent: Optional[str],
    ) -> Optional[PageviewEvent]:
        """Store one pageview.

        Returns:
            The stored event, or None when the user agent is a bot
        """
        if is_bot(user_agent):
            logger.debug("Ignoring bot pageview: ua=%s", user_agent)
            return None

        page = (page or "").strip()[: self._config.page_max_length] or "/"
        referrer = (referrer or "").strip()[: self._config.referrer_max_length]
        event = PageviewEvent(
            page=page,
            ref=classify_referrer(referrer),
            device=classify_device(user_agent),
        )

        async with self._store.locked(ANALYTICS):
            records = await self._store.load(ANALYTICS)
            if len(records) >= self._config.max_events:
                dropped = len(records) - self._config.retain_events
                records = records[dropped:]
                logger.info("Pruned %d oldest pageviews", dropped)
            records.append(event.to_dict())
            await self._store.replace(ANALYTICS, records)

        return event

    async def aggregate(
        self,
        window_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AnalyticsReport:
        window_days = window_days or self._config.default_window_days
        events = [PageviewEvent.from_dict(r) for r in await self._store.load(ANALYTICS)]
        return summarize_events(
            events,
            window_days=window_days,
            now=now or datetime.now(timezone.utc),
            top_pages=self._config.top_pages,
        )
