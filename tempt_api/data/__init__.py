"""Persistence for the TEMPT API collections."""

from tempt_api.data.store import (
    ALL_COLLECTIONS,
    ANALYTICS,
    MIGRATIONS,
    SUBSCRIBERS,
    WAITLIST,
    Collection,
    LoadResult,
    RecordStore,
)

__all__ = [
    "ALL_COLLECTIONS",
    "ANALYTICS",
    "MIGRATIONS",
    "SUBSCRIBERS",
    "WAITLIST",
    "Collection",
    "LoadResult",
    "RecordStore",
]
