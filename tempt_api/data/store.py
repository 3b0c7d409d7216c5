"""File-backed record store.

Each collection lives in one pretty-printed JSON file holding a single named
list, e.g. ``{"members": [...]}``. The store only knows how to read a whole
collection and replace a whole collection; services serialize their
load -> mutate -> persist sequences with ``locked()``.
"""

import asyncio
import json
import logging
import os
import tempfile
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, AsyncIterator, Iterable, Optional

from tempt_api.services.errors import StorageError

logger = logging.getLogger(__name__)

Record = dict[str, Any]


@dataclass(frozen=True)
class Collection:
    """A named collection and the top-level key its file stores records under."""

    name: str
    key: str

    @property
    def file_name(self) -> str:
        return f"{self.name}.json"


SUBSCRIBERS = Collection("subscribers", "subscribers")
MIGRATIONS = Collection("migrations", "registrations")
ANALYTICS = Collection("analytics", "pageviews")
WAITLIST = Collection("waitlist", "members")

ALL_COLLECTIONS = (SUBSCRIBERS, MIGRATIONS, ANALYTICS, WAITLIST)


@dataclass
class LoadResult:
    """Outcome of reading a collection file.

    Exactly one of ``records`` (possibly empty) or ``error`` is meaningful.
    """

    records: list[Record] = field(default_factory=list)
    error: Optional[StorageError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RecordStore:
    """Whole-collection JSON persistence with per-collection write locks.

    Args:
        data_dir: Directory holding the collection files
        fail_fast: When True, ``load`` raises ``StorageError`` for unreadable
            files instead of substituting an empty collection
    """

    def __init__(self, data_dir: str | Path = "data", fail_fast: bool = False):
        self.data_dir = Path(data_dir)
        self.fail_fast = fail_fast
        self._locks: dict[str, asyncio.Lock] = {}

    @classmethod
    def from_config(cls, config) -> "RecordStore":
        """Build a store from a ``StorageConfig``."""
        return cls(data_dir=config.data_dir, fail_fast=config.fail_fast)

    def path_for(self, collection: Collection) -> Path:
        return self.data_dir / collection.file_name

    def ensure_collections(self, collections: Iterable[Collection] = ALL_COLLECTIONS) -> list[Path]:
        """Create the data directory and any missing collection files.

        Returns:
            Paths of the files that were created
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        created = []
        for collection in collections:
            path = self.path_for(collection)
            if not path.exists():
                self._write(collection, [])
                created.append(path)
                logger.info("Created empty collection file %s", path)
        return created

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_sync(self, collection: Collection) -> LoadResult:
        """Read a collection file without interpreting failures.

        A missing file, or a file without the collection key, is an empty
        collection. Anything undecodable is reported as a ``StorageError``.
        """
        path = self.path_for(collection)
        if not path.exists():
            return LoadResult()

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            return LoadResult(error=StorageError(collection.name, str(e)))

        if not isinstance(data, dict):
            return LoadResult(error=StorageError(collection.name, "top level is not an object"))

        records = data.get(collection.key)
        if records is None:
            return LoadResult()
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            return LoadResult(
                error=StorageError(collection.name, f"'{collection.key}' is not a list of objects")
            )
        return LoadResult(records=records)

    async def read(self, collection: Collection) -> LoadResult:
        return await asyncio.to_thread(self.read_sync, collection)

    async def load(self, collection: Collection) -> list[Record]:
        """Load a collection, degrading to an empty list on corruption.

        Raises:
            StorageError: If the file is unreadable and ``fail_fast`` is set
        """
        result = await self.read(collection)
        if result.ok:
            return result.records

        if self.fail_fast:
            raise result.error
        logger.warning(
            "Collection file unreadable, treating as empty",
            extra={"collection": collection.name, "reason": result.error.reason},
        )
        return []

    async def count(self, collection: Collection) -> int:
        return len(await self.load(collection))

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _write(self, collection: Collection, records: list[Record]) -> None:
        path = self.path_for(collection)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({collection.key: records}, indent=2, ensure_ascii=False)

        # Write beside the target then swap, so readers never see a partial file
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{collection.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def replace(self, collection: Collection, records: list[Record]) -> None:
        """Persist the entire collection."""
        await asyncio.to_thread(self._write, collection, list(records))
        logger.debug("Persisted %d records to %s", len(records), collection.name)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def lock_for(self, collection: Collection) -> asyncio.Lock:
        lock = self._locks.get(collection.name)
        if lock is None:
            lock = self._locks[collection.name] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def locked(self, collection: Collection) -> AsyncIterator[None]:
        """Hold the collection's write lock for a load -> mutate -> persist sequence.

        Usage::

            async with store.locked(WAITLIST):
                records = await store.load(WAITLIST)
                records.append(member.to_dict())
                await store.replace(WAITLIST, records)
        """
        async with self.lock_for(collection):
            yield
