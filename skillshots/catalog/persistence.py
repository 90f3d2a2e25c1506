"""
Persistence boundary for the catalog.

Each entity kind (users, groups, topics, categories, progress) is stored as
one snapshot: the full list of its records. A missing snapshot is not an
error, the catalog falls back to its defaults.
"""

import copy
import logging
from datetime import datetime
from typing import Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from skillshots.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

KINDS = ("users", "groups", "topics", "categories", "progress")


class SnapshotStore:
    """Interface: load(kind) -> snapshot | None, save(kind, snapshot)."""

    async def load(self, kind: str) -> Optional[List]:
        raise NotImplementedError

    async def save(self, kind: str, snapshot: List):
        raise NotImplementedError

    async def close(self):
        pass


class MemorySnapshotStore(SnapshotStore):
    """Process-local store, used by tests and local runs without MongoDB."""

    def __init__(self, initial: Optional[Dict[str, List]] = None):
        self.snapshots: Dict[str, List] = copy.deepcopy(initial or {})
        self.writes: List[str] = []

    async def load(self, kind: str) -> Optional[List]:
        if kind not in self.snapshots:
            return None
        return copy.deepcopy(self.snapshots[kind])

    async def save(self, kind: str, snapshot: List):
        self.snapshots[kind] = copy.deepcopy(snapshot)
        self.writes.append(kind)


class MongoSnapshotStore(SnapshotStore):
    """One document per kind in the `snapshots` collection."""

    def __init__(self, mongo_url: str, db_name: str):
        self.client = AsyncIOMotorClient(mongo_url)
        self.db: AsyncIOMotorDatabase = self.client[db_name]

    async def create_indexes(self):
        await self.db.snapshots.create_index("kind", unique=True)

    async def load(self, kind: str) -> Optional[List]:
        try:
            doc = await self.db.snapshots.find_one({"kind": kind})
        except PyMongoError as e:
            raise ExternalServiceError(f"Could not load {kind}: {e}")
        if not doc:
            return None
        return doc.get("items", [])

    async def save(self, kind: str, snapshot: List):
        try:
            await self.db.snapshots.update_one(
                {"kind": kind},
                {"$set": {"items": snapshot, "updated_at": datetime.utcnow()}},
                upsert=True
            )
        except PyMongoError as e:
            raise ExternalServiceError(f"Could not save {kind}: {e}")
        logger.debug("Saved %s snapshot (%d items)", kind, len(snapshot))

    async def close(self):
        self.client.close()
