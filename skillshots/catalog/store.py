"""
Entity store for SkillShots.

Holds the Users, Groups, Topics, Categories and Progress records in memory
and writes each kind back through the SnapshotStore whenever it changes.
The catalog is read-mostly: learners only write their own progress,
creators occasionally write everything else.
"""

import copy
import logging
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Tuple

from skillshots.auth.security import hash_password
from skillshots.catalog.models import Group, Progress, Topic, User, UserRole
from skillshots.catalog.persistence import SnapshotStore
from skillshots.catalog.seed import INITIAL_CATEGORIES, INITIAL_GROUPS, INITIAL_TOPICS, initial_users
from skillshots.core.config import Configuration
from skillshots.core.errors import ConflictError, ExternalServiceError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class Catalog:

    def __init__(self, store: SnapshotStore, config: Configuration):
        self.store = store
        self.config = config
        self.users: Dict[str, User] = {}
        self.groups: Dict[str, Group] = {}
        self.topics: Dict[str, Topic] = {}
        self.categories: List[str] = []
        self.progress: Dict[Tuple[str, str], Progress] = {}
        self.everyone_group_id: Optional[str] = None

    # ==================== BOOTSTRAP ====================

    async def bootstrap(self):
        """
        Load every kind from the persistence boundary.

        Absent snapshots fall back to the seed data. After loading, the
        default Creator is restored if it went missing and the everyone
        group is resolved once by its well-known id.
        """
        users = await self.store.load("users")
        groups = await self.store.load("groups")
        topics = await self.store.load("topics")
        categories = await self.store.load("categories")
        progress = await self.store.load("progress")

        if users is None:
            self.users = {u.id: u for u in initial_users(hash_password)}
        else:
            self.users = {u["id"]: User(**u) for u in users}

        if groups is None:
            self.groups = {g.id: g.model_copy() for g in INITIAL_GROUPS}
        else:
            self.groups = {g["id"]: Group(**g) for g in groups}

        if topics is None:
            self.topics = {t.id: t.model_copy(deep=True) for t in INITIAL_TOPICS}
        else:
            self.topics = {t["id"]: Topic(**t) for t in topics}

        self.categories = list(INITIAL_CATEGORIES) if categories is None else list(categories)

        self.progress = {}
        for record in progress or []:
            p = Progress(**record)
            self.progress[(p.user_id, p.topic_id)] = p

        await self.ensure_default_creator()
        self.resolve_everyone_group()

        logger.info(
            "Catalog ready: %d users, %d groups, %d topics, %d categories",
            len(self.users), len(self.groups), len(self.topics), len(self.categories)
        )

    async def ensure_default_creator(self) -> bool:
        """
        Re-insert the designated default Creator if it is missing.

        Returns True when a correction was made (and persisted), False when
        the account already exists.
        """
        email = self.config.default_creator_email.lower()
        if self.find_user_by_email(email):
            return False

        seed = next((u for u in initial_users(hash_password) if u.email == email), None)
        if seed is None:
            logger.error("Default creator %s has no seed record to restore from", email)
            return False

        restored = seed.model_copy()
        if restored.id in self.users:
            restored.id = f"user-{len(self.users) + 1}-restored"
        async with self.transaction("users"):
            self.users[restored.id] = restored
        logger.warning("Default creator %s missing. Restored as %s.", email, restored.id)
        return True

    def resolve_everyone_group(self):
        group_id = self.config.everyone_group_id
        if group_id in self.groups:
            self.everyone_group_id = group_id
        else:
            self.everyone_group_id = None
            logger.warning("Everyone group '%s' does not exist; 'all' sharing will be empty", group_id)

    # ==================== PERSISTENCE ====================

    def snapshot(self, kind: str) -> list:
        if kind == "users":
            return [u.model_dump(mode="json") for u in self.users.values()]
        if kind == "groups":
            return [g.model_dump(mode="json") for g in self.groups.values()]
        if kind == "topics":
            return [t.model_dump(mode="json") for t in self.topics.values()]
        if kind == "categories":
            return list(self.categories)
        if kind == "progress":
            return [p.model_dump(mode="json") for p in self.progress.values()]
        raise ValueError(f"Unknown snapshot kind: {kind}")

    @asynccontextmanager
    async def transaction(self, *kinds: str):
        """
        Apply an in-memory change to the given kinds and persist them.

        If the change or any save fails, memory goes back to its previous
        state and kinds that were already saved are written back, so a
        caller that sees an error sees no change at all.
        """
        previous = {kind: copy.deepcopy(getattr(self, kind)) for kind in kinds}
        saved = []
        try:
            yield
            for kind in kinds:
                await self.store.save(kind, self.snapshot(kind))
                saved.append(kind)
        except Exception:
            for kind, value in previous.items():
                setattr(self, kind, value)
            self.resolve_everyone_group()
            await self._restore(saved)
            raise

    async def _restore(self, kinds: List[str]):
        for kind in kinds:
            try:
                await self.store.save(kind, self.snapshot(kind))
            except ExternalServiceError as e:
                logger.error("Could not roll back %s snapshot, stored copy is ahead of memory: %s", kind, e)

    # ==================== USERS ====================

    def get_user(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def find_user_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        return next((u for u in self.users.values() if u.email == email), None)

    def list_users(self) -> List[User]:
        return list(self.users.values())

    def creators(self) -> List[User]:
        return [u for u in self.users.values() if u.role == UserRole.CREATOR]

    async def put_user(self, user: User) -> User:
        existing = self.find_user_by_email(user.email)
        if existing and existing.id != user.id:
            raise ConflictError(f"A user with email {user.email} already exists")
        for group_id in user.group_ids:
            self.get_group(group_id)

        async with self.transaction("users"):
            self.users[user.id] = user
        return user

    async def remove_user(self, user_id: str):
        user = self.get_user(user_id)
        if user.role == UserRole.CREATOR and len(self.creators()) == 1:
            raise ValidationError("Cannot delete the last Creator account")

        async with self.transaction("users", "progress"):
            del self.users[user_id]
            self.progress = {k: v for k, v in self.progress.items() if k[0] != user_id}

    # ==================== GROUPS ====================

    def get_group(self, group_id: str) -> Group:
        group = self.groups.get(group_id)
        if not group:
            raise NotFoundError("Group", group_id)
        return group

    def list_groups(self) -> List[Group]:
        return list(self.groups.values())

    async def put_group(self, group: Group) -> Group:
        async with self.transaction("groups"):
            self.groups[group.id] = group
            self.resolve_everyone_group()
        return group

    async def remove_group(self, group_id: str):
        self.get_group(group_id)
        async with self.transaction("groups", "users", "topics"):
            del self.groups[group_id]

            # Drop dangling memberships and grants
            for user in self.users.values():
                if group_id in user.group_ids:
                    user.group_ids = [g for g in user.group_ids if g != group_id]
            for topic in self.topics.values():
                if group_id in topic.shared_with_groups:
                    topic.shared_with_groups = [g for g in topic.shared_with_groups if g != group_id]

            self.resolve_everyone_group()

    # ==================== TOPICS ====================

    def get_topic(self, topic_id: str) -> Topic:
        topic = self.topics.get(topic_id)
        if not topic:
            raise NotFoundError("Topic", topic_id)
        return topic

    def list_topics(self) -> List[Topic]:
        return list(self.topics.values())

    async def put_topic(self, topic: Topic) -> Topic:
        async with self.transaction("topics"):
            self.topics[topic.id] = topic
        return topic

    async def remove_topic(self, topic_id: str):
        self.get_topic(topic_id)
        async with self.transaction("topics", "progress"):
            del self.topics[topic_id]
            self.progress = {k: v for k, v in self.progress.items() if k[1] != topic_id}

    # ==================== CATEGORIES ====================

    async def add_category(self, name: str) -> List[str]:
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if name in self.categories:
            raise ConflictError(f"Category '{name}' already exists")
        async with self.transaction("categories"):
            self.categories.append(name)
        return self.categories

    async def remove_category(self, name: str) -> List[str]:
        if name not in self.categories:
            raise NotFoundError("Category", name)
        async with self.transaction("categories"):
            self.categories.remove(name)
        return self.categories

    # ==================== PROGRESS ====================

    def get_progress(self, user_id: str, topic_id: str) -> Optional[Progress]:
        return self.progress.get((user_id, topic_id))

    def progress_for_user(self, user_id: str) -> List[Progress]:
        return [p for (uid, _), p in self.progress.items() if uid == user_id]

    async def put_progress(self, record: Progress) -> Progress:
        async with self.transaction("progress"):
            self.progress[(record.user_id, record.topic_id)] = record
        return record
