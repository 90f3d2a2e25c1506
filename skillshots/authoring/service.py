"""
Content authoring for topics.

Creators edit a TopicDraft: block operations mutate the draft in place,
and save_topic turns the draft into a stored Topic. Saving is where the
block order gets renumbered and where the three sharing modes collapse
into the two sharing channels of the topic.
"""

import logging
import math
import secrets
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel

from skillshots.ai.schemas import GeneratedCourse
from skillshots.catalog.models import (
    BLOCK_FIELDS, ContentBlock, ContentType, Topic, new_block
)
from skillshots.catalog.store import Catalog
from skillshots.core.errors import NotFoundError, OutOfRangeError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"
DEFAULT_IMAGE_URL = "https://images.unsplash.com/photo-1516321318423-f06f85e504b3?q=80&w=1200"
PLACEHOLDER = "placeholder"
PLACEHOLDER_VIDEO_URL = "https://www.youtube.com/embed/dQw4w9WgXcQ"


class ShareMode(str, Enum):
    ALL = "all"
    DEPARTMENTS = "departments"
    USERS = "users"


class TopicDraft(BaseModel):
    topic_id: Optional[str] = None  # set when editing an existing topic
    title: str = ""
    category: str = DEFAULT_CATEGORY
    read_time: int = 5
    image_url: str = DEFAULT_IMAGE_URL
    is_sop: bool = False
    blocks: List[ContentBlock] = []
    share_mode: ShareMode = ShareMode.ALL
    selected_groups: List[str] = []
    selected_users: List[str] = []


def generate_topic_id() -> str:
    return f"TOPIC_{secrets.token_hex(6).upper()}"

# ==================== BLOCK OPERATIONS ====================

def _check_index(draft: TopicDraft, index: int):
    if not 0 <= index < len(draft.blocks):
        raise OutOfRangeError(f"Block index {index} is out of range (0..{len(draft.blocks) - 1})")


def add_block(draft: TopicDraft, block_type: ContentType):
    """Append an empty block; its order is provisional until the next save."""
    block = new_block(block_type, content="", title="", order=len(draft.blocks) + 1)
    draft.blocks.append(block)
    return block


def remove_block(draft: TopicDraft, index: int):
    """Delete a block. Remaining blocks keep their relative order and order values."""
    _check_index(draft, index)
    return draft.blocks.pop(index)


def update_block_field(draft: TopicDraft, index: int, field: str, value):
    _check_index(draft, index)
    if field not in BLOCK_FIELDS:
        raise ValidationError(f"Block field '{field}' cannot be edited")

    if field == "order":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("Block order must be an integer")
    elif field == "title":
        if value is not None and not isinstance(value, str):
            raise ValidationError("Block title must be text")
    elif not isinstance(value, str):
        raise ValidationError("Block content must be text")

    block = draft.blocks[index]
    setattr(block, field, value)
    return block

# ==================== SHARING ====================

def resolve_sharing(
    mode: ShareMode,
    selected_groups: List[str],
    selected_users: List[str],
    everyone_group_id: Optional[str],
) -> Tuple[List[str], List[str]]:
    """
    Collapse the authoring share mode into (shared_with_groups, shared_with_users).

    Modes are mutually exclusive: saving in one mode clears the other
    channel, even though visibility itself ORs both channels.
    """
    if mode == ShareMode.ALL:
        if everyone_group_id is None:
            logger.warning("'all' sharing selected but the everyone group is missing; topic will be unshared")
            return [], []
        return [everyone_group_id], []
    if mode == ShareMode.DEPARTMENTS:
        return list(dict.fromkeys(selected_groups)), []
    if mode == ShareMode.USERS:
        return [], list(dict.fromkeys(selected_users))
    raise ValidationError(f"Unknown share mode: {mode}")


def infer_share_mode(topic: Topic, everyone_group_id: Optional[str]) -> ShareMode:
    if everyone_group_id and everyone_group_id in topic.shared_with_groups:
        return ShareMode.ALL
    if topic.shared_with_users:
        return ShareMode.USERS
    return ShareMode.DEPARTMENTS


def draft_from_topic(topic: Topic, everyone_group_id: Optional[str]) -> TopicDraft:
    """Open an existing topic for editing"""
    mode = infer_share_mode(topic, everyone_group_id)
    selected_groups, selected_users = [], []
    if mode == ShareMode.USERS:
        selected_users = list(topic.shared_with_users)
        selected_groups = list(topic.shared_with_groups)
    elif mode == ShareMode.DEPARTMENTS:
        selected_groups = list(topic.shared_with_groups)

    return TopicDraft(
        topic_id=topic.id,
        title=topic.title,
        category=topic.category,
        read_time=topic.read_time,
        image_url=topic.image_url,
        is_sop=topic.is_sop,
        blocks=[b.model_copy() for b in topic.content],
        share_mode=mode,
        selected_groups=selected_groups,
        selected_users=selected_users,
    )

# ==================== SAVE ====================

def build_topic(draft: TopicDraft, catalog: Catalog, author_id: str) -> Topic:
    """Validate a draft and produce the Topic it describes, without storing it."""
    title = draft.title.strip()
    if not title:
        raise ValidationError("Topic title cannot be empty")

    category = draft.category.strip() or DEFAULT_CATEGORY
    if category not in catalog.categories:
        raise ValidationError(f"Unknown category '{category}'")

    if draft.read_time <= 0:
        raise ValidationError("Read time must be a positive number of minutes")

    if draft.share_mode == ShareMode.DEPARTMENTS:
        for group_id in draft.selected_groups:
            catalog.get_group(group_id)
    elif draft.share_mode == ShareMode.USERS:
        for user_id in draft.selected_users:
            catalog.get_user(user_id)

    groups, users = resolve_sharing(
        draft.share_mode, draft.selected_groups, draft.selected_users, catalog.everyone_group_id
    )

    topic_id = draft.topic_id
    if topic_id:
        existing = catalog.topics.get(topic_id)
        if existing is None:
            raise NotFoundError("Topic", topic_id)
        author_id = existing.author_id
    else:
        topic_id = generate_topic_id()

    blocks = [b.model_copy(update={"order": i + 1}) for i, b in enumerate(draft.blocks)]

    return Topic(
        id=topic_id,
        title=title,
        category=category,
        author_id=author_id,
        read_time=draft.read_time,
        image_url=draft.image_url or DEFAULT_IMAGE_URL,
        content=blocks,
        is_sop=draft.is_sop,
        shared_with_groups=groups,
        shared_with_users=users,
    )


async def save_topic(draft: TopicDraft, catalog: Catalog, author_id: str) -> Topic:
    """
    Validate, normalise and store a draft.

    New drafts get a fresh id and the caller as author; edits keep the
    original id and author and replace the stored topic (last writer wins).
    """
    topic = build_topic(draft, catalog, author_id)
    await catalog.put_topic(topic)
    logger.info("Saved topic %s (%d blocks, mode=%s)", topic.id, len(topic.content), draft.share_mode.value)
    return topic


async def delete_topic(topic_id: str, catalog: Catalog):
    await catalog.remove_topic(topic_id)
    logger.info("Deleted topic %s", topic_id)

# ==================== AI COURSE DRAFTS ====================

def apply_generated_course(draft: TopicDraft, course: GeneratedCourse, categories: List[str]) -> TopicDraft:
    """Fill a draft from a generated course outline"""
    draft.title = course.title
    draft.category = course.category if course.category in categories else DEFAULT_CATEGORY
    draft.read_time = max(1, int(math.ceil(course.read_time)))

    keyword = course.cover_image_keyword or "office"
    if course.cover_image_keyword:
        draft.image_url = f"https://source.unsplash.com/800x600/?{keyword}"

    blocks = []
    for block in course.content:
        if block.content == PLACEHOLDER:
            if block.type == ContentType.IMAGE:
                block = block.model_copy(update={"content": f"https://source.unsplash.com/800x400/?{keyword}"})
            elif block.type == ContentType.VIDEO:
                block = block.model_copy(update={"content": PLACEHOLDER_VIDEO_URL})
        blocks.append(block)
    draft.blocks = blocks
    return draft

# ==================== OPEN DRAFTS ====================

class DraftBoard:
    """One open draft per creator, the editing session behind the studio"""

    def __init__(self):
        self._drafts: Dict[str, TopicDraft] = {}

    def open(self, user_id: str, draft: TopicDraft) -> TopicDraft:
        self._drafts[user_id] = draft
        return draft

    def current(self, user_id: str) -> TopicDraft:
        draft = self._drafts.get(user_id)
        if draft is None:
            raise NotFoundError("Draft", user_id)
        return draft

    def close(self, user_id: str):
        self._drafts.pop(user_id, None)
