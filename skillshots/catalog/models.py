from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

# ==================== ENUMS ====================

class UserRole(str, Enum):
    LEARNER = "Learner"
    CREATOR = "Creator"

class ContentType(str, Enum):
    PARAGRAPH = "paragraph"
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"

class TopicStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"

# ==================== CONTENT BLOCKS ====================

class BlockBase(BaseModel):
    type: str
    content: str = ""  # body text for paragraphs, URL or data: URI otherwise
    title: Optional[str] = None  # caption / file name / video title
    order: int = 0


class ParagraphBlock(BlockBase):
    type: Literal["paragraph"] = "paragraph"


class VideoBlock(BlockBase):
    type: Literal["video"] = "video"


class ImageBlock(BlockBase):
    type: Literal["image"] = "image"

    @property
    def is_embedded(self) -> bool:
        return self.content.startswith("data:")


class DocumentBlock(BlockBase):
    type: Literal["document"] = "document"

    @property
    def is_embedded(self) -> bool:
        return self.content.startswith("data:")


ContentBlock = Annotated[
    Union[ParagraphBlock, ImageBlock, VideoBlock, DocumentBlock],
    Field(discriminator="type"),
]

BLOCK_CLASSES = {
    ContentType.PARAGRAPH: ParagraphBlock,
    ContentType.IMAGE: ImageBlock,
    ContentType.VIDEO: VideoBlock,
    ContentType.DOCUMENT: DocumentBlock,
}

BLOCK_FIELDS = ("content", "title", "order")


def new_block(block_type: ContentType, **fields) -> BlockBase:
    """Build an empty block of the given variant."""
    return BLOCK_CLASSES[ContentType(block_type)](**fields)

# ==================== CATALOG ENTITIES ====================

class Group(BaseModel):
    id: str
    name: str


class User(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole = UserRole.LEARNER
    group_ids: List[str] = []
    password_hash: str = ""

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def is_creator(self) -> bool:
        return self.role == UserRole.CREATOR


class Topic(BaseModel):
    id: str
    title: str
    category: str = "General"
    author_id: str
    read_time: int = Field(5, gt=0)  # minutes
    image_url: str = ""
    content: List[ContentBlock] = []
    is_sop: bool = False
    shared_with_groups: List[str] = []
    shared_with_users: List[str] = []

    @field_validator("content")
    @classmethod
    def orders_are_unique(cls, blocks):
        orders = [b.order for b in blocks]
        if len(orders) != len(set(orders)):
            raise ValueError("content block order must be unique within a topic")
        return sorted(blocks, key=lambda b: b.order)


class Progress(BaseModel):
    user_id: str
    topic_id: str
    status: TopicStatus = TopicStatus.PENDING
    completed_at: Optional[datetime] = None
    quiz_score: Optional[int] = None

# ==================== QUIZ ====================

class QuizQuestion(BaseModel):
    question: str
    options: List[str] = Field(..., min_length=2)
    correct_answer_index: int = Field(..., ge=0)

    @field_validator("correct_answer_index")
    @classmethod
    def index_within_options(cls, v, info):
        options = info.data.get("options") or []
        if options and v >= len(options):
            raise ValueError("correct_answer_index is outside the option list")
        return v
