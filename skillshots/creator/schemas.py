from typing import List, Optional, Union

from pydantic import BaseModel, EmailStr, Field

from skillshots.ai.schemas import CourseResource
from skillshots.authoring.service import ShareMode
from skillshots.catalog.models import ContentType, UserRole

# ==================== DRAFTS ====================

class DraftOpen(BaseModel):
    topic_id: Optional[str] = None  # re-open an existing topic, else start blank


class DraftUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[str] = None
    read_time: Optional[int] = None
    image_url: Optional[str] = None
    is_sop: Optional[bool] = None
    share_mode: Optional[ShareMode] = None
    selected_groups: Optional[List[str]] = None
    selected_users: Optional[List[str]] = None


class BlockAdd(BaseModel):
    type: ContentType


class BlockFieldUpdate(BaseModel):
    field: str
    value: Union[int, str, None] = None


class CourseDraftRequest(BaseModel):
    prompt: str = ""
    resources: List[CourseResource] = []

# ==================== USERS / GROUPS / CATEGORIES ====================

class UserCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    role: UserRole = UserRole.LEARNER
    group_ids: List[str] = []


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None
    group_ids: Optional[List[str]] = None


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
