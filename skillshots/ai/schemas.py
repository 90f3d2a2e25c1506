from typing import List, Optional

from pydantic import BaseModel, Field

from skillshots.catalog.models import ContentBlock, ContentType


class CourseResource(BaseModel):
    """An existing asset the creator wants woven into a generated course"""
    type: ContentType
    url: str


class GeneratedCourse(BaseModel):
    title: str
    category: str = "General"
    read_time: float = Field(5, alias="readTime")
    cover_image_keyword: Optional[str] = Field(None, alias="coverImageKeyword")
    content: List[ContentBlock] = []

    model_config = {"populate_by_name": True}


class AskRequest(BaseModel):
    question: str = Field(..., min_length=1)


class ChatRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    use_thinking_mode: bool = False
    system_instruction: Optional[str] = None


class VideoSummaryRequest(BaseModel):
    video_title: str = Field(..., min_length=1)


class SpeechRequest(BaseModel):
    text: str = Field(..., min_length=1)
