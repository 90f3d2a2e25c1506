import logging
import math
from typing import Any, Dict, List, Sequence

from pydantic import ValidationError as SchemaError

from skillshots.ai.gemini_core import GeminiClient, Part
from skillshots.ai.prompts import PROMPTS
from skillshots.ai.schemas import CourseResource, GeneratedCourse
from skillshots.catalog.models import BlockBase, ContentType, QuizQuestion
from skillshots.core.config import Configuration
from skillshots.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)

MEDIA_QUESTION_COUNT = 5
MIN_QUESTIONS = 3
MAX_QUESTIONS = 10
CHARS_PER_QUESTION = 500

QUIZ_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "question": {"type": "STRING"},
            "options": {"type": "ARRAY", "items": {"type": "STRING"}},
            "correct_answer_index": {"type": "INTEGER"},
        },
        "required": ["question", "options", "correct_answer_index"],
    },
}

COURSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "category": {"type": "STRING"},
        "readTime": {"type": "NUMBER"},
        "coverImageKeyword": {"type": "STRING"},
        "content": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "type": {"type": "STRING", "enum": [t.value for t in ContentType]},
                    "content": {"type": "STRING"},
                    "title": {"type": "STRING"},
                    "order": {"type": "INTEGER"},
                },
                "required": ["type", "content"],
            },
        },
    },
    "required": ["title", "category", "readTime", "content"],
}


def split_data_url(url: str):
    """data:image/png;base64,AAAA -> ("image/png", "AAAA"), or None if malformed"""
    header, _, data = url.partition(",")
    mime_type = header[len("data:"):].split(";")[0]
    if not data or not mime_type:
        return None
    return mime_type, data


def blocks_to_parts(blocks: Sequence[BlockBase]) -> List[Part]:
    """
    Convert topic content into model parts.

    Paragraphs become text, uploaded (data: URI) images and documents are
    sent inline so the model can read them, and anything else is described
    as a labelled link.
    """
    parts: List[Part] = []
    for block in blocks:
        if not block.content:
            continue

        if block.type == ContentType.PARAGRAPH:
            parts.append(block.content)
            continue

        if block.type in (ContentType.IMAGE, ContentType.DOCUMENT) and block.content.startswith("data:"):
            inline = split_data_url(block.content)
            if inline:
                mime_type, data = inline
                parts.append({"mime_type": mime_type, "data": data})
            else:
                logger.warning("Skipping malformed data URL in %s block", block.type)
            continue

        label = "Video Link" if block.type == ContentType.VIDEO else "Resource Link"
        parts.append(f"[{label}: {block.title or 'Untitled'} - URL: {block.content}]")
    return parts


def question_count(blocks: Sequence[BlockBase]) -> int:
    """5 when the topic carries any media, otherwise one question per 500 chars of text, 3..10"""
    if any(b.type != ContentType.PARAGRAPH for b in blocks):
        return MEDIA_QUESTION_COUNT
    text_length = sum(len(b.content) for b in blocks if b.type == ContentType.PARAGRAPH)
    return max(MIN_QUESTIONS, min(MAX_QUESTIONS, math.ceil(text_length / CHARS_PER_QUESTION)))


def parse_questions(raw: Any) -> List[QuizQuestion]:
    """Validate generated questions; an empty or malformed quiz is a generation failure"""
    if not isinstance(raw, list):
        raise ExternalServiceError("Quiz generation returned an unexpected shape")

    questions = []
    for item in raw:
        try:
            if isinstance(item, dict) and "correctAnswerIndex" in item and "correct_answer_index" not in item:
                item = {**item, "correct_answer_index": item["correctAnswerIndex"]}
            questions.append(QuizQuestion.model_validate(item))
        except SchemaError as e:
            logger.warning("Dropping malformed quiz question: %s", e.errors()[0].get("msg"))

    if not questions:
        raise ExternalServiceError("Failed to generate quiz. Please try again.")
    return questions


class ContentGenerationService:

    def __init__(self, config: Configuration, client: GeminiClient = None):
        self.config = config
        self.client = client or GeminiClient(config)

    async def generate_quiz(self, blocks: Sequence[BlockBase]) -> List[QuizQuestion]:
        count = question_count(blocks)
        parts = blocks_to_parts(blocks)
        parts.append(PROMPTS["quiz"]["standard"].format(count=count))

        raw = await self.client.generate_json(parts, QUIZ_SCHEMA)
        questions = parse_questions(raw)
        logger.info("Generated %d/%d quiz questions", len(questions), count)
        return questions

    async def ask_question(self, blocks: Sequence[BlockBase], question: str) -> str:
        parts = blocks_to_parts(blocks)
        parts.append(PROMPTS["ask"]["standard"].format(input=question))
        return await self.client.generate(parts)

    async def chat(self, prompt: str, thinking: bool = False, system_instruction: str = None) -> str:
        if thinking:
            return await self.client.generate_with_thinking(prompt, system_instruction)
        return await self.client.generate(prompt, system_instruction=system_instruction)

    async def summarize_video(self, title: str) -> str:
        prompt = PROMPTS["video"]["standard"].format(input=title)
        return await self.client.generate(prompt, model=self.config.gemini_pro_model)

    async def synthesize_speech(self, text: str) -> bytes:
        return await self.client.synthesize(PROMPTS["tts"]["standard"].format(input=text))

    async def generate_course(
        self,
        prompt: str,
        resources: Sequence[CourseResource] = (),
        categories: Sequence[str] = (),
    ) -> GeneratedCourse:
        templates = PROMPTS["course"]
        if resources:
            listing = "\n    ".join(
                f"Resource {i + 1}: [Type: {r.type.value}] [URL: {r.url}]" for i, r in enumerate(resources)
            )
            resource_context = templates["with_resources"].format(listing=listing)
        else:
            resource_context = templates["no_resources"]

        full_prompt = templates["standard"].format(
            input=prompt.strip() or templates["default_request"],
            resources=resource_context,
            categories=list(categories) or ["General"],
        )

        raw: Dict[str, Any] = await self.client.generate_json(full_prompt, COURSE_SCHEMA)
        try:
            course = GeneratedCourse.model_validate(raw)
        except SchemaError as e:
            logger.error("Generated course failed validation: %s", e)
            raise ExternalServiceError("Failed to generate course. Please try again.") from e

        logger.info("Generated course '%s' with %d blocks", course.title, len(course.content))
        return course
