"""
Content generation tests, run against a fake Gemini client.
"""

import pytest

from skillshots.ai.schemas import CourseResource
from skillshots.ai.services import blocks_to_parts, parse_questions, question_count
from skillshots.catalog.models import (
    ContentType, DocumentBlock, ImageBlock, ParagraphBlock, VideoBlock
)
from skillshots.core.errors import ExternalServiceError


class TestBlocksToParts:

    def test_paragraphs_become_text(self):
        parts = blocks_to_parts([ParagraphBlock(order=1, content="Hello")])
        assert parts == ["Hello"]

    def test_embedded_files_become_inline_data(self):
        parts = blocks_to_parts([
            ImageBlock(order=1, content="data:image/png;base64,iVBORw0KGgo="),
            DocumentBlock(order=2, content="data:application/pdf;base64,JVBERi0x"),
        ])
        assert parts == [
            {"mime_type": "image/png", "data": "iVBORw0KGgo="},
            {"mime_type": "application/pdf", "data": "JVBERi0x"},
        ]

    def test_links_are_labelled(self):
        parts = blocks_to_parts([
            VideoBlock(order=1, content="https://video", title="Demo"),
            DocumentBlock(order=2, content="/docs/guide.pdf"),
        ])
        assert parts == [
            "[Video Link: Demo - URL: https://video]",
            "[Resource Link: Untitled - URL: /docs/guide.pdf]",
        ]

    def test_empty_blocks_skipped(self):
        assert blocks_to_parts([ParagraphBlock(order=1, content=""), ImageBlock(order=2)]) == []


class TestQuestionCount:

    def test_media_means_five(self):
        blocks = [ParagraphBlock(order=1, content="x" * 5000), ImageBlock(order=2, content="u")]
        assert question_count(blocks) == 5

    @pytest.mark.parametrize("length, expected", [(0, 3), (400, 3), (1600, 4), (2600, 6), (9000, 10)])
    def test_text_length_clamped(self, length, expected):
        assert question_count([ParagraphBlock(order=1, content="x" * length)]) == expected


class TestParseQuestions:

    def test_accepts_camel_case_index(self):
        questions = parse_questions([{"question": "Q", "options": ["a", "b"], "correctAnswerIndex": 1}])
        assert questions[0].correct_answer_index == 1

    def test_drops_malformed_items(self):
        questions = parse_questions([
            {"question": "Q", "options": ["a", "b"], "correct_answer_index": 5},
            {"question": "Q2", "options": ["a", "b"], "correct_answer_index": 0},
        ])
        assert [q.question for q in questions] == ["Q2"]

    @pytest.mark.parametrize("raw", [[], {"question": "Q"}, [{"question": "Q", "options": ["a"]}]])
    def test_empty_quiz_is_a_generation_failure(self, raw):
        with pytest.raises(ExternalServiceError):
            parse_questions(raw)


class TestContentGenerationService:

    async def test_generate_quiz(self, generator, gemini):
        blocks = [ParagraphBlock(order=1, content="Secure the area.")]
        questions = await generator.generate_quiz(blocks)

        assert len(questions) == 3
        name, parts, schema = gemini.calls[0]
        assert name == "generate_json"
        assert parts[0] == "Secure the area."
        assert "3-question multiple-choice quiz" in parts[-1]
        assert schema["type"] == "ARRAY"

    async def test_ask_question_includes_material(self, generator, gemini):
        answer = await generator.ask_question([ParagraphBlock(order=1, content="Exit left.")], "Which exit?")
        assert answer == "A helpful answer."
        parts = gemini.calls[0][1]
        assert parts[0] == "Exit left."
        assert "Student Question: Which exit?" in parts[-1]

    async def test_chat_modes(self, generator, gemini):
        assert await generator.chat("hi") == "A helpful answer."
        assert await generator.chat("hi", thinking=True) == "A considered answer."
        assert [c[0] for c in gemini.calls] == ["generate", "generate_with_thinking"]

    async def test_summarize_video_uses_pro_model(self, generator, gemini, config):
        await generator.summarize_video("Fire Safety Demonstration")
        name, prompt, model = gemini.calls[0]
        assert model == config.gemini_pro_model
        assert '"Fire Safety Demonstration"' in prompt

    async def test_synthesize_speech(self, generator, gemini):
        assert await generator.synthesize_speech("Read me") == b"\x00\x01\x02\x03"
        assert gemini.calls[0][1].endswith("Read me")

    async def test_generate_course(self, generator, gemini):
        gemini.json_response = {
            "title": "Ladder Safety",
            "category": "Health & Safety",
            "readTime": 4,
            "coverImageKeyword": "ladder",
            "content": [
                {"type": "paragraph", "content": "Face the ladder.", "order": 1},
                {"type": "video", "content": "https://v", "order": 2},
            ],
        }
        course = await generator.generate_course(
            "", [CourseResource(type=ContentType.VIDEO, url="https://v")], ["General", "Health & Safety"]
        )
        assert course.title == "Ladder Safety"
        assert course.content[1].type == "video"
        prompt = gemini.calls[0][1]
        assert "Resource 1: [Type: video] [URL: https://v]" in prompt
        assert "Create a comprehensive course" in prompt

    async def test_generate_course_invalid_shape(self, generator, gemini):
        gemini.json_response = {"category": "General"}
        with pytest.raises(ExternalServiceError):
            await generator.generate_course("Anything")

    async def test_failures_propagate(self, generator, gemini):
        gemini.fail = True
        with pytest.raises(ExternalServiceError):
            await generator.generate_quiz([ParagraphBlock(order=1, content="x")])
