"""
Learner-facing endpoints: dashboard, topic reading, quizzes and completion.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from skillshots.access.resolver import (
    ALL_CATEGORIES, filter_topics, is_visible, split_by_status, visible_topics
)
from skillshots.ai.schemas import AskRequest
from skillshots.ai.services import ContentGenerationService
from skillshots.auth.dependencies import (
    get_catalog, get_current_user, get_generator, get_quiz_sessions, get_tracker
)
from skillshots.catalog.models import Topic, TopicStatus, User
from skillshots.catalog.store import Catalog
from skillshots.core.errors import NotFoundError, PermissionDeniedError
from skillshots.progress.tracker import ProgressTracker
from skillshots.quiz.evaluator import QuizAttempt, QuizSessions

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Learning"])


class AnswerBody(BaseModel):
    question_index: int
    option_index: int


def topic_view(topic: Topic, status: TopicStatus) -> dict:
    data = topic.model_dump(mode="json")
    data["status"] = status.value
    return data


def visible_topic(catalog: Catalog, user: User, topic_id: str) -> Topic:
    topic = catalog.get_topic(topic_id)
    if not is_visible(user, topic):
        raise PermissionDeniedError("This topic has not been shared with you")
    return topic


def attempt_view(attempt: QuizAttempt) -> dict:
    """Questions without their answers, plus the answers locked in so far"""
    return {
        **attempt.summary(),
        "questions": [
            {"question": q.question, "options": q.options} for q in attempt.questions
        ],
        "answers": attempt.answers,
    }

# ==================== DASHBOARD ====================

@router.get("/dashboard")
async def dashboard(
    search: str = "",
    category: str = ALL_CATEGORIES,
    status: Optional[TopicStatus] = None,
    sop_only: bool = False,
    user: User = Depends(get_current_user),
    catalog: Catalog = Depends(get_catalog),
    tracker: ProgressTracker = Depends(get_tracker),
):
    """
    Topics visible to the caller, filtered, with completion statistics.

    Statistics always cover every visible topic, independent of filters.
    """
    visible = visible_topics(user, catalog.list_topics())
    statuses = tracker.statuses_for(user.id)
    shown = filter_topics(visible, statuses, search=search, category=category, status=status, sop_only=sop_only)
    pending, completed = split_by_status(shown, statuses)

    def view(t: Topic) -> dict:
        return topic_view(t, statuses.get(t.id, TopicStatus.PENDING))

    return {
        "pending": [view(t) for t in pending],
        "completed": [view(t) for t in completed],
        "stats": tracker.completion_stats(user.id, visible),
        "categories": [ALL_CATEGORIES] + list(catalog.categories),
        "groups": [g.model_dump() for g in catalog.list_groups() if g.id in user.group_ids],
    }

# ==================== TOPICS ====================

@router.get("/topics/{topic_id}")
async def get_topic(
    topic_id: str,
    user: User = Depends(get_current_user),
    catalog: Catalog = Depends(get_catalog),
    tracker: ProgressTracker = Depends(get_tracker),
):
    topic = visible_topic(catalog, user, topic_id)
    data = topic_view(topic, tracker.status(user.id, topic.id))
    record = catalog.get_progress(user.id, topic.id)
    data["progress"] = record.model_dump(mode="json") if record else None
    return data


@router.post("/topics/{topic_id}/ask")
async def ask_about_topic(
    topic_id: str,
    body: AskRequest,
    user: User = Depends(get_current_user),
    catalog: Catalog = Depends(get_catalog),
    generator: ContentGenerationService = Depends(get_generator),
):
    topic = visible_topic(catalog, user, topic_id)
    answer = await generator.ask_question(topic.content, body.question)
    return {"answer": answer}

# ==================== QUIZ ====================

@router.post("/topics/{topic_id}/quiz", status_code=201)
async def start_quiz(
    topic_id: str,
    user: User = Depends(get_current_user),
    catalog: Catalog = Depends(get_catalog),
    generator: ContentGenerationService = Depends(get_generator),
    sessions: QuizSessions = Depends(get_quiz_sessions),
):
    """Generate a fresh quiz. Replaces any outstanding attempt of the caller."""
    topic = visible_topic(catalog, user, topic_id)
    questions = await generator.generate_quiz(topic.content)
    attempt = sessions.start(user.id, QuizAttempt(topic.id, questions))
    logger.info("User %s started a %d-question quiz on %s", user.id, len(questions), topic.id)
    return attempt_view(attempt)


def current_attempt(sessions: QuizSessions, user: User, topic_id: str) -> QuizAttempt:
    attempt = sessions.current(user.id, topic_id)
    if attempt is None:
        raise NotFoundError("Quiz", topic_id)
    return attempt


@router.get("/topics/{topic_id}/quiz")
async def get_quiz(
    topic_id: str,
    user: User = Depends(get_current_user),
    sessions: QuizSessions = Depends(get_quiz_sessions),
):
    return attempt_view(current_attempt(sessions, user, topic_id))


@router.post("/topics/{topic_id}/quiz/answer")
async def answer_question(
    topic_id: str,
    body: AnswerBody,
    user: User = Depends(get_current_user),
    sessions: QuizSessions = Depends(get_quiz_sessions),
):
    attempt = current_attempt(sessions, user, topic_id)
    selected = attempt.answer(body.question_index, body.option_index)
    question = attempt.questions[body.question_index]
    return {
        **attempt.summary(),
        "question_index": body.question_index,
        "selected": selected,
        "correct": attempt.is_correct(body.question_index),
        "correct_answer_index": question.correct_answer_index,
    }


@router.delete("/topics/{topic_id}/quiz")
async def discard_quiz(
    topic_id: str,
    user: User = Depends(get_current_user),
    sessions: QuizSessions = Depends(get_quiz_sessions),
):
    if sessions.current(user.id, topic_id):
        sessions.discard(user.id)
    return {"message": "Quiz discarded"}

# ==================== COMPLETION ====================

@router.post("/topics/{topic_id}/complete")
async def complete_topic(
    topic_id: str,
    user: User = Depends(get_current_user),
    catalog: Catalog = Depends(get_catalog),
    tracker: ProgressTracker = Depends(get_tracker),
    sessions: QuizSessions = Depends(get_quiz_sessions),
):
    visible_topic(catalog, user, topic_id)
    record = await tracker.mark_complete(user.id, topic_id, sessions.current(user.id, topic_id))
    if sessions.current(user.id, topic_id):
        sessions.discard(user.id)
    return record.model_dump(mode="json")
