"""
ProgressTracker - per-user completion state of topics.

States per (user, topic): Pending (initial, also when no record exists)
and Completed (terminal). The only transition is Pending -> Completed, and
it needs a finished quiz attempt for that topic that passed.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, Optional

from skillshots.catalog.models import Progress, Topic, TopicStatus
from skillshots.catalog.store import Catalog
from skillshots.core.errors import QuizNotPassedError
from skillshots.quiz.evaluator import QuizAttempt

logger = logging.getLogger(__name__)


class ProgressTracker:

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def status(self, user_id: str, topic_id: str) -> TopicStatus:
        record = self.catalog.get_progress(user_id, topic_id)
        return record.status if record else TopicStatus.PENDING

    def statuses_for(self, user_id: str) -> Dict[str, TopicStatus]:
        return {p.topic_id: p.status for p in self.catalog.progress_for_user(user_id)}

    async def mark_complete(
        self,
        user_id: str,
        topic_id: str,
        attempt: Optional[QuizAttempt],
    ) -> Progress:
        """
        Mark a topic complete for a user.

        Already-completed topics are returned unchanged. Otherwise the
        attempt must belong to this topic, be fully answered and have
        passed; anything else raises QuizNotPassedError and leaves the
        status Pending.
        """
        self.catalog.get_user(user_id)
        self.catalog.get_topic(topic_id)

        record = self.catalog.get_progress(user_id, topic_id)
        if record and record.status == TopicStatus.COMPLETED:
            return record

        if attempt is None or attempt.topic_id != topic_id:
            raise QuizNotPassedError("Pass the quiz for this topic before marking it complete")
        if not attempt.finished:
            raise QuizNotPassedError("Answer every quiz question before marking the topic complete")
        if not attempt.passed:
            raise QuizNotPassedError("At least one correct answer is needed to complete this topic")

        record = Progress(
            user_id=user_id,
            topic_id=topic_id,
            status=TopicStatus.COMPLETED,
            completed_at=datetime.utcnow(),
            quiz_score=attempt.score,
        )
        await self.catalog.put_progress(record)
        logger.info("User %s completed topic %s (score %d)", user_id, topic_id, attempt.score)
        return record

    def completion_stats(self, user_id: str, topics: Iterable[Topic]) -> dict:
        """
        Completion statistics over the given (visible) topics.

        Returns:
            Dictionary with total, completed, pending and completion_percent
        """
        topics = list(topics)
        statuses = self.statuses_for(user_id)
        completed = sum(1 for t in topics if statuses.get(t.id) == TopicStatus.COMPLETED)
        total = len(topics)

        return {
            "total": total,
            "completed": completed,
            "pending": total - completed,
            "completion_percent": round(completed / total * 100, 1) if total > 0 else 0,
        }
