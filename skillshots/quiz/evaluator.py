"""
Quiz scoring.

A quiz attempt is an ephemeral, ordered list of generated questions. Each
question accepts exactly one answer; the first selection is final. The
attempt passes with at least one correct answer.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from skillshots.catalog.models import QuizQuestion
from skillshots.core.errors import OutOfRangeError, ValidationError

logger = logging.getLogger(__name__)

PASS_THRESHOLD = 1


class QuizOutcome(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class QuizAttempt:

    def __init__(self, topic_id: str, questions: List[QuizQuestion]):
        if not questions:
            raise ValidationError("A quiz needs at least one question")
        self.topic_id = topic_id
        self.questions = list(questions)
        self.answers: List[Optional[int]] = [None] * len(self.questions)
        self.started_at = datetime.utcnow()

    def answer(self, question_index: int, option_index: int) -> int:
        """
        Record an answer and return the answer on record.

        A question that was already answered keeps its first answer; the
        call is then a no-op.
        """
        if not 0 <= question_index < len(self.questions):
            raise OutOfRangeError(f"Question index {question_index} is out of range")

        question = self.questions[question_index]
        if not 0 <= option_index < len(question.options):
            raise OutOfRangeError(f"Option index {option_index} is out of range")

        if self.answers[question_index] is None:
            self.answers[question_index] = option_index
        return self.answers[question_index]

    def is_correct(self, question_index: int) -> Optional[bool]:
        recorded = self.answers[question_index]
        if recorded is None:
            return None
        return recorded == self.questions[question_index].correct_answer_index

    @property
    def score(self) -> int:
        return sum(1 for i in range(len(self.questions)) if self.is_correct(i))

    @property
    def finished(self) -> bool:
        return all(a is not None for a in self.answers)

    @property
    def outcome(self) -> Optional[QuizOutcome]:
        if not self.finished:
            return None
        return QuizOutcome.PASS if self.score >= PASS_THRESHOLD else QuizOutcome.FAIL

    @property
    def passed(self) -> bool:
        return self.outcome == QuizOutcome.PASS

    def summary(self) -> dict:
        return {
            "topic_id": self.topic_id,
            "total": len(self.questions),
            "answered": sum(1 for a in self.answers if a is not None),
            "score": self.score,
            "finished": self.finished,
            "outcome": self.outcome.value if self.outcome else None,
        }


class QuizSessions:
    """
    At most one outstanding attempt per user.

    Starting a new attempt replaces whatever was there; there is no retry
    cap and no cool-down.
    """

    def __init__(self):
        self._attempts: Dict[str, QuizAttempt] = {}

    def start(self, user_id: str, attempt: QuizAttempt) -> QuizAttempt:
        if user_id in self._attempts:
            logger.debug("Replacing outstanding quiz for %s", user_id)
        self._attempts[user_id] = attempt
        return attempt

    def current(self, user_id: str, topic_id: Optional[str] = None) -> Optional[QuizAttempt]:
        attempt = self._attempts.get(user_id)
        if attempt and topic_id is not None and attempt.topic_id != topic_id:
            return None
        return attempt

    def discard(self, user_id: str):
        self._attempts.pop(user_id, None)
