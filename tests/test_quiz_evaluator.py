"""
Quiz scoring tests.
"""

import pytest

from skillshots.catalog.models import QuizQuestion
from skillshots.core.errors import OutOfRangeError, ValidationError
from skillshots.quiz.evaluator import QuizAttempt, QuizOutcome, QuizSessions


class TestQuizQuestion:

    def test_needs_two_options(self):
        with pytest.raises(ValueError):
            QuizQuestion(question="?", options=["only"], correct_answer_index=0)

    def test_correct_index_within_options(self):
        with pytest.raises(ValueError):
            QuizQuestion(question="?", options=["a", "b"], correct_answer_index=2)


class TestQuizAttempt:

    def test_zero_questions_rejected(self):
        with pytest.raises(ValidationError):
            QuizAttempt("1", [])

    def test_pass_with_one_correct(self, quiz_questions):
        attempt = QuizAttempt("1", quiz_questions)
        attempt.answer(0, 0)
        attempt.answer(1, 2)
        attempt.answer(2, 3)
        assert attempt.score == 1
        assert attempt.finished
        assert attempt.outcome == QuizOutcome.PASS
        assert attempt.passed

    def test_fail_with_zero_correct(self, quiz_questions):
        attempt = QuizAttempt("1", quiz_questions)
        for i in range(3):
            attempt.answer(i, 1)
        assert attempt.score == 0
        assert attempt.outcome == QuizOutcome.FAIL
        assert not attempt.passed

    def test_outcome_undefined_until_finished(self, quiz_questions):
        attempt = QuizAttempt("1", quiz_questions)
        attempt.answer(0, 0)
        assert attempt.score == 1
        assert not attempt.finished
        assert attempt.outcome is None
        assert not attempt.passed

    def test_first_answer_is_locked(self, quiz_questions):
        attempt = QuizAttempt("1", quiz_questions)
        assert attempt.answer(0, 1) == 1
        assert attempt.answer(0, 0) == 1
        assert attempt.answers[0] == 1
        assert attempt.score == 0

    def test_reselecting_keeps_score(self, quiz_questions):
        attempt = QuizAttempt("1", quiz_questions)
        attempt.answer(0, 0)
        attempt.answer(0, 3)
        assert attempt.score == 1
        assert attempt.is_correct(0) is True

    @pytest.mark.parametrize("question, option", [(-1, 0), (3, 0), (0, -1), (0, 4)])
    def test_out_of_range(self, quiz_questions, question, option):
        attempt = QuizAttempt("1", quiz_questions)
        with pytest.raises(OutOfRangeError):
            attempt.answer(question, option)
        assert attempt.answers == [None, None, None]

    def test_summary(self, quiz_questions):
        attempt = QuizAttempt("5", quiz_questions)
        attempt.answer(1, 0)
        assert attempt.summary() == {
            "topic_id": "5",
            "total": 3,
            "answered": 1,
            "score": 1,
            "finished": False,
            "outcome": None,
        }


class TestQuizSessions:

    def test_new_attempt_replaces_old(self, quiz_questions):
        sessions = QuizSessions()
        first = sessions.start("u1", QuizAttempt("1", quiz_questions))
        second = sessions.start("u1", QuizAttempt("2", quiz_questions))
        assert first is not second
        assert sessions.current("u1") is second
        assert sessions.current("u1", "1") is None

    def test_unlimited_regeneration(self, quiz_questions):
        sessions = QuizSessions()
        for _ in range(20):
            attempt = sessions.start("u1", QuizAttempt("1", quiz_questions))
        assert sessions.current("u1", "1") is attempt

    def test_discard(self, quiz_questions):
        sessions = QuizSessions()
        sessions.start("u1", QuizAttempt("1", quiz_questions))
        sessions.discard("u1")
        sessions.discard("u1")
        assert sessions.current("u1") is None

    def test_users_are_independent(self, quiz_questions):
        sessions = QuizSessions()
        a = sessions.start("u1", QuizAttempt("1", quiz_questions))
        b = sessions.start("u2", QuizAttempt("1", quiz_questions))
        assert sessions.current("u1") is a
        assert sessions.current("u2") is b
