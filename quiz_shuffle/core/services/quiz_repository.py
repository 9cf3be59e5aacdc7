"""Service holding the validated quizzes available to start."""

from __future__ import annotations

from quiz_shuffle.core.models import Quiz


class QuizRepository:
    """In-memory catalogue of canonical quizzes keyed by quiz id."""

    def __init__(self) -> None:
        self._quizzes: dict[str, Quiz] = {}

    def add_quiz(self, quiz: Quiz) -> None:
        if not quiz.questions:
            raise ValueError("Quiz must contain at least one question.")
        self._quizzes[quiz.quiz_id] = quiz

    def get_quiz(self, quiz_id: str) -> Quiz:
        try:
            return self._quizzes[quiz_id]
        except KeyError:
            raise KeyError(f"Quiz {quiz_id!r} not found") from None

    def list_quizzes(self) -> list[Quiz]:
        return list(self._quizzes.values())
