from __future__ import annotations

import random

import pytest

from quiz_shuffle.core.models import Question, QuestionType, Quiz, RandomizationPolicy

CHOICES = {"A": "Alpha", "B": "Bravo", "C": "Charlie", "D": "Delta"}
TRUE_FALSE = {"True": "True", "False": "False"}


class ReversingRandom(random.Random):
    """Deterministic stand-in whose shuffle simply reverses the sequence."""

    def shuffle(self, x, *args, **kwargs) -> None:
        x.reverse()


def make_question(
    index: int,
    qtype: QuestionType = QuestionType.SINGLE_CHOICE,
    options: dict[str, str] | None = None,
    key: str | list[str] | None = "A",
) -> Question:
    return Question(index=index, type=qtype, text=f"Question {index + 1}", options=options, answer_key=key)


def make_quiz(
    questions: list[Question],
    policy: RandomizationPolicy | None = None,
    quiz_id: str = "quiz-1",
) -> Quiz:
    return Quiz(quiz_id=quiz_id, name="Sample quiz", questions=tuple(questions), randomization=policy)


@pytest.fixture
def choice_questions() -> list[Question]:
    return [make_question(i, options=dict(CHOICES), key="ABCD"[i % 4]) for i in range(5)]


@pytest.fixture
def mixed_questions() -> list[Question]:
    return [
        make_question(0, options=dict(CHOICES), key="C"),
        make_question(1, QuestionType.TRUE_FALSE, options=dict(TRUE_FALSE), key="False"),
        make_question(2, QuestionType.MULTIPLE_ANSWER, options=dict(CHOICES), key=["A", "D"]),
        make_question(3, QuestionType.FILL_IN_BLANK, key=["5", "five"]),
        make_question(4, QuestionType.MATCHING, key=["2", "1", "3"]),
        make_question(5, QuestionType.SHORT_ANSWER, key=None),
    ]


@pytest.fixture
def full_policy() -> RandomizationPolicy:
    return RandomizationPolicy(
        shuffle_questions=True,
        shuffle_options=True,
        use_question_pool=True,
        pool_size=4,
    )
